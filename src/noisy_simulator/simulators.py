from ._simulation.simulator import NoisySimulator, get_state_with_qubit
from ._simulation.statevector import StatevectorSimulator
