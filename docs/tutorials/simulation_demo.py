"""
Run the noisy simulation of a Bell circuit for demonstration purposes.

Usage:
- Do pip install -e . on top level of the repository.
- Run the script, optionally change the noise levels in the config below.
"""

# Standard libraries
import logging
import numpy as np

# Qiskit
from qiskit import QuantumCircuit

# Own library
from noisy_simulator.simulators import NoisySimulator
from noisy_simulator.utilities import circuit_from_qiskit, fix_counts, counts_to_probs, hellinger_distance


logging.basicConfig(level=logging.INFO)


""" Setup """

config = {
    "noise": {
        "depolarizing": 0.01,
        "bitflip": 0.005,
        "phaseflip": 0.005,
    },
    "run": {
        "shots": 2000,
        "seed": 42,
    },
    "measurement_error": [[0.98, 0.95], [0.97, 0.96]],
}


""" Create a Quantum circuit with Qiskit """

circ = QuantumCircuit(2, 2)

circ.h(0)
circ.cx(0, 1)
circ.barrier(range(2))
circ.measure(range(2), range(2))


""" Execute simulation """

sim = circuit_from_qiskit(
    circ,
    noise_description=config["noise"],
    measurement_error=config["measurement_error"],
    seed=config["run"]["seed"],
)
counts = sim.measure_shots(config["run"]["shots"])


""" Same circuit with the recording API """

sim_direct = NoisySimulator(n_qubit=2, noise_description=config["noise"], seed=config["run"]["seed"])
sim_direct.hadamard(0)
sim_direct.cnot(0, 1)
sim_direct.measure([0, 1])
counts_direct = sim_direct.measure_shots(config["run"]["shots"])


""" Result """

ideal = np.array([0.5, 0, 0, 0.5])
raw = counts_to_probs(counts, 2)
corrected = sim.measurement_error.correct(counts, sim.measure_qubits, method="least_squares")

print(f"Counts with readout error: {fix_counts(counts, 2)}")
print(f"Counts without readout error: {fix_counts(counts_direct, 2)}")
print(f"Hellinger distance to the ideal distribution, raw: {hellinger_distance(raw, ideal):.4f}")
print(f"Hellinger distance to the ideal distribution, corrected: {hellinger_distance(corrected, ideal):.4f}")
