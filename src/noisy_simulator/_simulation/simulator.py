"""Performs noisy simulations by recording a circuit once and replaying it shot by shot.

Each gate call records one gate opcode followed by one noise opcode per configured noise channel. Which channels get an
opcode is fixed at recording time, whether an error actually fires is drawn again in every shot. Each shot starts from
|0...0>, replays the opcodes on a state-vector simulator and samples one outcome with the Born rule.
"""

import logging
from collections import Counter
import numpy as np

from .opcodes import Opcode, GateType, NoiseType, NoiseConfiguration
from .statevector import StatevectorSimulator
from . import noise as noise_channels
from .._gates import gates
from .._utility.measurement_error import MeasurementErrorMatrix


_logger = logging.getLogger(__name__)


class NoisySimulator(object):
    """
    Records a circuit of unitary gates with stochastic Pauli noise and samples measurement outcomes over many shots.

    Args:
        n_qubit (int): Number of qubits of the register.
        noise_description (dict[str, float]): Noise channel name -> probability. Recognized names are "depolarizing",
            "damping", "bitflip" and "phaseflip", others are ignored.
        measurement_error (list[list[float]]): Optional readout calibration, one pair
            (P(report 0 | true 0), P(report 1 | true 1)) per qubit.
        rng: Random source with a random() method returning floats in [0, 1). Defaults to a numpy Generator.
        seed (int): Seed for the default numpy Generator, ignored if rng is given.

    Example:
        .. code:: python

            from noisy_simulator.simulators import NoisySimulator

            sim = NoisySimulator(n_qubit=2, noise_description={"depolarizing": 0.01}, seed=42)
            sim.hadamard(0)
            sim.cnot(0, 1)
            sim.measure([0, 1])

            counts = sim.measure_shots(1000)
            print(counts)  # e.g. {0: 497, 3: 495, 1: 4, 2: 4}

    Note:
        Outcome bit j is the value of qubit measure_qubits[j].

    Attributes:
        nqubit (int): Number of qubits.
        noise (NoiseConfiguration): Enabled noise channels.
        measurement_error (MeasurementErrorMatrix): Readout calibration or None.
        opcodes (list[Opcode]): The recorded circuit.
        measure_qubits (list[int]): Qubits reported by the measurement, in order.
        simulator (StatevectorSimulator): Holds the state of the current shot.
    """

    def __init__(self,
                 n_qubit: int,
                 noise_description: dict=None,
                 measurement_error=None,
                 rng=None,
                 seed: int=None):
        if not isinstance(n_qubit, (int, np.integer)) or n_qubit < 1:
            raise ValueError(f"Expected positive number of qubits but found {n_qubit}.")
        self.nqubit = int(n_qubit)
        self.noise = NoiseConfiguration(noise_description)
        self.measurement_error = self._load_measurement_error(measurement_error)
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.opcodes = []
        self.measure_qubits = list(range(self.nqubit))
        self.simulator = StatevectorSimulator()
        self._executed = False

        self._gate_handlers = {
            GateType.HADAMARD: lambda op: self.simulator.hadamard(op.qubits[0], op.controllers, op.is_dagger),
            GateType.X: lambda op: self.simulator.x(op.qubits[0], op.controllers, op.is_dagger),
            GateType.Y: lambda op: self.simulator.y(op.qubits[0], op.controllers, op.is_dagger),
            GateType.Z: lambda op: self.simulator.z(op.qubits[0], op.controllers, op.is_dagger),
            GateType.SX: lambda op: self.simulator.sx(op.qubits[0], op.controllers, op.is_dagger),
            GateType.U22: lambda op: self.simulator.u22(op.qubits[0], op.parameters, op.controllers, op.is_dagger),
            GateType.RX: lambda op: self.simulator.rx(op.qubits[0], op.parameters[0], op.controllers, op.is_dagger),
            GateType.RY: lambda op: self.simulator.ry(op.qubits[0], op.parameters[0], op.controllers, op.is_dagger),
            GateType.RZ: lambda op: self.simulator.rz(op.qubits[0], op.parameters[0], op.controllers, op.is_dagger),
            GateType.CZ: lambda op: self.simulator.cz(*op.qubits, op.controllers, op.is_dagger),
            GateType.ISWAP: lambda op: self.simulator.iswap(*op.qubits, op.controllers, op.is_dagger),
            GateType.XY: lambda op: self.simulator.xy(*op.qubits, op.parameters[0], op.controllers, op.is_dagger),
            GateType.CNOT: lambda op: self.simulator.cnot(*op.qubits, op.controllers, op.is_dagger),
        }
        self._noise_handlers = {
            NoiseType.DEPOLARIZING: noise_channels.depolarizing,
            NoiseType.DAMPING: noise_channels.damping,
            NoiseType.BITFLIP: noise_channels.bitflip,
            NoiseType.PHASEFLIP: noise_channels.phaseflip,
        }

    def _load_measurement_error(self, measurement_error):
        if measurement_error is None:
            return None
        if not isinstance(measurement_error, MeasurementErrorMatrix):
            if len(measurement_error) == 0:
                return None
            measurement_error = MeasurementErrorMatrix(measurement_error)
        if len(measurement_error) != self.nqubit:
            raise ValueError(f"Expected measurement error for {self.nqubit} qubits but found "
                             f"{len(measurement_error)}.")
        return measurement_error

    """ Recording """

    def clear(self):
        """ Removes all recorded opcodes, the measured qubits are kept. """
        self.opcodes = []
        self._executed = False

    def insert_error(self, qubits: list):
        """ Appends one noise opcode per configured noise channel on the qubits, carrying its probability.
        """
        for noise_type, p in self.noise.items():
            self.opcodes.append(Opcode(noise_type, tuple(qubits), (p,)))

    def _record(self, kind: GateType, qubits: list, parameters: tuple, controllers, is_dagger: bool):
        opcode = Opcode(
            kind=kind,
            qubits=tuple(int(q) for q in qubits),
            parameters=tuple(parameters),
            is_dagger=bool(is_dagger),
            controllers=frozenset(int(c) for c in controllers),
        )
        opcode.validate(self.nqubit)
        self.opcodes.append(opcode)
        self.insert_error(opcode.qubits)
        self._executed = False

    def hadamard(self, qn: int, is_dagger: bool=False):
        self.hadamard_cont(qn, [], is_dagger)

    def x(self, qn: int, is_dagger: bool=False):
        self.x_cont(qn, [], is_dagger)

    def y(self, qn: int, is_dagger: bool=False):
        self.y_cont(qn, [], is_dagger)

    def z(self, qn: int, is_dagger: bool=False):
        self.z_cont(qn, [], is_dagger)

    def sx(self, qn: int, is_dagger: bool=False):
        self.sx_cont(qn, [], is_dagger)

    def u22(self, qn: int, unitary, is_dagger: bool=False):
        self.u22_cont(qn, unitary, [], is_dagger)

    def rx(self, qn: int, theta: float, is_dagger: bool=False):
        self.rx_cont(qn, theta, [], is_dagger)

    def ry(self, qn: int, theta: float, is_dagger: bool=False):
        self.ry_cont(qn, theta, [], is_dagger)

    def rz(self, qn: int, theta: float, is_dagger: bool=False):
        self.rz_cont(qn, theta, [], is_dagger)

    def cz(self, qn1: int, qn2: int, is_dagger: bool=False):
        self.cz_cont(qn1, qn2, [], is_dagger)

    def iswap(self, qn1: int, qn2: int, is_dagger: bool=False):
        self.iswap_cont(qn1, qn2, [], is_dagger)

    def xy(self, qn1: int, qn2: int, theta: float, is_dagger: bool=False):
        self.xy_cont(qn1, qn2, theta, [], is_dagger)

    def cnot(self, qn1: int, qn2: int, is_dagger: bool=False):
        self.cnot_cont(qn1, qn2, [], is_dagger)

    def hadamard_cont(self, qn: int, global_controller: list, is_dagger: bool=False):
        self._record(GateType.HADAMARD, [qn], (), global_controller, is_dagger)

    def x_cont(self, qn: int, global_controller: list, is_dagger: bool=False):
        self._record(GateType.X, [qn], (), global_controller, is_dagger)

    def y_cont(self, qn: int, global_controller: list, is_dagger: bool=False):
        self._record(GateType.Y, [qn], (), global_controller, is_dagger)

    def z_cont(self, qn: int, global_controller: list, is_dagger: bool=False):
        self._record(GateType.Z, [qn], (), global_controller, is_dagger)

    def sx_cont(self, qn: int, global_controller: list, is_dagger: bool=False):
        self._record(GateType.SX, [qn], (), global_controller, is_dagger)

    def u22_cont(self, qn: int, unitary, global_controller: list, is_dagger: bool=False):
        """ Records a generic 2x2 unitary, stored as its four entries in row-major order. """
        entries = tuple(complex(v) for v in gates.u22(unitary).reshape(-1))
        self._record(GateType.U22, [qn], entries, global_controller, is_dagger)

    def rx_cont(self, qn: int, theta: float, global_controller: list, is_dagger: bool=False):
        self._record(GateType.RX, [qn], (float(theta),), global_controller, is_dagger)

    def ry_cont(self, qn: int, theta: float, global_controller: list, is_dagger: bool=False):
        self._record(GateType.RY, [qn], (float(theta),), global_controller, is_dagger)

    def rz_cont(self, qn: int, theta: float, global_controller: list, is_dagger: bool=False):
        self._record(GateType.RZ, [qn], (float(theta),), global_controller, is_dagger)

    def cz_cont(self, qn1: int, qn2: int, global_controller: list, is_dagger: bool=False):
        self._record(GateType.CZ, [qn1, qn2], (), global_controller, is_dagger)

    def iswap_cont(self, qn1: int, qn2: int, global_controller: list, is_dagger: bool=False):
        self._record(GateType.ISWAP, [qn1, qn2], (), global_controller, is_dagger)

    def xy_cont(self, qn1: int, qn2: int, theta: float, global_controller: list, is_dagger: bool=False):
        self._record(GateType.XY, [qn1, qn2], (float(theta),), global_controller, is_dagger)

    def cnot_cont(self, qn1: int, qn2: int, global_controller: list, is_dagger: bool=False):
        self._record(GateType.CNOT, [qn1, qn2], (), global_controller, is_dagger)

    def measure(self, measure_qubits: list):
        """ Sets the qubits to report and their order, replacing the previous selection.
        """
        measure_qubits = [int(q) for q in measure_qubits]
        if len(measure_qubits) == 0:
            raise ValueError("Expected at least one qubit to measure.")
        if len(set(measure_qubits)) != len(measure_qubits):
            raise ValueError(f"Found duplicate qubits in measure_qubits {measure_qubits}.")
        if any(not 0 <= q < self.nqubit for q in measure_qubits):
            raise ValueError(f"Expected measured qubits in [0, {self.nqubit - 1}] but found {measure_qubits}.")
        self.measure_qubits = measure_qubits

    """ Execution """

    def execute_once(self):
        """ Replays the recorded opcodes on |0...0>, drawing fresh noise for this shot.
        """
        self._executed = False
        self.simulator.init_n_qubit(self.nqubit)
        for opcode in self.opcodes:
            self._execute_opcode(opcode)
        self._executed = True

    def _execute_opcode(self, opcode: Opcode):
        gate_handler = self._gate_handlers.get(opcode.kind)
        if gate_handler is not None:
            gate_handler(opcode)
            return

        noise_handler = self._noise_handlers.get(opcode.kind)
        if noise_handler is not None:
            for qubit in opcode.qubits:
                noise_handler(self.simulator, qubit, opcode.parameters[0], self.rng)
            return

        raise RuntimeError(f"Failed to handle opcode = {opcode.kind}\nPlease check.")

    @property
    def statevector(self) -> np.array:
        """ Copy of the state after the last executed shot. """
        self._check_executed()
        return self.simulator.state.copy()

    def _check_executed(self):
        if not self._executed:
            raise RuntimeError("No shot executed yet, call execute_once() before reading the state.")

    """ Measurement """

    def get_measure_no_readout_error(self) -> int:
        """Samples one outcome from the current state with the Born rule.

        Returns:
            The first basis index whose cumulative probability exceeds a uniform draw, remapped to measure_qubits.

        Raises:
            RuntimeError: If the cumulative probability never exceeds the draw, which means the state is not normalized.
                Also raised if no shot was executed yet.
        """
        self._check_executed()
        r = self.rng.random()
        cumulative = np.cumsum(np.abs(self.simulator.state)**2)
        i = int(np.searchsorted(cumulative, r, side="right"))
        if i >= cumulative.size:
            raise RuntimeError("NoisySimulator.get_measure() internal fatal error! "
                               f"Cumulative probability {cumulative[-1]} never exceeded r = {r}.")
        return get_state_with_qubit(i, self.measure_qubits)

    def get_measure(self) -> int:
        """ Samples one outcome and applies the readout error if a measurement error matrix is configured.
        """
        outcome = self.get_measure_no_readout_error()
        if self.measurement_error is not None:
            outcome = self.measurement_error.apply_readout_error(outcome, self.measure_qubits, self.rng)
        return outcome

    def get_probs(self) -> np.array:
        """ Exact outcome probabilities of the current state over measure_qubits, without readout error.
        """
        self._check_executed()
        probs = np.abs(self.simulator.state)**2
        outcomes = get_state_with_qubit(np.arange(probs.size), self.measure_qubits)
        return np.bincount(outcomes, weights=probs, minlength=2**len(self.measure_qubits))

    def measure_shots(self, shots: int) -> dict:
        """Runs the circuit shots times and counts the outcomes.

        Args:
            shots (int): Number of independent executions.

        Returns:
            dict mapping each observed outcome to its count. The counts sum to shots.
        """
        if not isinstance(shots, (int, np.integer)):
            raise ValueError(f"Expected argument shots to be of type int, but found {type(shots)}.")
        if shots < 0:
            raise ValueError(f"Expected non-negative number of shots but found {shots}.")

        measured_result = Counter()
        for _ in range(shots):
            self.execute_once()
            measured_result[self.get_measure()] += 1

        _logger.info(f"Sampled {shots} shots of {len(self.opcodes)} opcodes on {self.nqubit} qubits, "
                     f"found {len(measured_result)} distinct outcomes.")
        return dict(measured_result)


def get_state_with_qubit(index, measure_qubits: list):
    """Extracts the bits of the measured qubits from a basis index.

    Bit j of the result is bit measure_qubits[j] of index. Works on integers and on numpy integer arrays.

    Example:
        get_state_with_qubit(0b110, [2, 0]) gives 0b01.
    """
    result = 0
    for j, q in enumerate(measure_qubits):
        result = result | (((index >> q) & 1) << j)
    if isinstance(result, np.ndarray):
        return result
    return int(result)
