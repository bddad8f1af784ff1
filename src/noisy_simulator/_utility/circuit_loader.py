"""
Records a Qiskit QuantumCircuit into a NoisySimulator.

Qiskit and the simulator both use little-endian qubit order, so the counts can be compared with Qiskit's counts after
fix_counts().
"""

import logging
import numpy as np
from qiskit import QuantumCircuit

from .._simulation.simulator import NoisySimulator


_logger = logging.getLogger(__name__)


# Single qubit gates without a dedicated opcode, recorded as generic 2x2 unitaries.
_u22_gates = {
    "id": np.eye(2),
    "s": np.diag([1, 1J]),
    "sdg": np.diag([1, -1J]),
    "t": np.diag([1, np.exp(1J * np.pi / 4)]),
    "tdg": np.diag([1, np.exp(-1J * np.pi / 4)]),
}


def circuit_from_qiskit(circ: QuantumCircuit,
                        noise_description: dict=None,
                        measurement_error=None,
                        rng=None,
                        seed: int=None) -> NoisySimulator:
    """Creates a NoisySimulator and records the instructions of the circuit.

    Args:
        circ (QuantumCircuit): Circuit with final measurements only.
        noise_description (dict[str, float]): Noise channel name -> probability.
        measurement_error (list[list[float]]): Optional readout calibration per qubit.
        rng: Random source, see NoisySimulator.
        seed (int): Seed of the default random source.

    Returns:
        The simulator, ready for measure_shots(). Outcome bit j is the j-th measured classical bit in ascending order.

    Example:
        .. code:: python

            from qiskit import QuantumCircuit
            from noisy_simulator.utilities import circuit_from_qiskit, fix_counts

            circ = QuantumCircuit(2, 2)
            circ.h(0)
            circ.cx(0, 1)
            circ.measure([0, 1], [0, 1])

            sim = circuit_from_qiskit(circ, noise_description={"bitflip": 0.01}, seed=0)
            counts = fix_counts(sim.measure_shots(1000), 2)  # {"00": ..., "11": ..., ...}

    Raises:
        NotImplementedError: For instructions without counterpart, e.g. resets or mid-circuit measurements, and for
            measurements which leave gaps in the classical bits.
    """
    if not isinstance(circ, QuantumCircuit):
        raise ValueError(f"Expected argument circ to be of type QuantumCircuit, but found {type(circ)}.")

    sim = NoisySimulator(
        n_qubit=circ.num_qubits,
        noise_description=noise_description,
        measurement_error=measurement_error,
        rng=rng,
        seed=seed,
    )

    measured = {}  # clbit -> qubit
    for instr in circ.data:
        name = instr.operation.name
        q = [circ.find_bit(qb).index for qb in instr.qubits]
        params = [float(p) for p in instr.operation.params] if name in ("rx", "ry", "rz") else []

        if name == "barrier":
            continue

        if name == "measure":
            c = circ.find_bit(instr.clbits[0]).index
            measured[c] = q[0]
            continue

        if any(qubit in measured.values() for qubit in q):
            raise NotImplementedError(f"Operation {name} after a measurement on qubits {q}, mid-circuit measurements "
                                      f"are not implemented.")

        if name == "h":
            sim.hadamard(q[0])
        elif name == "x":
            sim.x(q[0])
        elif name == "y":
            sim.y(q[0])
        elif name == "z":
            sim.z(q[0])
        elif name == "sx":
            sim.sx(q[0])
        elif name == "sxdg":
            sim.sx(q[0], is_dagger=True)
        elif name == "rx":
            sim.rx(q[0], params[0])
        elif name == "ry":
            sim.ry(q[0], params[0])
        elif name == "rz":
            sim.rz(q[0], params[0])
        elif name in _u22_gates:
            sim.u22(q[0], _u22_gates[name])
        elif name == "unitary" and len(q) == 1:
            sim.u22(q[0], instr.operation.to_matrix())
        elif name == "cx":
            sim.cnot(q[0], q[1])
        elif name == "cz":
            sim.cz(q[0], q[1])
        elif name == "cy":
            sim.y_cont(q[1], [q[0]])
        elif name == "ch":
            sim.hadamard_cont(q[1], [q[0]])
        elif name == "ccx":
            sim.x_cont(q[2], [q[0], q[1]])
        elif name == "iswap":
            sim.iswap(q[0], q[1])
        else:
            raise NotImplementedError(f"Operation {name} found in circuit, which is not implemented yet.")

    if measured:
        if sorted(measured) != list(range(len(measured))):
            raise NotImplementedError(f"Measurements into classical bits {sorted(measured)} found, only the classical "
                                      f"bits 0 to {len(measured) - 1} without gaps are implemented.")
        sim.measure([measured[c] for c in sorted(measured)])

    _logger.debug(f"Recorded {len(sim.opcodes)} opcodes from circuit '{circ.name}', measuring {sim.measure_qubits}.")
    return sim
