"""
Opcodes are the recorded steps of a noisy circuit, either a unitary gate or a noise event.

Gates and noise events use two separate enums, so their tags can never collide. The execution engine dispatches on
the union of both.
"""

import enum
import logging
from typing import FrozenSet, Mapping, NamedTuple, Tuple, Union


_logger = logging.getLogger(__name__)


class GateType(enum.Enum):
    """ Unitary gates supported by the recorder and the state-vector simulator. """
    HADAMARD = "hadamard"
    X = "x"
    Y = "y"
    Z = "z"
    SX = "sx"
    U22 = "u22"
    RX = "rx"
    RY = "ry"
    RZ = "rz"
    CZ = "cz"
    ISWAP = "iswap"
    XY = "xy"
    CNOT = "cnot"


class NoiseType(enum.Enum):
    """ Stochastic noise channels. The member order is the order in which noise opcodes are inserted. """
    DEPOLARIZING = "depolarizing"
    DAMPING = "damping"
    BITFLIP = "bitflip"
    PHASEFLIP = "phaseflip"


OpcodeKind = Union[GateType, NoiseType]


# Expected number of (qubits, parameters) for each kind.
ARITY = {
    GateType.HADAMARD: (1, 0),
    GateType.X: (1, 0),
    GateType.Y: (1, 0),
    GateType.Z: (1, 0),
    GateType.SX: (1, 0),
    GateType.U22: (1, 4),
    GateType.RX: (1, 1),
    GateType.RY: (1, 1),
    GateType.RZ: (1, 1),
    GateType.CZ: (2, 0),
    GateType.ISWAP: (2, 0),
    GateType.XY: (2, 1),
    GateType.CNOT: (2, 0),
}


class Opcode(NamedTuple):
    """ Immutable record of one circuit step.

    Attributes:
        kind (OpcodeKind): Gate or noise tag.
        qubits (tuple[int]): Target qubits, never empty. Noise opcodes carry all qubits touched by the preceding gate.
        parameters (tuple): Rotation angle, noise probability or the four entries of a U22 matrix (row-major).
        is_dagger (bool): Whether the adjoint of the gate is applied.
        controllers (frozenset[int]): Qubits that globally control the gate, empty if uncontrolled.
    """
    kind: OpcodeKind
    qubits: Tuple[int, ...]
    parameters: tuple = ()
    is_dagger: bool = False
    controllers: FrozenSet[int] = frozenset()

    def validate(self, nqubit: int):
        """ Checks the opcode against its kind and the register size, raises ValueError if it is malformed.
        """
        if len(self.qubits) == 0:
            raise ValueError(f"Opcode {self.kind} has no target qubits.")
        if len(set(self.qubits)) != len(self.qubits):
            raise ValueError(f"Opcode {self.kind} found duplicate target qubits {self.qubits}.")
        for q in tuple(self.qubits) + tuple(self.controllers):
            if not 0 <= q < nqubit:
                raise ValueError(f"Opcode {self.kind} found qubit {q} outside of the register [0, {nqubit - 1}].")
        if not set(self.qubits).isdisjoint(self.controllers):
            raise ValueError(f"Opcode {self.kind} found controllers {set(self.controllers)} overlapping the targets "
                             f"{self.qubits}.")

        if isinstance(self.kind, NoiseType):
            if len(self.parameters) != 1:
                raise ValueError(f"Noise opcode {self.kind} expects one probability but found {self.parameters}.")
            if self.is_dagger or self.controllers:
                raise ValueError(f"Noise opcode {self.kind} cannot be daggered or controlled.")
            return

        nr_qubits, nr_parameters = ARITY[self.kind]
        if len(self.qubits) != nr_qubits:
            raise ValueError(f"Gate {self.kind} expects {nr_qubits} qubit(s) but found {self.qubits}.")
        if len(self.parameters) != nr_parameters:
            raise ValueError(f"Gate {self.kind} expects {nr_parameters} parameter(s) but found {self.parameters}.")


class NoiseConfiguration(object):
    """ Probabilities of the enabled noise channels, built once from a name -> probability mapping.

    Unrecognized names are ignored. A channel which is absent is disabled.

    Args:
        noise_description (Mapping[str, float]): For example {"depolarizing": 0.01, "bitflip": 0.001}.

    Example:
        .. code:: python

            from noisy_simulator.opcodes import NoiseConfiguration, NoiseType

            noise = NoiseConfiguration({"depolarizing": 0.01, "unknown": 1.0})
            noise[NoiseType.DEPOLARIZING]  # 0.01
            len(noise)                     # 1
    """

    def __init__(self, noise_description: Mapping[str, float] = None):
        probabilities = {}
        for name, p in (noise_description or {}).items():
            try:
                noise_type = NoiseType(name)
            except ValueError:
                _logger.debug(f"Ignored unrecognized noise channel '{name}'.")
                continue
            p = float(p)
            if not 0.0 <= p <= 1.0:
                raise ValueError(f"Expected probability of noise channel '{name}' in [0, 1] but found {p}.")
            probabilities[noise_type] = p

        # Fixed insertion order, independent of the order of the description.
        self._probabilities = {t: probabilities[t] for t in NoiseType if t in probabilities}

    def items(self):
        return self._probabilities.items()

    def get(self, noise_type: NoiseType, default=None):
        return self._probabilities.get(noise_type, default)

    def __getitem__(self, noise_type: NoiseType) -> float:
        return self._probabilities[noise_type]

    def __contains__(self, noise_type) -> bool:
        return noise_type in self._probabilities

    def __len__(self) -> int:
        return len(self._probabilities)

    def __iter__(self):
        return iter(self._probabilities)

    def __eq__(self, other):
        return isinstance(other, NoiseConfiguration) and self._probabilities == other._probabilities

    def __repr__(self):
        content = ", ".join(f"'{t.value}': {p}" for t, p in self._probabilities.items())
        return f"NoiseConfiguration({{{content}}})"
