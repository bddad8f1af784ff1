from .simulators import NoisySimulator, StatevectorSimulator
from .opcodes import Opcode, GateType, NoiseType, NoiseConfiguration
from .noise_models import depolarizing, bitflip, phaseflip, damping
from .utilities import (
    MeasurementErrorMatrix,
    load_config,
    simulator_from_config,
    load_measurement_error,
    fix_counts,
    counts_to_probs,
    hellinger_distance,
    circuit_from_qiskit,
)


__all__ = ["NoisySimulator", "StatevectorSimulator"]
__all__ += ["Opcode", "GateType", "NoiseType", "NoiseConfiguration"]
__all__ += ["depolarizing", "bitflip", "phaseflip", "damping"]
__all__ += [
    "MeasurementErrorMatrix",
    "load_config",
    "simulator_from_config",
    "load_measurement_error",
    "fix_counts",
    "counts_to_probs",
    "hellinger_distance",
    "circuit_from_qiskit",
]
