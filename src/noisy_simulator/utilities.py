from ._utility.measurement_error import MeasurementErrorMatrix
from ._utility.simulations_utility import (
    load_config,
    simulator_from_config,
    load_measurement_error,
    fix_counts,
    counts_to_probs,
    compute_Hellinger_distance as hellinger_distance,
)
from ._utility.circuit_loader import circuit_from_qiskit
