"""
Store a readout calibration as json and use it to correct measured counts.

Usage:
- Do pip install -e . on top level of the repository.
- Run the script with path on top level of the repository.

Note:
- The file is saved in the outputs folder.
"""

import os

from noisy_simulator.simulators import NoisySimulator
from noisy_simulator.utilities import MeasurementErrorMatrix


# Calibration, one pair (P(0|0), P(1|1)) per qubit
mem = MeasurementErrorMatrix([[0.97, 0.93], [0.98, 0.94], [0.96, 0.95]])

# Save
location = "outputs/"
os.makedirs(location, exist_ok=True)
mem.save_to_json(location)
print(f"Saved calibration to {location}{MeasurementErrorMatrix.f_json}:\n{mem}")

# Load and simulate GHZ state with readout error
mem_loaded = MeasurementErrorMatrix.load_from_json(location)
sim = NoisySimulator(n_qubit=3, measurement_error=mem_loaded, seed=1)
sim.hadamard(0)
sim.cnot(0, 1)
sim.cnot(1, 2)

counts = sim.measure_shots(5000)
print(f"Raw counts: {dict(sorted(counts.items()))}")
print(f"Corrected probabilities: {mem_loaded.correct(counts, sim.measure_qubits).round(3)}")
