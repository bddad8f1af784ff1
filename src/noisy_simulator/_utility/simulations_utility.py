"""
Helper functions to configure simulators and to post-process their counts.
"""

import os
import json
import numpy as np

from .._simulation.simulator import NoisySimulator
from .measurement_error import MeasurementErrorMatrix


def load_config(filename: str) -> dict:
    """Loads a simulator configuration from a json file.

    The file contains "n_qubit" and optionally "noise_description" and "measurement_error", for example

    .. code-block:: text

        {
            "n_qubit": 2,
            "noise_description": {"depolarizing": 0.01, "bitflip": 0.002},
            "measurement_error": [[0.98, 0.96], [0.99, 0.97]]
        }
    """
    if not os.path.exists(filename):
        raise FileNotFoundError(f"Configuration file {filename} is missing.")

    with open(filename, "r") as f:
        config = json.load(f)

    if "n_qubit" not in config:
        raise ValueError(f"Configuration in {filename} is missing the key 'n_qubit'.")
    unknown_keys = set(config) - {"n_qubit", "noise_description", "measurement_error"}
    if unknown_keys:
        raise ValueError(f"Configuration in {filename} has unknown keys {sorted(unknown_keys)}.")
    return config


def simulator_from_config(config: dict, rng=None, seed: int=None) -> NoisySimulator:
    """ Creates a NoisySimulator from a configuration as returned by load_config(). """
    return NoisySimulator(
        n_qubit=config["n_qubit"],
        noise_description=config.get("noise_description"),
        measurement_error=config.get("measurement_error"),
        rng=rng,
        seed=seed,
    )


def fix_counts(counts: dict, nbits: int) -> dict:
    """Converts integer outcomes to bitstrings, most significant bit first.

    Example:
        fix_counts({0: 10, 3: 12}, 2) returns {"00": 10, "11": 12}.
    """
    return {format(outcome, 'b').zfill(nbits): count for outcome, count in sorted(counts.items())}


def counts_to_probs(counts: dict, nbits: int) -> np.array:
    """ Dense array of the relative frequencies of the 2**nbits outcomes. """
    probs = np.zeros(2**nbits)
    total = sum(counts.values())
    if total == 0:
        return probs
    for outcome, count in counts.items():
        probs[outcome] = count
    return probs / total


def compute_Hellinger_distance(p_ng: np.array, p_real: np.array) -> float:
    """Computes the Hellinger distance between two probability distributions.

    Args:
        p_ng (np.array): Distribution found by the simulation.
        p_real (np.array): Reference distribution, for example the exact probabilities.

    Returns:
        Distance in [0, 1].
    """
    p_ng = np.asarray(p_ng, dtype=float)
    p_real = np.asarray(p_real, dtype=float)
    if p_ng.shape != p_real.shape:
        raise ValueError(f"Expected distributions of the same shape but found {p_ng.shape} and {p_real.shape}.")
    bc = np.sum(np.sqrt(p_ng * p_real))
    return float(np.sqrt(max(0.0, 1.0 - bc)))


def load_measurement_error(location: str) -> MeasurementErrorMatrix:
    """ Loads the readout calibration stored at the location. """
    return MeasurementErrorMatrix.load_from_json(location)
