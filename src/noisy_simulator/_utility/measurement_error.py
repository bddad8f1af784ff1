"""
Class for loading, storing, validating and applying the readout error of the qubits.
"""

import os
import json
import functools as ft
import numpy as np
import scipy.optimize


class MeasurementErrorMatrix(object):
    """Per-qubit readout calibration. Can simulate readout errors, correct counts, load and save the calibration.

    For qubit i, the calibration is the pair (P(report 0 | true 0), P(report 1 | true 1)).

    Args:
        measurement_error (list[list[float]]): One pair per qubit.

    Example:
        .. code:: python

            from noisy_simulator.utilities import MeasurementErrorMatrix

            mem = MeasurementErrorMatrix([[0.98, 0.95], [0.99, 0.97]])
            mem.confusion_matrix(0)  # [[0.98, 0.05], [0.02, 0.95]]

    Attributes:
        nr_of_qubits (int): Number of calibrated qubits.
        p0 (np.array): P(report 0 | true 0) for each qubit.
        p1 (np.array): P(report 1 | true 1) for each qubit.
    """

    # Filename when storing the calibration in a json file
    f_json = "measurement_error.json"

    def __init__(self, measurement_error):
        matrix = np.array(measurement_error, dtype=float)
        if matrix.size == 0:
            matrix = matrix.reshape(0, 2)
        if matrix.ndim != 2 or matrix.shape[1] != 2:
            raise ValueError(f"Expected one pair of probabilities per qubit but found shape {matrix.shape}.")
        if np.any(matrix < 0.0) or np.any(matrix > 1.0):
            raise ValueError(f"Expected readout probabilities in [0, 1] but found {matrix.tolist()}.")
        self.nr_of_qubits = matrix.shape[0]
        self.p0 = matrix[:, 0]
        self.p1 = matrix[:, 1]

    @classmethod
    def load_from_json(cls, location: str):
        """ Load the calibration from the json file at the location.
        """
        filename = os.path.join(location, cls.f_json)
        if not os.path.exists(filename):
            raise FileNotFoundError(f"MeasurementErrorMatrix found that at {location} the file {cls.f_json} is missing.")

        with open(filename, "r") as f:
            data_dict = json.load(f)

        if "measurement_error" not in data_dict:
            raise ValueError(f"Loading of the measurement error from {filename} was not successful: "
                             f"Key 'measurement_error' is missing.")
        return cls(data_dict["measurement_error"])

    def save_to_json(self, location: str):
        """ Save the calibration to a json file at the location.
        """
        with open(os.path.join(location, self.f_json), 'w') as fp:
            json.dump({"measurement_error": self.to_list()}, fp, indent=4)

    def to_list(self) -> list:
        return [[float(p0), float(p1)] for p0, p1 in zip(self.p0, self.p1)]

    def confusion_matrix(self, qubit: int) -> np.array:
        """ Returns A with A[reported, true] = P(reported | true) for the qubit.
        """
        p0, p1 = self.p0[qubit], self.p1[qubit]
        return np.array(
            [[p0, 1 - p1],
             [1 - p0, p1]]
        )

    def full_confusion_matrix(self, measure_qubits: list) -> np.array:
        """Confusion matrix of the measured register, bit j of the outcome belongs to measure_qubits[j].

        The qubits are assumed to be misread independently, so the matrix is a tensor product.
        """
        self._check_qubits(measure_qubits)
        if len(measure_qubits) == 0:
            return np.eye(1)
        # Bit j is the j-th least significant, thus the last measured qubit comes first in the Kronecker product.
        return ft.reduce(np.kron, [self.confusion_matrix(q) for q in reversed(measure_qubits)])

    def apply_readout_error(self, outcome: int, measure_qubits: list, rng) -> int:
        """Misreports the bits of a measured outcome according to the calibration.

        Draws one random number per measured qubit.

        Args:
            outcome (int): Outcome where bit j is the value of qubit measure_qubits[j].
            measure_qubits (list[int]): The measured qubits.
            rng: Random source with a random() method.

        Returns:
            The reported outcome.
        """
        reported = outcome
        for j, q in enumerate(measure_qubits):
            r = rng.random()
            bit = (outcome >> j) & 1
            p_correct = self.p1[q] if bit else self.p0[q]
            if r >= p_correct:
                reported ^= 1 << j
        return reported

    def correct(self, counts: dict, measure_qubits: list, method: str="inverse") -> np.array:
        """Estimates the distribution before readout errors from the observed counts.

        Args:
            counts (dict): Outcome -> count, as returned by NoisySimulator.measure_shots().
            measure_qubits (list[int]): Qubits that produced the outcomes.
            method (str): "inverse" solves the linear system exactly and may yield negative quasi-probabilities,
                "least_squares" finds the closest non-negative distribution.

        Returns:
            Dense array of length 2**len(measure_qubits) with the corrected probabilities.

        Raises:
            ValueError: For empty counts, outcomes outside of the measured register or an unknown method.
        """
        nbits = len(measure_qubits)
        total = sum(counts.values())
        if total == 0:
            raise ValueError("Cannot correct an empty histogram.")
        p_meas = np.zeros(2**nbits)
        for outcome, count in counts.items():
            if not 0 <= outcome < 2**nbits:
                raise ValueError(f"Outcome {outcome} found in counts, expected outcomes in [0, {2**nbits - 1}] for "
                                 f"{nbits} measured qubit(s).")
            p_meas[outcome] += count
        p_meas = p_meas / total

        a = self.full_confusion_matrix(measure_qubits)
        if method == "inverse":
            return np.linalg.solve(a, p_meas)
        elif method == "least_squares":
            p_true, _ = scipy.optimize.nnls(a, p_meas)
            return p_true / p_true.sum()
        else:
            raise ValueError(f"Unknown correction method {method}, expected 'inverse' or 'least_squares'.")

    def _check_qubits(self, qubits: list):
        for q in qubits:
            if not 0 <= q < self.nr_of_qubits:
                raise ValueError(f"MeasurementErrorMatrix has no calibration for qubit {q}.")

    def __len__(self):
        return self.nr_of_qubits

    def __eq__(self, other):
        return isinstance(other, MeasurementErrorMatrix) and self.to_list() == other.to_list()

    def __str__(self):
        return json.dumps({"measurement_error": self.to_list()}, indent=4)
