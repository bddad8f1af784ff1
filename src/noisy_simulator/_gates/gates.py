"""
This module contains the unitary matrices of the gates supported by the state-vector simulator.

Two-qubit matrices are written in the basis |q1 q2>, where the first qubit argument of the gate is the most significant
one. All matrices are returned as new complex arrays, so callers can modify them freely.

Attributes:
    PAULI_X (np.array): Pauli X matrix.
    PAULI_Y (np.array): Pauli Y matrix.
    PAULI_Z (np.array): Pauli Z matrix.
"""

import numpy as np
import scipy.linalg


PAULI_X = np.array(
    [[0, 1],
     [1, 0]],
    dtype=complex
)

PAULI_Y = np.array(
    [[0, -1J],
     [1J, 0]],
    dtype=complex
)

PAULI_Z = np.array(
    [[1, 0],
     [0, -1]],
    dtype=complex
)


def hadamard() -> np.array:
    return np.array(
        [[1, 1],
         [1, -1]],
        dtype=complex
    ) / np.sqrt(2)


def x() -> np.array:
    return PAULI_X.copy()


def y() -> np.array:
    return PAULI_Y.copy()


def z() -> np.array:
    return PAULI_Z.copy()


def sx() -> np.array:
    """ Square root of X, SX @ SX = X. """
    return 0.5 * np.array(
        [[1 + 1J, 1 - 1J],
         [1 - 1J, 1 + 1J]]
    )


def u22(unitary) -> np.array:
    """ Generic single qubit gate from a 2x2 unitary, given as nested sequence or as four entries row-major.

    Raises:
        ValueError: If the input cannot be interpreted as 2x2 matrix or is not unitary.
    """
    matrix = np.array(unitary, dtype=complex).reshape(-1)
    if matrix.size != 4:
        raise ValueError(f"u22() expected a 2x2 matrix but found {matrix.size} entries.")
    matrix = matrix.reshape(2, 2)
    if not np.allclose(matrix @ matrix.conj().T, np.eye(2), atol=1e-8):
        raise ValueError(f"u22() expected a unitary matrix but found {matrix}.")
    return matrix


def rx(theta: float) -> np.array:
    """ Rotation exp(-i theta X / 2) around the x axis of the Bloch sphere. """
    return scipy.linalg.expm(-0.5J * theta * PAULI_X)


def ry(theta: float) -> np.array:
    """ Rotation exp(-i theta Y / 2) around the y axis of the Bloch sphere. """
    return scipy.linalg.expm(-0.5J * theta * PAULI_Y)


def rz(theta: float) -> np.array:
    """ Rotation exp(-i theta Z / 2) around the z axis of the Bloch sphere. """
    return scipy.linalg.expm(-0.5J * theta * PAULI_Z)


def cnot() -> np.array:
    """ CNOT with the first qubit as control and the second as target. """
    return np.array(
        [[1, 0, 0, 0],
         [0, 1, 0, 0],
         [0, 0, 0, 1],
         [0, 0, 1, 0]],
        dtype=complex
    )


def cz() -> np.array:
    return np.diag(np.array([1, 1, 1, -1], dtype=complex))


def iswap() -> np.array:
    return np.array(
        [[1, 0, 0, 0],
         [0, 0, 1J, 0],
         [0, 1J, 0, 0],
         [0, 0, 0, 1]],
        dtype=complex
    )


def xy(theta: float) -> np.array:
    """ XY interaction, a partial iSWAP-like rotation by theta in the {|01>, |10>} subspace. """
    c = np.cos(theta / 2)
    s = np.sin(theta / 2)
    return np.array(
        [[1, 0, 0, 0],
         [0, c, -1J * s, 0],
         [0, -1J * s, c, 0],
         [0, 0, 0, 1]],
        dtype=complex
    )
