""" Unitary matrices of the supported gates.
"""

from ._gates.gates import PAULI_X, PAULI_Y, PAULI_Z
from ._gates.gates import hadamard, x, y, z, sx, u22, rx, ry, rz, cnot, cz, iswap, xy
