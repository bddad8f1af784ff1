"""Exact state-vector simulation of unitary gates.

The state of n qubits is stored as a complex array of length 2**n in little-endian order: qubit q corresponds to bit q
of the basis index. To apply a gate, the array is viewed as a tensor with one leg of dimension 2 per qubit and the gate
tensor is contracted with the legs of its targets. Controlled gates only act on the slice where all controllers are 1.

The cost of one gate is O(2**n) in time and the state itself is O(2**n) in space.
"""

import numpy as np
import opt_einsum as oe

from .._gates import gates


class StatevectorSimulator(object):
    """Applies unitary gates to a state vector, starting from |0...0>.

    Args:
        nqubit (int): Number of qubits to initialize, zero leaves the simulator empty.

    Example:
        .. code:: python

            from noisy_simulator.simulators import StatevectorSimulator

            sim = StatevectorSimulator(nqubit=2)
            sim.hadamard(0)
            sim.cnot(0, 1)
            print(sim.state)  # Gives [1, 0, 0, 1] / sqrt(2)

    Attributes:
        total_qubit (int): Number of qubits.
        state (np.array): Complex amplitudes of the current state.
    """

    def __init__(self, nqubit: int=0):
        self.init_n_qubit(nqubit)

    def init_n_qubit(self, nqubit: int):
        """ Resets the simulator to the all-zero computational basis state on nqubit qubits.
        """
        if nqubit < 0:
            raise ValueError(f"Expected non-negative number of qubits but found {nqubit}.")
        self.total_qubit = nqubit
        self.state = np.zeros(2**nqubit, dtype=complex)
        self.state[0] = 1.0

    def hadamard(self, qn: int, controllers=(), is_dagger: bool=False):
        self.apply(gates.hadamard(), [qn], controllers, is_dagger)

    def x(self, qn: int, controllers=(), is_dagger: bool=False):
        self.apply(gates.x(), [qn], controllers, is_dagger)

    def y(self, qn: int, controllers=(), is_dagger: bool=False):
        self.apply(gates.y(), [qn], controllers, is_dagger)

    def z(self, qn: int, controllers=(), is_dagger: bool=False):
        self.apply(gates.z(), [qn], controllers, is_dagger)

    def sx(self, qn: int, controllers=(), is_dagger: bool=False):
        self.apply(gates.sx(), [qn], controllers, is_dagger)

    def u22(self, qn: int, unitary, controllers=(), is_dagger: bool=False):
        self.apply(gates.u22(unitary), [qn], controllers, is_dagger)

    def rx(self, qn: int, theta: float, controllers=(), is_dagger: bool=False):
        self.apply(gates.rx(theta), [qn], controllers, is_dagger)

    def ry(self, qn: int, theta: float, controllers=(), is_dagger: bool=False):
        self.apply(gates.ry(theta), [qn], controllers, is_dagger)

    def rz(self, qn: int, theta: float, controllers=(), is_dagger: bool=False):
        self.apply(gates.rz(theta), [qn], controllers, is_dagger)

    def cz(self, qn1: int, qn2: int, controllers=(), is_dagger: bool=False):
        self.apply(gates.cz(), [qn1, qn2], controllers, is_dagger)

    def iswap(self, qn1: int, qn2: int, controllers=(), is_dagger: bool=False):
        self.apply(gates.iswap(), [qn1, qn2], controllers, is_dagger)

    def xy(self, qn1: int, qn2: int, theta: float, controllers=(), is_dagger: bool=False):
        self.apply(gates.xy(theta), [qn1, qn2], controllers, is_dagger)

    def cnot(self, controller: int, target: int, controllers=(), is_dagger: bool=False):
        self.apply(gates.cnot(), [controller, target], controllers, is_dagger)

    def apply(self, gate: np.array, qubits: list, controllers=(), is_dagger: bool=False):
        """Applies a gate on the qubits, conditioned on all controllers being in state 1.

        Args:
            gate (np.array): Unitary of shape (2**k, 2**k), with qubits[0] as most significant qubit.
            qubits (list[int]): The k target qubits.
            controllers (Iterable[int]): Global controllers, may be empty.
            is_dagger (bool): Apply the conjugate transpose of the gate instead.

        Returns:
            None
        """
        k = len(qubits)
        if gate.shape != (2**k, 2**k):
            raise ValueError(f"StatevectorSimulator.apply() expected gate of shape {(2**k, 2**k)} for qubits {qubits} "
                             f"but found {gate.shape}.")
        controllers = sorted(set(controllers))
        self._check_qubits(list(qubits) + controllers)

        if is_dagger:
            gate = gate.conj().T

        n = self.total_qubit
        axis = lambda q: n - 1 - q  # Most significant qubit comes first in the tensor.
        psi = self.state.reshape((2,) * n)

        # Restrict to the subspace where all controllers are 1, this drops the controller legs.
        index = [slice(None)] * n
        for c in controllers:
            index[axis(c)] = 1
        index = tuple(index)
        sub_psi = psi[index]
        remaining_axes = [a for a in range(n) if index[a] == slice(None)]

        # Contract the gate legs with the target legs of the sub tensor
        psi_legs = [oe.get_symbol(i) for i in range(len(remaining_axes))]
        out_legs = list(psi_legs)
        gate_out_legs = []
        gate_in_legs = []
        for j, q in enumerate(qubits):
            pos = remaining_axes.index(axis(q))
            gate_in_legs.append(psi_legs[pos])
            out_leg = oe.get_symbol(len(remaining_axes) + j)
            gate_out_legs.append(out_leg)
            out_legs[pos] = out_leg

        contract_string = "".join(gate_out_legs + gate_in_legs) + "," + "".join(psi_legs) + "->" + "".join(out_legs)
        gate_tensor = gate.reshape((2,) * (2 * k))
        psi[index] = oe.contract(contract_string, gate_tensor, sub_psi)
        self.state = psi.reshape(2**n)

    def _check_qubits(self, qubits: list):
        if len(set(qubits)) != len(qubits):
            raise ValueError(f"Expected distinct target and controller qubits but found {qubits}.")
        for q in qubits:
            if not 0 <= q < self.total_qubit:
                raise ValueError(f"Qubit {q} is outside of the register [0, {self.total_qubit - 1}].")
