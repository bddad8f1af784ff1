"""
Stochastic Pauli noise channels applied during the replay of a circuit.

Each function draws exactly one uniform random number r from rng and either applies a single Pauli operator on the
qubit of the simulator or does nothing. A channel with p = 0 never fires, a channel with p = 1 always fires.
"""

from .statevector import StatevectorSimulator


def depolarizing(simulator: StatevectorSimulator, qubit: int, p: float, rng):
    """Symmetric depolarizing channel with total error probability p.

    The interval [0, p) is split in three equal parts which apply X, Y and Z respectively.

    Args:
        simulator (StatevectorSimulator): Holds the state of the current shot.
        qubit (int): Index of the qubit.
        p (float): Error probability.
        rng: Random source with a random() method returning a float in [0, 1).

    Returns:
        None
    """
    r = rng.random()
    if r >= p:
        return
    if r < p / 3:
        simulator.x(qubit)
    elif r < p / 3 * 2:
        simulator.y(qubit)
    else:
        simulator.z(qubit)


def bitflip(simulator: StatevectorSimulator, qubit: int, p: float, rng):
    """ Applies X with probability p. """
    r = rng.random()
    if r < p:
        simulator.x(qubit)


def phaseflip(simulator: StatevectorSimulator, qubit: int, p: float, rng):
    """ Applies Z with probability p. """
    r = rng.random()
    if r < p:
        simulator.z(qubit)


def damping(simulator: StatevectorSimulator, qubit: int, p: float, rng):
    """Amplitude damping channel.

    Note:
        Amplitude damping depends on the state and cannot be drawn as a Pauli error, so it is not implemented. Configure
        it only once a trajectory formulation is available.

    Raises:
        NotImplementedError: Always.
    """
    raise NotImplementedError(f"Amplitude damping noise (p={p}) on qubit {qubit} is not implemented yet.")
