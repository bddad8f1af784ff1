""" Stochastic Pauli noise channels, each consuming one random draw per call.

At the moment, we support the depolarizing, bitflip and phaseflip channels. Amplitude damping is reserved and raises
NotImplementedError.
"""

from ._simulation.noise import depolarizing, bitflip, phaseflip, damping
