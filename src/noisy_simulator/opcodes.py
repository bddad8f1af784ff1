""" Opcodes recorded by the NoisySimulator and the configuration of the noise channels.
"""

from ._simulation.opcodes import Opcode, OpcodeKind, GateType, NoiseType, NoiseConfiguration
