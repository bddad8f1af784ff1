import pytest
import itertools
import numpy as np

from src.noisy_simulator.simulators import NoisySimulator, get_state_with_qubit
from src.noisy_simulator.opcodes import Opcode, GateType, NoiseType
from tests.helpers.random_sources import SequenceRandom, ConstantRandom
from tests.helpers.functions import vector_almost_equal, within_binomial_tolerance


noise_names = ["depolarizing", "damping", "bitflip", "phaseflip"]
noise_subsets = [subset for k in range(5) for subset in itertools.combinations(noise_names, k)]

zero_noise = {"depolarizing": 0.0, "bitflip": 0.0, "phaseflip": 0.0}


""" Recording """


@pytest.mark.parametrize("subset", noise_subsets)
def test_simulator_records_one_opcode_per_configured_noise(subset):
    sim = NoisySimulator(n_qubit=2, noise_description={name: 0.1 for name in subset})
    sim.hadamard(0)
    assert len(sim.opcodes) == 1 + len(subset)
    sim.cnot(0, 1)
    assert len(sim.opcodes) == 2 * (1 + len(subset))


def test_simulator_noise_opcodes_carry_their_own_probability():
    sim = NoisySimulator(n_qubit=2, noise_description={"phaseflip": 0.3, "bitflip": 0.2, "depolarizing": 0.1})
    sim.cz(1, 0)
    assert sim.opcodes == [
        Opcode(GateType.CZ, (1, 0)),
        Opcode(NoiseType.DEPOLARIZING, (1, 0), (0.1,)),
        Opcode(NoiseType.BITFLIP, (1, 0), (0.2,)),
        Opcode(NoiseType.PHASEFLIP, (1, 0), (0.3,)),
    ]


def test_simulator_records_parameters_dagger_and_controllers():
    sim = NoisySimulator(n_qubit=3)
    sim.xy_cont(0, 1, 0.5, [2], is_dagger=True)
    assert sim.opcodes == [Opcode(GateType.XY, (0, 1), (0.5,), True, frozenset({2}))]


def test_simulator_u22_stores_matrix_entries():
    sim = NoisySimulator(n_qubit=1)
    sim.u22(0, [[0, 1], [1, 0]])
    assert sim.opcodes[0].parameters == (0j, 1 + 0j, 1 + 0j, 0j)


def test_simulator_u22_non_unitary_raises_ValueError():
    sim = NoisySimulator(n_qubit=1)
    with pytest.raises(ValueError):
        sim.u22(0, [[1, 1], [0, 1]])
    assert sim.opcodes == []


def test_simulator_invalid_qubit_raises_ValueError_and_records_nothing():
    sim = NoisySimulator(n_qubit=2, noise_description={"bitflip": 0.1})
    with pytest.raises(ValueError):
        sim.cnot(0, 2)
    assert sim.opcodes == []


def test_simulator_measure_does_not_touch_opcodes():
    sim = NoisySimulator(n_qubit=3, noise_description={"bitflip": 0.1})
    sim.x(0)
    opcodes = list(sim.opcodes)
    sim.measure([2, 0])
    sim.measure([1])
    assert sim.opcodes == opcodes
    assert sim.measure_qubits == [1]


@pytest.mark.parametrize("measure_qubits", [[], [0, 0], [3]])
def test_simulator_invalid_measure_raises_ValueError(measure_qubits):
    sim = NoisySimulator(n_qubit=3)
    with pytest.raises(ValueError):
        sim.measure(measure_qubits)


def test_simulator_clear():
    sim = NoisySimulator(n_qubit=1, noise_description={"bitflip": 0.1})
    sim.x(0)
    sim.clear()
    assert sim.opcodes == []
    assert sim.measure_shots(10) == {0: 10}


@pytest.mark.parametrize("n_qubit", [0, -1, 1.5])
def test_simulator_invalid_n_qubit_raises_ValueError(n_qubit):
    with pytest.raises(ValueError):
        NoisySimulator(n_qubit=n_qubit)


def test_simulator_invalid_measurement_error_length_raises_ValueError():
    with pytest.raises(ValueError):
        NoisySimulator(n_qubit=2, measurement_error=[[0.9, 0.9]])


""" Execution """


def test_simulator_has_handler_for_every_kind():
    sim = NoisySimulator(n_qubit=1)
    assert set(sim._gate_handlers) == set(GateType)
    assert set(sim._noise_handlers) == set(NoiseType)


def test_simulator_unknown_opcode_raises_RuntimeError():
    sim = NoisySimulator(n_qubit=1)
    sim.opcodes.append(Opcode("teleport", (0,)))
    with pytest.raises(RuntimeError):
        sim.execute_once()


def test_simulator_execute_once_starts_from_zero_state():
    sim = NoisySimulator(n_qubit=2)
    sim.x(1)
    sim.execute_once()
    sim.execute_once()
    assert vector_almost_equal(sim.statevector, np.array([0, 0, 1, 0]), 2)


def test_simulator_execute_once_is_reproducible_with_same_draws():
    draws = [0.01, 0.5, 0.2, 0.9, 0.05, 0.7, 0.33, 0.12]
    sim = NoisySimulator(n_qubit=2, noise_description={"depolarizing": 0.4, "bitflip": 0.3, "phaseflip": 0.2},
                         rng=SequenceRandom(draws))
    sim.hadamard(0)
    sim.cnot(0, 1)
    sim.ry(1, 0.3)

    sim.execute_once()
    first = sim.statevector

    sim.rng = SequenceRandom(draws)
    sim.execute_once()
    second = sim.statevector

    assert np.array_equal(first, second)


def test_simulator_noise_draws_once_per_qubit_and_shot():
    rng = SequenceRandom([0.9])
    sim = NoisySimulator(n_qubit=2, noise_description={"depolarizing": 0.1, "bitflip": 0.1}, rng=rng)
    sim.cnot(0, 1)
    sim.x(0)
    sim.execute_once()
    # cnot: 2 channels x 2 qubits, x: 2 channels x 1 qubit
    assert rng.calls == 6


def test_simulator_noise_is_drawn_again_each_shot():
    sim = NoisySimulator(n_qubit=1, noise_description={"bitflip": 0.5}, seed=7)
    sim.x(0)
    counts = sim.measure_shots(1000)
    assert set(counts) == {0, 1}
    assert len(sim.opcodes) == 2


def test_simulator_bitflip_probability_one_flips_every_gate():
    sim = NoisySimulator(n_qubit=1, noise_description={"bitflip": 1.0}, seed=3)
    sim.x(0)
    assert sim.measure_shots(100) == {0: 100}


def test_simulator_damping_fails_loudly():
    sim = NoisySimulator(n_qubit=1, noise_description={"damping": 0.1})
    sim.x(0)
    with pytest.raises(NotImplementedError):
        sim.measure_shots(1)


def test_simulator_controlled_gate():
    sim = NoisySimulator(n_qubit=2)
    sim.x_cont(1, [0])
    assert sim.measure_shots(10) == {0: 10}
    sim.clear()
    sim.x(0)
    sim.x_cont(1, [0])
    assert sim.measure_shots(10) == {3: 10}


def test_simulator_dagger_gate():
    sim = NoisySimulator(n_qubit=1)
    sim.sx(0)
    sim.sx(0, is_dagger=True)
    assert sim.measure_shots(50) == {0: 50}


""" Measurement """


@pytest.mark.parametrize("shots", [0, 1, 17, 500])
def test_simulator_counts_sum_to_shots(shots):
    sim = NoisySimulator(n_qubit=2, noise_description={"depolarizing": 0.2}, seed=11)
    sim.hadamard(0)
    sim.cnot(0, 1)
    counts = sim.measure_shots(shots)
    assert sum(counts.values()) == shots
    assert all(count > 0 for count in counts.values())


def test_simulator_zero_shots_gives_empty_dict():
    sim = NoisySimulator(n_qubit=1)
    sim.hadamard(0)
    assert sim.measure_shots(0) == {}


@pytest.mark.parametrize("shots", [-1, 2.5, "10"])
def test_simulator_invalid_shots_raise_ValueError(shots):
    sim = NoisySimulator(n_qubit=1)
    with pytest.raises(ValueError):
        sim.measure_shots(shots)


def test_simulator_hadamard_is_fair():
    shots = 10000
    sim = NoisySimulator(n_qubit=1, seed=2024)
    sim.hadamard(0)
    sim.measure([0])
    counts = sim.measure_shots(shots)
    assert set(counts) == {0, 1}
    assert within_binomial_tolerance(counts[0], shots, 0.5), f"Found counts {counts}."


def test_simulator_x_gates_are_deterministic_without_noise():
    sim = NoisySimulator(n_qubit=3, noise_description=zero_noise, seed=5)
    sim.x(0)
    sim.x(2)
    assert sim.measure_shots(200) == {5: 200}


@pytest.mark.parametrize("measure_qubits,expected", [([0, 1, 2], 5), ([2, 1, 0], 5), ([2, 1], 1), ([1, 2], 2), ([1], 0)])
def test_simulator_measure_remaps_outcome(measure_qubits, expected):
    sim = NoisySimulator(n_qubit=3)
    sim.x(0)
    sim.x(2)
    sim.measure(measure_qubits)
    assert sim.measure_shots(20) == {expected: 20}


@pytest.mark.parametrize("r,expected", [(0.0, 0), (0.49, 0), (0.51, 1), (0.999, 1)])
def test_simulator_get_measure_walks_cumulative_probability(r, expected):
    sim = NoisySimulator(n_qubit=1, rng=ConstantRandom(r))
    sim.hadamard(0)
    sim.execute_once()
    assert sim.get_measure() == expected


def test_simulator_get_measure_unnormalized_state_raises_RuntimeError():
    sim = NoisySimulator(n_qubit=2, rng=ConstantRandom(0.5))
    sim.execute_once()
    sim.simulator.state = np.zeros(4, dtype=complex)
    with pytest.raises(RuntimeError):
        sim.get_measure()


@pytest.mark.parametrize("read", [
    lambda sim: sim.get_measure(),
    lambda sim: sim.get_measure_no_readout_error(),
    lambda sim: sim.get_probs(),
    lambda sim: sim.statevector,
])
def test_simulator_reading_state_before_execution_raises_RuntimeError(read):
    sim = NoisySimulator(n_qubit=2)
    sim.x(0)
    with pytest.raises(RuntimeError):
        read(sim)


def test_simulator_recording_after_execution_invalidates_state():
    sim = NoisySimulator(n_qubit=1)
    sim.x(0)
    sim.execute_once()
    assert vector_almost_equal(sim.statevector, np.array([0, 1]), 1)
    sim.x(0)
    with pytest.raises(RuntimeError):
        sim.get_probs()
    sim.clear()
    with pytest.raises(RuntimeError):
        sim.get_probs()


def test_simulator_get_probs():
    sim = NoisySimulator(n_qubit=2)
    sim.hadamard(0)
    sim.cnot(0, 1)
    sim.execute_once()
    assert vector_almost_equal(sim.get_probs(), np.array([0.5, 0, 0, 0.5]), 2)
    sim.measure([1])
    assert vector_almost_equal(sim.get_probs(), np.array([0.5, 0.5]), 1)


def test_simulator_perfect_readout_changes_nothing():
    sim = NoisySimulator(n_qubit=2, measurement_error=[[1.0, 1.0], [1.0, 1.0]], seed=1)
    sim.x(1)
    assert sim.measure_shots(100) == {2: 100}


def test_simulator_worst_readout_flips_every_bit():
    sim = NoisySimulator(n_qubit=2, measurement_error=[[0.0, 0.0], [0.0, 0.0]], seed=1)
    sim.x(1)
    assert sim.measure_shots(100) == {1: 100}


def test_simulator_readout_error_only_on_measured_qubits():
    sim = NoisySimulator(n_qubit=2, measurement_error=[[1.0, 1.0], [0.0, 0.0]], seed=1)
    sim.x(1)
    sim.measure([0])
    assert sim.measure_shots(20) == {0: 20}


def test_simulator_readout_error_statistics():
    shots = 5000
    sim = NoisySimulator(n_qubit=1, measurement_error=[[0.9, 0.8]], seed=99)
    sim.x(0)
    counts = sim.measure_shots(shots)
    assert within_binomial_tolerance(counts.get(0, 0), shots, 0.2), f"Found counts {counts}."


def test_get_state_with_qubit():
    assert get_state_with_qubit(0b110, [2, 0]) == 0b01
    assert get_state_with_qubit(0b110, [1, 2]) == 0b11
    assert list(get_state_with_qubit(np.arange(4), [1])) == [0, 0, 1, 1]
