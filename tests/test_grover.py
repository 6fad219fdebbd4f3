"""
Unit tests for amplitude amplification and solution counting.
"""

import math

import numpy as np
import pytest
from qiskit import QuantumCircuit
from qiskit.quantum_info import Statevector

from qknap.core.arithmetic import int_to_bits
from qknap.core.classical import count_solutions, satisfies
from qknap.core.instance import KnapsackInstance
from qknap.grover import (
    AmplitudeAmplifier,
    EnumerationCounter,
    SolutionCounter,
    StatevectorCounter,
    apply_diffuser,
    grover_iterations,
    success_probability,
)


@pytest.fixture
def sample_instance():
    return KnapsackInstance(weights=(2, 3, 1), profits=(3, 4, 2), bounds=(1, 2, 1), capacity=4)


class FixedCounter(SolutionCounter):
    def __init__(self, m):
        self.m = m
        self.calls = []

    def count(self, instance, threshold):
        self.calls.append(threshold)
        return self.m


class TestIterationCount:
    """round(π/4 · √(N/m))."""

    @pytest.mark.parametrize("n,m,expected", [
        (16, 1, 3),
        (16, 2, 2),
        (16, 5, 1),
        (16, 16, 1),
        (64, 1, 6),
        (1024, 1, 25),
        (4, 3, 0),
        (8, 5, 0),
        (16, 12, 0),
    ])
    def test_closed_form(self, n, m, expected):
        assert grover_iterations(n, m) == expected

    @pytest.mark.parametrize("n", [4, 8, 16, 64])
    def test_never_worse_than_plain_sampling(self, n):
        for m in range(1, n + 1):
            k = grover_iterations(n, m)
            assert success_probability(n, m, k) >= m / n - 1e-9, f"N={n}, m={m}, k={k}"

    def test_no_marked_states_skips_loop(self):
        assert grover_iterations(16, 0) == 0
        assert success_probability(16, 0, 3) == 0.0

    def test_success_probability_formula(self):
        # m/N = 1/4: one iteration rotates exactly onto the marked subspace
        assert success_probability(4, 1, 1) == pytest.approx(1.0)
        assert success_probability(16, 2, 2) == pytest.approx(np.sin(5 * math.asin(math.sqrt(1 / 8))) ** 2)


class TestDiffuser:
    """Inversion about the mean."""

    def test_single_qubit(self):
        qc = QuantumCircuit(1)
        apply_diffuser(qc, qc.qubits)
        assert qc.count_ops().get('z', 0) == 1

    def test_reflects_about_uniform_state(self):
        n = 3
        qc = QuantumCircuit(n)
        qc.h(range(n))
        qc.z(0)  # flip sign of odd basis states
        apply_diffuser(qc, qc.qubits)

        # 2|s⟩⟨s| - I maps a state orthogonal to |s⟩ to its negative (up to global phase)
        before = QuantumCircuit(n)
        before.h(range(n))
        before.z(0)
        overlap = np.vdot(Statevector(before).data, Statevector(qc).data)
        assert abs(overlap) == pytest.approx(1.0)


class TestAmplitudeAmplifier:
    """Search circuit vs theory."""

    @pytest.mark.parametrize("threshold", [1, 3, 4, 5])
    def test_marked_probability_matches_theory(self, sample_instance, threshold):
        amp = AmplitudeAmplifier(sample_instance, threshold)
        circuit = amp.build_circuit(measure=False)

        layout = sample_instance.layout()
        positions = [circuit.find_bit(q).index for q in circuit.qregs[0]]
        probabilities = Statevector(circuit).probabilities(positions)

        p_marked = 0.0
        for value, p in enumerate(probabilities):
            counts = layout.decode(int_to_bits(value, layout.num_qubits))
            if satisfies(sample_instance, counts, threshold):
                p_marked += p

        assert p_marked == pytest.approx(amp.success_probability, abs=1e-6)
        assert amp.success_probability > 0.5

    def test_setup_values(self, sample_instance):
        amp = AmplitudeAmplifier(sample_instance, 4)
        assert amp.search_space == 16
        assert amp.marked == 2
        assert amp.iterations == 2
        assert amp.has_solutions

    def test_no_solutions(self, sample_instance):
        amp = AmplitudeAmplifier(sample_instance, 6)
        assert not amp.has_solutions
        assert amp.iterations == 0

    def test_dense_marking_skips_iterations(self):
        instance = KnapsackInstance(weights=(1,), profits=(2,), bounds=(3,), capacity=3)
        amp = AmplitudeAmplifier(instance, 1)
        assert amp.marked == 3
        assert amp.iterations == 0
        assert amp.success_probability == pytest.approx(0.75)

    def test_measured_circuit(self, sample_instance):
        circuit = AmplitudeAmplifier(sample_instance, 4).build_circuit()
        assert [c.name for c in circuit.cregs] == ['selection']
        assert circuit.count_ops()['measure'] == 4

    def test_counter_is_pluggable(self, sample_instance):
        counter = FixedCounter(1)
        amp = AmplitudeAmplifier(sample_instance, 2, counter=counter)
        assert counter.calls == [2]
        assert amp.marked == 1
        assert amp.iterations == 3


class TestCounters:
    """Estimators of the number of marked assignments."""

    @pytest.mark.parametrize("threshold", [-1, 0, 2, 4, 5, 6])
    def test_enumeration_matches_statevector(self, sample_instance, threshold):
        expected = count_solutions(sample_instance, threshold)
        assert EnumerationCounter().count(sample_instance, threshold) == expected
        assert StatevectorCounter().count(sample_instance, threshold) == expected

    def test_known_counts(self, sample_instance):
        counter = EnumerationCounter()
        # feasible profits: 0, 3, 4, 2, 5, 6
        assert counter.count(sample_instance, -1) == 6
        assert counter.count(sample_instance, 1) == 5
        assert counter.count(sample_instance, 5) == 1
        assert counter.count(sample_instance, 6) == 0

    def test_zero_one_statevector_count(self):
        instance = KnapsackInstance.zero_one([2, 3, 1, 4], [3, 4, 2, 5], capacity=5)
        assert StatevectorCounter().count(instance, 4) == count_solutions(instance, 4) == 5


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
