"""
Tests for the decision and optimization solvers and the execution backend.

Sampling tests use fixed seeds; the decision solver's own verification makes
accepted answers exact regardless of the measured samples.
"""

import pytest
from qiskit import ClassicalRegister, QuantumCircuit, QuantumRegister

from qknap import (
    DecisionResult,
    DecisionSolver,
    KnapsackInstance,
    OptimizationSolver,
    SearchConfig,
    SolutionCounter,
    StatevectorCounter,
    brute_force_optimum,
    maximize_profit,
)
from qknap.core.arithmetic import int_to_bits, load_bits
from qknap.core.classical import iter_register_values, satisfies
from qknap.core.comparator import greater_than
from qknap.core.hardware import CircuitRunner, bits_to_int, bitstring_to_bits
from qknap.grover.amplification import SELECTION_CREG, AmplitudeAmplifier


@pytest.fixture
def sample_instance():
    return KnapsackInstance(weights=(2, 3, 1), profits=(3, 4, 2), bounds=(1, 2, 1), capacity=4)


@pytest.fixture
def dense_instance():
    """One item type, up to 3 copies, all of which fit."""
    return KnapsackInstance(weights=(1,), profits=(2,), bounds=(3,), capacity=3)


class OverCounter(SolutionCounter):
    """Reports marked assignments where there are none."""

    def count(self, instance, threshold):
        return 3


class TestCircuitRunner:
    """Execution backend."""

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            CircuitRunner(backend='ibm_torino')

    def test_bit_conversions(self):
        assert bitstring_to_bits('0110') == [False, True, True, False]
        assert bits_to_int([True, False, True]) == 5
        assert bits_to_int(bitstring_to_bits('1101')) == 13

    @pytest.mark.parametrize("backend", ['statevector', 'aer'])
    def test_comparator_on_backend(self, backend):
        a = QuantumRegister(3, 'a')
        t = QuantumRegister(1, 't')
        out = ClassicalRegister(1, 'flag')
        runner = CircuitRunner(backend=backend, seed=5)

        for a_val, b, expected in [(5, 3, True), (3, 3, False), (0, 0, False), (7, 6, True)]:
            qc = QuantumCircuit(a, t, out)
            load_bits(qc, a, int_to_bits(a_val, 3))
            greater_than(qc, a, b, t[0])
            qc.measure(t, out)
            assert runner.measure_bits(qc, 'flag') == [expected]

    def test_run_reports_metadata(self):
        qc = QuantumCircuit(QuantumRegister(2, 'q'), ClassicalRegister(2, 'c'))
        qc.x(1)
        qc.measure(qc.qregs[0], qc.cregs[0])
        result = CircuitRunner(seed=1).run(qc, 'c', shots=4)
        assert result.bitstrings == ['10'] * 4
        assert result.shots == 4
        assert result.backend_name == 'statevector'


class TestSearchConfig:

    @pytest.mark.parametrize("kwargs", [
        dict(max_attempts=0),
        dict(backend='qpu'),
        dict(initial_threshold=0),
    ])
    def test_invalid_config(self, kwargs):
        with pytest.raises(ValueError):
            SearchConfig(**kwargs)

    def test_defaults(self):
        config = SearchConfig()
        assert config.max_attempts == 10
        assert config.backend == 'statevector'


class TestDecisionSolver:
    """Grover decision queries with verification and retries."""

    @pytest.mark.parametrize("threshold", [0, 1, 3, 4, 5])
    def test_found_assignments_are_marked(self, sample_instance, threshold):
        solver = DecisionSolver(sample_instance, SearchConfig(seed=17))
        result = solver.solve(threshold)

        assert result.found
        assert satisfies(sample_instance, result.counts, threshold)
        assert result.profit == sample_instance.evaluate(result.counts)[1]
        assert result.profit > threshold
        assert 1 <= result.attempts <= 10

    def test_no_solution_returns_sentinel(self, sample_instance):
        result = DecisionSolver(sample_instance, SearchConfig(seed=2)).solve(6)
        assert not result.found
        assert result.profit == 6
        assert result.attempts == 0
        assert result.counts is None

    def test_attempt_cap(self, sample_instance):
        """Every measurement fails verification: give up after max_attempts."""
        config = SearchConfig(max_attempts=4, seed=9)
        result = DecisionSolver(sample_instance, config, counter=OverCounter()).solve(6)
        assert not result.found
        assert result.attempts == 4
        assert result.profit == 6
        assert result.marked == 3

    def test_verify_and_measure_profit(self, sample_instance):
        solver = DecisionSolver(sample_instance, SearchConfig(seed=3))
        assert solver.verify((0, 1, 1), 5)
        assert not solver.verify((0, 1, 1), 6)
        assert not solver.verify((1, 1, 0), 0)      # overweight
        assert not solver.verify((0, 3, 0), 0)      # out of bounds
        assert solver.measure_profit((1, 2, 1)) == 13
        assert solver.measure_profit((0, 0, 0)) == 0

    def test_success_rate_near_theory(self, sample_instance):
        amp = AmplitudeAmplifier(sample_instance, 4)
        runner = CircuitRunner(seed=23)
        samples = runner.sample(amp.build_circuit(), SELECTION_CREG, shots=400)

        layout = sample_instance.layout()
        hits = sum(satisfies(sample_instance, layout.decode(bits), 4) for bits in samples)
        assert hits / 400 == pytest.approx(amp.success_probability, abs=0.06)

    def test_statevector_counter(self, sample_instance):
        solver = DecisionSolver(sample_instance, SearchConfig(seed=4), counter=StatevectorCounter())
        result = solver.solve(4)
        assert result.found
        assert result.marked == 2
        assert result.profit in (5, 6)

    def test_densely_marked_search_samples_directly(self, dense_instance):
        """3 of 4 assignments marked: one Grover iteration would cancel them all."""
        result = DecisionSolver(dense_instance, SearchConfig(seed=0)).solve(1)
        assert result.marked == 3
        assert result.iterations == 0
        assert result.found
        assert result.profit in (2, 4, 6)
        assert dense_instance.evaluate(result.counts)[1] == result.profit


class TestOptimizationSolver:
    """Exponential + binary search against brute force."""

    def test_sample_instance_optimum(self, sample_instance):
        result = OptimizationSolver(sample_instance, SearchConfig(seed=31)).solve()
        assert result.profit == brute_force_optimum(sample_instance).profit == 6
        assert result.counts == (0, 1, 1)
        assert result.thresholds[0] == 1

    def test_zero_one_optimum(self):
        instance = KnapsackInstance.zero_one([2, 3, 1, 4], [3, 4, 2, 5], capacity=5)
        result = maximize_profit(instance, SearchConfig(seed=8))
        assert result.profit == brute_force_optimum(instance).profit == 7
        assert instance.evaluate(result.counts) == (5, 7)

    def test_optimum_zero(self):
        instance = KnapsackInstance.zero_one([2, 3], [3, 4], capacity=0)
        result = maximize_profit(instance, SearchConfig(seed=1))
        assert result.profit == 0
        assert result.counts == (0, 0)
        assert result.thresholds == [1, 0]

    def test_optimum_one(self):
        instance = KnapsackInstance.zero_one([1, 5, 6], [1, 9, 9], capacity=2)
        result = maximize_profit(instance, SearchConfig(seed=12))
        assert result.profit == 1
        assert result.counts == (1, 0, 0)

    def test_threshold_schedule_probes_midpoints(self, sample_instance):
        """Classical stand-in decision returning the smallest profit above P."""
        feasible = sorted({
            sample_instance.evaluate(c)[1]
            for c in iter_register_values(sample_instance) if satisfies(sample_instance, c, -1)
        })

        def decide(threshold):
            above = [p for p in feasible if p > threshold]
            if not above:
                return DecisionResult(False, None, threshold, threshold, 0, 0, 0)
            return DecisionResult(True, (0, 0, 0), above[0], threshold, 1, 1, 1)

        solver = OptimizationSolver(sample_instance)
        solver.decision.solve = decide
        result = solver.solve()

        assert result.thresholds == [1, 2, 4, 8, 6, 5]
        assert result.profit == 6

    def test_failed_probes_carry_sentinel(self, sample_instance):
        result = OptimizationSolver(sample_instance, SearchConfig(seed=31)).solve()
        failed = [p for p in result.probes if not p.found]
        assert failed, "the search must observe at least one infeasible threshold"
        assert all(p.profit == p.threshold for p in failed)


    def test_missed_query_reopens_bracket(self, sample_instance):
        """A miss at P=1 followed by a hit above it must not end the search early."""
        calls = []

        def decide(threshold):
            calls.append(threshold)
            if len(calls) == 1 or threshold >= 6:
                return DecisionResult(False, None, threshold, threshold, 10, 1, 5)
            return DecisionResult(True, (0, 1, 1), 6, threshold, 1, 1, 1)

        solver = OptimizationSolver(sample_instance)
        solver.decision.solve = decide
        result = solver.solve()

        assert result.thresholds == [1, 0, 8, 6]
        assert result.profit == 6
        assert result.counts == (0, 1, 1)
        assert sample_instance.evaluate(result.counts)[1] == result.profit

    def test_densely_marked_instance(self, dense_instance):
        result = maximize_profit(dense_instance, SearchConfig(seed=0))
        assert result.profit == brute_force_optimum(dense_instance).profit == 6
        assert result.counts == (3,)


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
