"""
Classical Reference Evaluation
==============================

Exhaustive classical counterparts of the quantum oracle, used for solution
counting, verification in tests and reporting:

- satisfies: the marking predicate evaluated on one assignment
- iter_register_values: every raw value of the selection register (2^Q)
- brute_force_optimum: exact optimum by enumeration

All enumerations are O(2^Q) and intended for small instances only.
"""

import itertools
from dataclasses import dataclass
from typing import Iterator, Optional, Sequence, Tuple

from qknap.core.instance import KnapsackInstance


@dataclass(frozen=True)
class Candidate:
    """Decoded assignment and its profit."""
    counts: Tuple[int, ...]
    profit: int


def satisfies(instance: KnapsackInstance, counts: Sequence[int], threshold: int) -> bool:
    """bounds ∧ Σ w·c <= W ∧ Σ p·c > threshold."""
    if any(c < 0 or c > b for c, b in zip(counts, instance.bounds)):
        return False
    weight, profit = instance.evaluate(counts)
    return weight <= instance.capacity and profit > threshold


def iter_register_values(instance: KnapsackInstance) -> Iterator[Tuple[int, ...]]:
    """All 2^Q count tuples the selection register can encode, in-bound or not."""
    ranges = [range(2 ** view.width) for view in instance.layout()]
    return itertools.product(*ranges)


def count_solutions(instance: KnapsackInstance, threshold: int) -> int:
    return sum(1 for counts in iter_register_values(instance) if satisfies(instance, counts, threshold))


def brute_force_optimum(instance: KnapsackInstance) -> Optional[Candidate]:
    """
    Best feasible assignment by exhaustive enumeration.

    Returns None only if no assignment fits (impossible for capacity >= 0,
    since the empty selection always fits).
    """
    best = None
    for counts in iter_register_values(instance):
        if not satisfies(instance, counts, -1):
            continue
        _, profit = instance.evaluate(counts)
        if best is None or profit > best.profit:
            best = Candidate(counts=tuple(counts), profit=profit)
    return best
