"""
Knapsack Optimization Solver
============================

Maximizes total profit subject to the weight limit by driving the decision
solver over the profit threshold.

Search:
-------
Bracket invariant: some feasible assignment has profit > P_low, and none has
profit > P_high. Initially P_low = -1 (the empty selection has profit 0).

1. Exponential phase: probe P = 1, 2, 4, ... while the decision solver
   returns a profit strictly above P. A returned profit p raises P_low to
   p - 1. The first failing P becomes P_high.
2. Binary phase: probe the midpoint of (P_low, P_high] until
   P_high - P_low = 1. The optimum is P_high.

A decision query may miss (no verified hit within its attempt cap) and set
P_high too low. A later profit above P_high exposes the miss; the
bracket is then reopened and the exponential phase resumes above P_low, so
the reported profit is always that of the best verified assignment.

Every probe costs one decision query, so the optimum OPT is found in
O(log OPT) queries.

Author: QKnap Research Team
Date: October 2026
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from qknap.core.hardware.runner import CircuitRunner
from qknap.core.instance import KnapsackInstance
from qknap.grover.counting import SolutionCounter
from qknap.solvers.config import SearchConfig
from qknap.solvers.decision import DecisionResult, DecisionSolver

logger = logging.getLogger(__name__)


@dataclass
class OptimizationResult:
    """Result of profit maximization.

    Attributes
    ----------
    profit : int
        Maximum feasible profit (P_high at convergence)
    counts : Optional[Tuple[int, ...]]
        Best verified assignment found during the search
    probes : List[DecisionResult]
        Every decision query, in order
    """
    profit: int
    counts: Optional[Tuple[int, ...]]
    probes: List[DecisionResult] = field(default_factory=list)

    @property
    def thresholds(self) -> List[int]:
        return [probe.threshold for probe in self.probes]


class OptimizationSolver:
    """
    Exponential-then-binary search over the profit threshold.

    Examples
    --------
    >>> instance = KnapsackInstance((2, 3, 1), (3, 4, 2), (1, 2, 1), capacity=4)
    >>> result = OptimizationSolver(instance, SearchConfig(seed=3)).solve()
    >>> result.profit, result.counts
    (6, (0, 1, 1))
    """

    def __init__(
        self,
        instance: KnapsackInstance,
        config: Optional[SearchConfig] = None,
        counter: Optional[SolutionCounter] = None,
        runner: Optional[CircuitRunner] = None
    ):
        self.instance = instance
        self.config = config if config is not None else SearchConfig()
        self.decision = DecisionSolver(instance, self.config, counter=counter, runner=runner)

    def solve(self) -> OptimizationResult:
        probes: List[DecisionResult] = []
        best: Optional[DecisionResult] = None

        def probe(threshold: int) -> DecisionResult:
            nonlocal best
            result = self.decision.solve(threshold)
            probes.append(result)
            if result.found and (best is None or result.profit > best.profit):
                best = result
            return result

        p_low = -1
        p_high: Optional[int] = None
        upper = self.config.initial_threshold

        while p_high is None or p_high - p_low > 1:
            if p_high is None:
                # Exponential phase
                while upper <= p_low:
                    upper *= 2
                threshold = upper
            else:
                # Binary phase
                threshold = (p_low + p_high) // 2

            result = probe(threshold)
            if result.profit > threshold:
                p_low = result.profit - 1
                if p_high is not None and p_low >= p_high:
                    logger.warning(
                        f"Profit {result.profit} found above P_high={p_high}: an earlier "
                        f"decision query missed, reopening the exponential phase"
                    )
                    p_high = None
            else:
                p_high = threshold
            logger.debug(f"Probed {threshold}: profit {result.profit}, bracket ({p_low}, {p_high}]")

        if best is not None:
            counts = best.counts
        elif p_high == 0:
            counts = (0,) * self.instance.n_items
        else:
            counts = None

        logger.info(f"Maximum profit {p_high} after {len(probes)} decision queries")
        return OptimizationResult(profit=p_high, counts=counts, probes=probes)


def maximize_profit(
    instance: KnapsackInstance,
    config: Optional[SearchConfig] = None,
    counter: Optional[SolutionCounter] = None
) -> OptimizationResult:
    """Convenience wrapper around :class:`OptimizationSolver`."""
    return OptimizationSolver(instance, config, counter=counter).solve()
