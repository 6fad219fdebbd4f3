"""
Knapsack Decision Solver
========================

Answers "is there a feasible assignment with profit > P?" by Grover search.

Workflow:
---------
1. Setup: count marked assignments m, derive the iteration count
   (m = 0 → report not found without touching the quantum backend)
2. Amplify and measure: run the search circuit once from |0...0⟩ and decode
   the selection register into per-item counts
3. Verify: prepare the measured assignment and run the marking oracle on it
4. Accept (recompute the profit with the accumulator and measure it) or
   retry from step 2, at most ``max_attempts`` times

A miss after the last attempt is reported as not found. When nothing is
found the threshold itself is returned as the profit (sentinel).

Author: QKnap Research Team
Date: October 2026
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from qknap.core.hardware.runner import CircuitRunner, bits_to_int
from qknap.core.instance import KnapsackInstance
from qknap.core.oracles.validation_oracle import (
    build_profit_circuit,
    build_validation_circuit,
)
from qknap.grover.amplification import SELECTION_CREG, AmplitudeAmplifier
from qknap.grover.counting import SolutionCounter
from qknap.solvers.config import SearchConfig

logger = logging.getLogger(__name__)


@dataclass
class DecisionResult:
    """Outcome of one decision query.

    Attributes
    ----------
    found : bool
        True if a verified assignment was measured
    counts : Optional[Tuple[int, ...]]
        Accepted per-item counts (None when not found)
    profit : int
        Profit of the accepted assignment, or the threshold when not found
    threshold : int
        Profit threshold P of the query
    attempts : int
        Amplify-and-measure runs performed
    iterations : int
        Grover iterations per run
    marked : int
        Estimated number of marked assignments
    """
    found: bool
    counts: Optional[Tuple[int, ...]]
    profit: int
    threshold: int
    attempts: int
    iterations: int
    marked: int


class DecisionSolver:
    """
    Grover-search decision solver with bounded retries.

    Examples
    --------
    >>> instance = KnapsackInstance((2, 3, 1), (3, 4, 2), (1, 2, 1), capacity=4)
    >>> solver = DecisionSolver(instance, SearchConfig(seed=11))
    >>> result = solver.solve(threshold=5)
    >>> result.found, result.profit
    (True, 6)
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
        self.counter = counter
        self.runner = runner if runner is not None else CircuitRunner(self.config.backend, self.config.seed)
        self.layout = instance.layout()

    def verify(self, counts: Tuple[int, ...], threshold: int) -> bool:
        """Run the marking oracle on the basis state ``counts`` and read the target."""
        circuit, _ = build_validation_circuit(self.instance, threshold, counts=counts, measure=True)
        return self.runner.measure_bits(circuit, 'flag')[0]

    def measure_profit(self, counts: Tuple[int, ...]) -> int:
        """Σ p_i·c_i computed by the accumulator and measured."""
        circuit = build_profit_circuit(self.instance, counts)
        return bits_to_int(self.runner.measure_bits(circuit, 'profit'))

    def solve(self, threshold: int) -> DecisionResult:
        """
        Search for a feasible assignment with profit strictly above ``threshold``.

        Parameters
        ----------
        threshold : int
            Profit threshold P

        Returns
        -------
        DecisionResult
            ``profit`` is the accepted assignment's profit, or ``threshold``
            when no solution exists or none was found within ``max_attempts``
        """
        amplifier = AmplitudeAmplifier(self.instance, threshold, self.counter)

        if not amplifier.has_solutions:
            logger.info(f"P={threshold}: no marked assignments, skipping search")
            return DecisionResult(
                found=False,
                counts=None,
                profit=threshold,
                threshold=threshold,
                attempts=0,
                iterations=0,
                marked=0,
            )

        circuit = amplifier.build_circuit(measure=True)

        for attempt in range(1, self.config.max_attempts + 1):
            bits = self.runner.measure_bits(circuit, SELECTION_CREG)
            counts = self.layout.decode(bits)

            if not self.verify(counts, threshold):
                logger.debug(f"P={threshold}: attempt {attempt} measured {counts}, rejected")
                continue

            profit = self.measure_profit(counts)
            logger.info(f"P={threshold}: accepted {counts} (profit {profit}) on attempt {attempt}")
            return DecisionResult(
                found=True,
                counts=counts,
                profit=profit,
                threshold=threshold,
                attempts=attempt,
                iterations=amplifier.iterations,
                marked=amplifier.marked,
            )

        logger.info(f"P={threshold}: no verified assignment in {self.config.max_attempts} attempts")
        return DecisionResult(
            found=False,
            counts=None,
            profit=threshold,
            threshold=threshold,
            attempts=self.config.max_attempts,
            iterations=amplifier.iterations,
            marked=amplifier.marked,
        )
