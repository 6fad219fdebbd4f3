"""
QKnap: Grover Search for Bounded Knapsack
=========================================

Reversible knapsack oracles and amplitude amplification on Qiskit.

Key Features:
- Ancilla-free register-vs-constant comparator
- QFT-based weighted-sum accumulator for bounded item counts
- Validation oracle (bounds ∧ weight <= W ∧ profit > P) with full uncomputation
- Grover decision solver with verified, bounded retries
- Exponential + binary search for the maximum profit

Author: QKnap Research Team
Date: October 2026
"""

__version__ = "1.0.0"

from .core.instance import ConfigurationError, KnapsackInstance, SelectionLayout
from .core.classical import Candidate, brute_force_optimum
from .grover.amplification import AmplitudeAmplifier, grover_iterations
from .grover.counting import EnumerationCounter, SolutionCounter, StatevectorCounter
from .solvers.config import SearchConfig
from .solvers.decision import DecisionResult, DecisionSolver
from .solvers.optimization import OptimizationResult, OptimizationSolver, maximize_profit

__all__ = [
    'ConfigurationError',
    'KnapsackInstance',
    'SelectionLayout',
    'Candidate',
    'brute_force_optimum',
    'AmplitudeAmplifier',
    'grover_iterations',
    'SolutionCounter',
    'EnumerationCounter',
    'StatevectorCounter',
    'SearchConfig',
    'DecisionResult',
    'DecisionSolver',
    'OptimizationResult',
    'OptimizationSolver',
    'maximize_profit',
]
