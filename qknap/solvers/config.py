"""Search configuration shared by the decision and optimization solvers."""

from dataclasses import dataclass
from typing import Optional

from qknap.core.hardware.runner import BACKENDS


@dataclass
class SearchConfig:
    """Configuration for Grover-based knapsack search."""
    max_attempts: int = 10  # Amplify-and-measure attempts per decision call
    backend: str = 'statevector'  # Execution backend, see CircuitRunner
    seed: Optional[int] = None  # Sampling seed
    initial_threshold: int = 1  # First threshold of the exponential phase

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.backend not in BACKENDS:
            raise ValueError(f"Unknown backend '{self.backend}', expected one of {BACKENDS}")
        if self.initial_threshold < 1:
            raise ValueError(f"initial_threshold must be >= 1, got {self.initial_threshold}")
