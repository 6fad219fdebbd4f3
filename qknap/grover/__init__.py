"""
Grover Amplitude Amplification
==============================

Phase oracle + diffusion search loop and the pluggable solution counters
that fix its iteration count.
"""

from .amplification import (
    AmplitudeAmplifier,
    apply_diffuser,
    apply_grover_iteration,
    grover_iterations,
    prepare_uniform_superposition,
    success_probability,
)

from .counting import EnumerationCounter, SolutionCounter, StatevectorCounter

__all__ = [
    'AmplitudeAmplifier',
    'apply_diffuser',
    'apply_grover_iteration',
    'grover_iterations',
    'prepare_uniform_superposition',
    'success_probability',
    'SolutionCounter',
    'EnumerationCounter',
    'StatevectorCounter',
]
