"""
Solution Counting Strategies
============================

The Grover iteration count needs m, the number of marked basis states of
the selection register. Quantum counting (phase estimation on the Grover
operator) is not implemented; instead m comes from a pluggable estimator:

- EnumerationCounter: classically evaluates all 2^Q register values
- StatevectorCounter: simulates the marking oracle on the uniform
  superposition and reads m = N·P(target = 1)

Both are exact and only practical for small Q.
"""

import logging
from abc import ABC, abstractmethod

import numpy as np
from qiskit.quantum_info import Statevector

from qknap.core.classical import count_solutions
from qknap.core.instance import KnapsackInstance
from qknap.core.oracles.validation_oracle import (
    allocate_oracle_registers,
    mark_valid_selections,
)

logger = logging.getLogger(__name__)


class SolutionCounter(ABC):
    """Estimates the number of marked assignments for a given threshold."""

    @abstractmethod
    def count(self, instance: KnapsackInstance, threshold: int) -> int:
        """Return m, the number of register values with profit > threshold that fit."""


class EnumerationCounter(SolutionCounter):
    """Exact count by classical enumeration of the 2^Q register values."""

    def count(self, instance: KnapsackInstance, threshold: int) -> int:
        m = count_solutions(instance, threshold)
        logger.debug(f"Enumerated {instance.layout().search_space} assignments: m={m}")
        return m


class StatevectorCounter(SolutionCounter):
    """
    Count read off the oracle's statevector.

    Prepares H^{⊗Q}|0⟩, applies the marking oracle and sums the probability of
    target = 1. Since every basis state has probability 1/N,

        m = N · P(target = 1)
    """

    def count(self, instance: KnapsackInstance, threshold: int) -> int:
        regs = allocate_oracle_registers(instance)
        circuit = regs.circuit()
        circuit.h(regs.selection)
        mark_valid_selections(circuit, regs, instance, threshold)

        probabilities = Statevector(circuit).probabilities([circuit.find_bit(regs.target[0]).index])
        search_space = 2 ** len(regs.selection)
        m = int(np.rint(probabilities[1] * search_space))
        logger.debug(f"Statevector estimate: P(marked)={probabilities[1]:.6f}, m={m}")
        return m
