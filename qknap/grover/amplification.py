"""
Amplitude Amplification for the Knapsack Oracle
================================================

Grover search over the selection register:

    |ψ⟩ = (D · O_P)^k H^{⊗Q} |0⟩

where O_P is the phase version of the validation oracle and D the diffusion
(inversion about the mean).

Mathematical Foundation:
------------------------
With m marked states among N = 2^Q, write sin(θ) = √(m/N). Each iteration
rotates the state by 2θ towards the marked subspace, so after k iterations

    P(marked) = sin²((2k + 1)·θ)

which is maximal for k ≈ π/(4θ) ≈ (π/4)·√(N/m). The iteration count is
fixed once per search instance from the (estimated) m. For dense marking
the rounded count can rotate past the marked subspace and do worse than
sampling the uniform state (m/N = 3/4 gives sin²(3θ) = 0); the count then
falls back to 0.

Author: QKnap Research Team
Date: October 2026
"""

import logging
import math
from typing import Optional, Sequence

import numpy as np
from qiskit import ClassicalRegister, QuantumCircuit

from qknap.core.instance import KnapsackInstance
from qknap.core.oracles.validation_oracle import (
    OracleRegisters,
    allocate_oracle_registers,
    apply_phase_oracle,
)
from qknap.grover.counting import EnumerationCounter, SolutionCounter

logger = logging.getLogger(__name__)

SELECTION_CREG = 'selection'


def grover_iterations(search_space: int, marked: int) -> int:
    """
    Iteration count round(π/4 · √(N/m)), rounding halves away from zero.

    Returns 0 when m = 0 (nothing to amplify). When the rounded count would
    overshoot below the plain sampling probability m/N (dense marking, e.g.
    m/N = 3/4 gives sin²(3θ) = 0), no iteration is applied.
    """
    if marked <= 0:
        return 0
    iterations = int(math.floor(np.pi / 4 * math.sqrt(search_space / marked) + 0.5))
    if success_probability(search_space, marked, iterations) < min(marked / search_space, 1.0) - 1e-9:
        logger.debug(f"m/N={marked}/{search_space}: {iterations} iteration(s) overshoot, sampling directly")
        return 0
    return iterations


def success_probability(search_space: int, marked: int, iterations: int) -> float:
    """Theoretical probability of measuring a marked state after k iterations."""
    if marked <= 0:
        return 0.0
    theta = math.asin(math.sqrt(min(marked / search_space, 1.0)))
    return math.sin((2 * iterations + 1) * theta) ** 2


def prepare_uniform_superposition(circuit: QuantumCircuit, register: Sequence) -> None:
    """H on every qubit: |0...0⟩ → (1/√N) Σ_x |x⟩."""
    for qubit in register:
        circuit.h(qubit)


def apply_diffuser(circuit: QuantumCircuit, register: Sequence) -> None:
    """
    Inversion about the uniform superposition: H X (MCZ) X H.

    Equal to 2|s⟩⟨s| - I up to a global phase.
    """
    register = list(register)
    n = len(register)
    if n == 0:
        return

    for qubit in register:
        circuit.h(qubit)
        circuit.x(qubit)

    if n == 1:
        circuit.z(register[0])
    else:
        circuit.h(register[-1])
        circuit.mcx(register[:-1], register[-1])
        circuit.h(register[-1])

    for qubit in register:
        circuit.x(qubit)
        circuit.h(qubit)


def apply_grover_iteration(
    circuit: QuantumCircuit,
    regs: OracleRegisters,
    instance: KnapsackInstance,
    threshold: int
) -> None:
    """One iteration: phase oracle, then diffusion on the selection register."""
    apply_phase_oracle(circuit, regs, instance, threshold)
    apply_diffuser(circuit, regs.selection)


class AmplitudeAmplifier:
    """
    Builds the Grover search circuit for one (instance, threshold) pair.

    N, m and the iteration count are computed once at construction.

    Examples
    --------
    >>> amp = AmplitudeAmplifier(instance, threshold=5)
    >>> amp.iterations
    2
    >>> circuit = amp.build_circuit()
    """

    def __init__(
        self,
        instance: KnapsackInstance,
        threshold: int,
        counter: Optional[SolutionCounter] = None
    ):
        self.instance = instance
        self.threshold = threshold
        self.counter = counter if counter is not None else EnumerationCounter()

        self.search_space = instance.layout().search_space
        self.marked = self.counter.count(instance, threshold)
        self.iterations = grover_iterations(self.search_space, self.marked)

        logger.info(
            f"Amplifier P={threshold}: N={self.search_space}, m={self.marked}, "
            f"iterations={self.iterations}"
        )

    @property
    def has_solutions(self) -> bool:
        return self.marked > 0

    @property
    def success_probability(self) -> float:
        return success_probability(self.search_space, self.marked, self.iterations)

    def build_circuit(self, measure: bool = True) -> QuantumCircuit:
        """
        Search circuit: uniform superposition, k Grover iterations and (optionally)
        measurement of the selection register into classical register 'selection'.
        """
        regs = allocate_oracle_registers(self.instance)
        classical = [ClassicalRegister(len(regs.selection), SELECTION_CREG)] if measure else []
        circuit = regs.circuit(*classical)

        prepare_uniform_superposition(circuit, regs.selection)
        for _ in range(self.iterations):
            apply_grover_iteration(circuit, regs, self.instance, self.threshold)

        if measure:
            circuit.measure(regs.selection, classical[0])

        logger.debug(f"Search circuit: {circuit.num_qubits} qubits, size {circuit.size()}")
        return circuit
