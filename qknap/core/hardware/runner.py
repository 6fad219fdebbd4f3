"""
Circuit Execution Backend
=========================

Executes knapsack circuits and returns raw measurement records.

Backends:
- 'statevector': qiskit StatevectorSampler (exact, shot-sampled)
- 'aer': AerSimulator (transpiled, shot-based)

Bit ordering: Qiskit bitstrings put clbit 0 rightmost; ``measure_bits``
returns little-endian booleans (index 0 = clbit 0).

Author: QKnap Research Team
Date: October 2026
"""

import logging
import time
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np
from qiskit import QuantumCircuit, transpile
from qiskit.primitives import StatevectorSampler
from qiskit_aer import AerSimulator

logger = logging.getLogger(__name__)

BACKENDS = ('statevector', 'aer')


@dataclass
class ExecutionResult:
    """Per-shot measurement record of one classical register."""
    bitstrings: List[str]
    shots: int
    backend_name: str
    circuit_depth: int
    circuit_size: int
    execution_time: float


def bits_to_int(bits: Sequence[bool]) -> int:
    """Little-endian booleans → unsigned integer."""
    value = 0
    for k, bit in enumerate(bits):
        if bit:
            value |= 1 << k
    return value


def bitstring_to_bits(bitstring: str) -> List[bool]:
    """Qiskit bitstring (clbit 0 rightmost) → little-endian booleans."""
    return [c == '1' for c in reversed(bitstring)]


class CircuitRunner:
    """
    Runs circuits on a local simulator.

    Examples
    --------
    >>> runner = CircuitRunner(seed=7)
    >>> result = runner.run(circuit, 'selection', shots=10)
    >>> result.bitstrings[0]
    '0110'
    """

    def __init__(self, backend: str = 'statevector', seed: Optional[int] = None):
        """
        Parameters
        ----------
        backend : str
            'statevector' or 'aer'
        seed : int, optional
            Seed for reproducible sampling
        """
        if backend not in BACKENDS:
            raise ValueError(f"Unknown backend '{backend}', expected one of {BACKENDS}")
        self.backend_name = backend
        self._rng = np.random.default_rng(seed)

        if backend == 'statevector':
            self._sampler = StatevectorSampler(seed=self._rng)
            self._simulator = None
        else:
            self._sampler = None
            self._simulator = AerSimulator()

    def run(self, circuit: QuantumCircuit, register_name: str, shots: int = 1) -> ExecutionResult:
        """
        Execute ``circuit`` and return the per-shot values of one classical register.

        Parameters
        ----------
        circuit : QuantumCircuit
            Circuit whose measurements write ``register_name``
        register_name : str
            Name of the classical register to read
        shots : int
            Number of independent executions

        Returns
        -------
        ExecutionResult
            Bitstrings in shot order
        """
        start_time = time.time()

        if self._sampler is not None:
            job = self._sampler.run([circuit], shots=shots)
            data = job.result()[0].data
            bitstrings = list(getattr(data, register_name).get_bitstrings())
            depth, size = circuit.depth(), circuit.size()
        else:
            transpiled = transpile(circuit, backend=self._simulator)
            seed = int(self._rng.integers(2 ** 31))
            job = self._simulator.run(transpiled, shots=shots, memory=True, seed_simulator=seed)
            memory = job.result().get_memory()
            position = [creg.name for creg in circuit.cregs].index(register_name)
            n_cregs = len(circuit.cregs)
            bitstrings = [m.split()[n_cregs - 1 - position] for m in memory]
            depth, size = transpiled.depth(), transpiled.size()

        execution_time = time.time() - start_time
        logger.debug(
            f"{self.backend_name}: {shots} shot(s), {circuit.num_qubits} qubits, "
            f"depth {depth}, {execution_time:.3f}s"
        )
        return ExecutionResult(
            bitstrings=bitstrings,
            shots=shots,
            backend_name=self.backend_name,
            circuit_depth=depth,
            circuit_size=size,
            execution_time=execution_time,
        )

    def sample(self, circuit: QuantumCircuit, register_name: str, shots: int) -> List[List[bool]]:
        """Per-shot little-endian bits of ``register_name``."""
        result = self.run(circuit, register_name, shots=shots)
        return [bitstring_to_bits(b) for b in result.bitstrings]

    def measure_bits(self, circuit: QuantumCircuit, register_name: str) -> List[bool]:
        """Single-shot measurement of ``register_name`` as little-endian booleans."""
        return self.sample(circuit, register_name, shots=1)[0]
