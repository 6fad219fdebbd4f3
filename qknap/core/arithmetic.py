"""
Reversible Arithmetic for the Knapsack Oracle
==============================================

Implements the in-place integer arithmetic the validation oracle needs:
- Controlled constant addition: |c⟩|x⟩ → |c⟩|x + c·value mod 2^n⟩
- Weighted sum of item counts: |counts⟩|t⟩ → |counts⟩|t + Σ_i v_i·count_i⟩
- Scoped compute / apply / uncompute blocks for ancilla hygiene

All additions use the Draper (QFT) adder, so adding -value is the exact
inverse of adding value.

Mathematical Foundation:
------------------------
After QFT without swaps, qubit q of a little-endian register holding x
carries the relative phase

    |0⟩ + exp(2πi·x / 2^(q+1)) |1⟩

Adding a constant c is therefore a phase rotation P(2π·c / 2^(q+1)) on every
qubit q, followed by the inverse QFT. Only c mod 2^(q+1) matters, so
negative constants wrap to two's complement automatically.

Multiplication by a classical scalar is controlled shift-and-add:

    v · count = Σ_k count_k · (v << k)

Author: QKnap Research Team
Date: October 2026
"""

from contextlib import contextmanager
from typing import Callable, Iterator, List, Sequence, Tuple

import numpy as np
from qiskit import QuantumCircuit
from qiskit.synthesis import synth_qft_full

from qknap.core.instance import SelectionLayout


@contextmanager
def uncomputed(
    circuit: QuantumCircuit,
    setup: Callable[[QuantumCircuit], None]
) -> Iterator[QuantumCircuit]:
    """
    Compute / apply / uncompute block.

    ``setup`` is recorded into an empty copy of ``circuit`` and appended; the
    body of the ``with`` statement is the apply phase; the inverse of the
    recorded setup is appended on exit, returning every scratch qubit the
    setup touched to its prior state.

    Examples
    --------
    >>> with uncomputed(qc, lambda b: weighted_sum(b, layout, x, weights, total)):
    ...     less_or_equal(qc, total, capacity, flag)
    """
    block = circuit.copy_empty_like()
    setup(block)
    circuit.compose(block, inplace=True)
    try:
        yield circuit
    finally:
        circuit.compose(block.inverse(), inplace=True)


def _phase_angle(value: int, qubit_index: int) -> float:
    modulus = 1 << (qubit_index + 1)
    residue = value % modulus
    return 2.0 * np.pi * residue / modulus


def _add_phases(
    circuit: QuantumCircuit,
    value: int,
    register: Sequence,
    controls: Sequence
) -> None:
    """Fourier-space addition of ``value`` (register must already be in QFT basis)."""
    controls = list(controls)
    for q, qubit in enumerate(register):
        if value % (1 << (q + 1)) == 0:
            continue
        angle = _phase_angle(value, q)
        if not controls:
            circuit.p(angle, qubit)
        elif len(controls) == 1:
            circuit.cp(angle, controls[0], qubit)
        else:
            circuit.mcp(angle, controls, qubit)


def _fourier_accumulate(
    circuit: QuantumCircuit,
    terms: Sequence[Tuple[Sequence, int]],
    register: Sequence
) -> None:
    """Apply several controlled additions inside one QFT / QFT† sandwich."""
    register = list(register)
    terms = [(controls, value) for controls, value in terms if value]
    if not register or not terms:
        return

    qft = synth_qft_full(len(register), do_swaps=False)
    circuit.compose(qft, qubits=register, inplace=True)
    for controls, value in terms:
        _add_phases(circuit, value, register, controls)
    circuit.compose(qft.inverse(), qubits=register, inplace=True)


def add_constant(
    circuit: QuantumCircuit,
    value: int,
    register: Sequence,
    controls: Sequence = ()
) -> None:
    """
    Add a classical integer into a little-endian register, mod 2^n.

    Parameters
    ----------
    circuit : QuantumCircuit
        Circuit to append gates to
    value : int
        Constant to add (negative values subtract)
    register : Sequence[Qubit]
        Target register, qubit 0 = least significant bit
    controls : Sequence[Qubit]
        Zero or more control qubits; the addition happens only when all are |1⟩

    Notes
    -----
    ``add_constant(qc, -v, reg, ctrl)`` undoes ``add_constant(qc, v, reg, ctrl)``.
    """
    _fourier_accumulate(circuit, [(list(controls), int(value))], register)


def weighted_sum(
    circuit: QuantumCircuit,
    layout: SelectionLayout,
    selection: Sequence,
    values: Sequence[int],
    total: Sequence
) -> None:
    """
    Add Σ_i values[i]·count_i into ``total`` (bounded variant).

    Each count_i is the unsigned integer held by sub-register i of the
    selection register. For bit k of that sub-register, ``values[i] << k``
    is added controlled on the bit.

    Parameters
    ----------
    circuit : QuantumCircuit
        Circuit to append gates to
    layout : SelectionLayout
        Per-item (offset, width) views of ``selection``
    selection : Sequence[Qubit]
        Flat selection register (not modified)
    values : Sequence[int]
        Per-unit classical values (weights or profits)
    total : Sequence[Qubit]
        Accumulator, sized so the maximal sum cannot overflow

    Complexity:
    -----------
    - One QFT and one inverse QFT on ``total``
    - At most Q·len(total) controlled phases, Q = Σ w[i]
    """
    terms = []
    for view in layout:
        for k, qubit in enumerate(view.qubits(selection)):
            terms.append(([qubit], int(values[view.item]) << k))
    _fourier_accumulate(circuit, terms, total)


def controlled_value_sum(
    circuit: QuantumCircuit,
    controls: Sequence,
    values: Sequence[int],
    total: Sequence
) -> None:
    """0/1 variant: add values[i] into ``total`` when selection bit i is |1⟩."""
    if len(controls) != len(values):
        raise ValueError(f"{len(controls)} controls for {len(values)} values")
    terms = [([qubit], int(v)) for qubit, v in zip(controls, values)]
    _fourier_accumulate(circuit, terms, total)


def load_bits(circuit: QuantumCircuit, register: Sequence, bits: Sequence[bool]) -> None:
    """Prepare a computational basis state from |0...0⟩ (X on every 1-bit)."""
    for qubit, bit in zip(register, bits):
        if bit:
            circuit.x(qubit)


def int_to_bits(value: int, width: int) -> List[bool]:
    """Little-endian bit expansion of a non-negative integer."""
    return [bool((value >> k) & 1) for k in range(width)]
