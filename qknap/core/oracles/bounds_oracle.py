"""
Bounds Checker Oracle
=====================

Marks a target qubit when every per-item count register holds a value no
larger than its declared bound:

    target ⊕= ∧_i [count_i <= bound_i]

Per-item satisfaction flags are private: they are computed with the
comparator, ANDed into the target with one MCX, and uncomputed.

Author: QKnap Research Team
Date: October 2026
"""

from typing import Sequence

from qiskit import QuantumCircuit

from qknap.core.arithmetic import uncomputed
from qknap.core.comparator import less_or_equal
from qknap.core.instance import SelectionLayout


def check_bounds(
    circuit: QuantumCircuit,
    layout: SelectionLayout,
    selection: Sequence,
    bounds: Sequence[int],
    flags: Sequence,
    target
) -> None:
    """
    Flip ``target`` iff value(count_i) <= bounds[i] for every item i.

    Parameters
    ----------
    circuit : QuantumCircuit
        Circuit to append gates to
    layout : SelectionLayout
        Per-item views into ``selection``
    selection : Sequence[Qubit]
        Flat selection register (not modified)
    bounds : Sequence[int]
        Upper bound per item type
    flags : Sequence[Qubit]
        One private |0⟩ flag per item, returned to |0⟩
    target : Qubit
        Output flag
    """
    flags = list(flags)
    assert len(flags) == len(layout), "Need one private flag per item"

    def compute_flags(block: QuantumCircuit) -> None:
        for view, flag in zip(layout, flags):
            less_or_equal(block, view.qubits(selection), bounds[view.item], flag)

    with uncomputed(circuit, compute_flags):
        circuit.mcx(flags, target)
