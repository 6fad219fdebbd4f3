"""
Register-vs-Constant Comparator
================================

Flips a target qubit iff the unsigned integer held by a register exceeds a
classical constant (or, complementary form, is at most the constant). The
register is restored exactly and no ancilla is used.

Algorithm (digit scan, MSB → LSB):
----------------------------------
For every position i where the constant's bit b_i is 0:
    1. MCX(a[i..D-1] → target)
    2. X(a[i])

The MCX at position i fires iff a_i = 1 and a_j = b_j for all j > i: higher
positions with b_j = 1 are plain controls, higher positions with b_j = 0 were
already toggled, so a_j = 0 reads as 1. At most one MCX fires, which is the
usual digit-by-digit "greater than" tie-break. The toggles are undone at the
end.

Author: QKnap Research Team
Date: October 2026
"""

import logging
from typing import Sequence

from qiskit import QuantumCircuit

logger = logging.getLogger(__name__)


def greater_than(
    circuit: QuantumCircuit,
    register: Sequence,
    constant: int,
    target
) -> None:
    """
    Flip ``target`` iff value(register) > constant.

    Parameters
    ----------
    circuit : QuantumCircuit
        Circuit to append gates to
    register : Sequence[Qubit]
        Little-endian register a of width D (restored on exit)
    constant : int
        Classical constant b
    target : Qubit
        Flag qubit to flip

    Notes
    -----
    Constants outside [0, 2^D - 1] are decided statically: b >= 2^D can
    never be exceeded (no gates), b < 0 is always exceeded (X on target).
    """
    register = list(register)
    width = len(register)

    if constant < 0:
        circuit.x(target)
        return
    if constant >= 2 ** width:
        logger.debug(f"Constant {constant} exceeds {width}-bit range, comparison is constant false")
        return

    toggled = []
    for i in reversed(range(width)):
        if (constant >> i) & 1:
            continue
        circuit.mcx(register[i:], target)
        circuit.x(register[i])
        toggled.append(register[i])

    for qubit in toggled:
        circuit.x(qubit)


def less_or_equal(
    circuit: QuantumCircuit,
    register: Sequence,
    constant: int,
    target
) -> None:
    """Flip ``target`` iff value(register) <= constant."""
    greater_than(circuit, register, constant, target)
    circuit.x(target)
