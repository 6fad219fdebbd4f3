"""
Knapsack Validation Oracle
==========================

Marking oracle for the knapsack decision problem:

    target ⊕= [counts within bounds] ∧ [Σ w_i·c_i <= W] ∧ [Σ p_i·c_i > P]

Construction:
-------------
1. Compute three private check flags, each in its own scope:
   - bounds:  bounds checker over the per-item sub-registers
   - weight:  accumulate weights into the scratch total, compare <= W, uncompute
   - profit:  accumulate profits into the scratch total, compare > P, uncompute
2. AND the flags into the target (MCX)
3. Uncompute the flags

The scratch total register is shared by the weight and profit checks; each
check uses exactly the width its own worst-case sum needs and leaves it at
|0⟩ before the next check reuses it.

0/1 variant: one selection qubit per item and no bounds check (a single bit
is inherently within {0, 1}).

Phase oracle:
-------------
With the target prepared in |−⟩ = HX|0⟩, flipping it multiplies the marked
basis states by -1 (phase kickback); the target is returned to |0⟩.

Author: QKnap Research Team
Date: October 2026
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from qiskit import ClassicalRegister, QuantumCircuit, QuantumRegister

from qknap.core.arithmetic import (
    controlled_value_sum,
    load_bits,
    uncomputed,
    weighted_sum,
)
from qknap.core.comparator import greater_than, less_or_equal
from qknap.core.instance import KnapsackInstance
from qknap.core.oracles.bounds_oracle import check_bounds

logger = logging.getLogger(__name__)


@dataclass
class OracleRegisters:
    """Quantum registers used by one validation oracle.

    Attributes
    ----------
    selection : QuantumRegister
        Flat selection register (Q qubits)
    total : QuantumRegister
        Scratch accumulator, reset to |0⟩ by every check
    checks : QuantumRegister
        Private check flags (3 bounded, 2 for 0/1)
    bound_flags : Optional[QuantumRegister]
        Private per-item flags of the bounds checker (bounded variant only)
    target : QuantumRegister
        Single marking qubit
    """
    selection: QuantumRegister
    total: QuantumRegister
    checks: QuantumRegister
    bound_flags: Optional[QuantumRegister]
    target: QuantumRegister

    @property
    def scratch(self) -> list:
        """Every qubit that must read |0⟩ after the oracle returns."""
        qubits = list(self.total) + list(self.checks)
        if self.bound_flags is not None:
            qubits += list(self.bound_flags)
        return qubits

    def circuit(self, *classical: ClassicalRegister) -> QuantumCircuit:
        registers = [self.selection, self.total, self.checks]
        if self.bound_flags is not None:
            registers.append(self.bound_flags)
        registers.append(self.target)
        return QuantumCircuit(*registers, *classical)


def allocate_oracle_registers(instance: KnapsackInstance) -> OracleRegisters:
    """Allocate the registers for ``instance`` (all start in |0⟩)."""
    layout = instance.layout()
    total_width = max(instance.weight_width, instance.profit_width, 1)

    if instance.is_zero_one:
        checks = QuantumRegister(2, 'check')
        bound_flags = None
    else:
        checks = QuantumRegister(3, 'check')
        bound_flags = QuantumRegister(instance.n_items, 'bound')

    return OracleRegisters(
        selection=QuantumRegister(layout.num_qubits, 'x'),
        total=QuantumRegister(total_width, 'total'),
        checks=checks,
        bound_flags=bound_flags,
        target=QuantumRegister(1, 'target'),
    )


def mark_bounded_selections(
    circuit: QuantumCircuit,
    regs: OracleRegisters,
    instance: KnapsackInstance,
    threshold: int,
    target=None
) -> None:
    """Bounded-knapsack marking oracle (bounds ∧ weight <= W ∧ profit > P)."""
    target = regs.target[0] if target is None else target
    layout = instance.layout()
    selection = list(regs.selection)
    weight_total = list(regs.total)[:instance.weight_width]
    profit_total = list(regs.total)[:instance.profit_width]
    bounds_ok, weight_ok, profit_ok = list(regs.checks)

    def compute_checks(block: QuantumCircuit) -> None:
        check_bounds(block, layout, selection, instance.bounds, list(regs.bound_flags), bounds_ok)

        def add_weights(b):
            weighted_sum(b, layout, selection, instance.weights, weight_total)

        with uncomputed(block, add_weights):
            less_or_equal(block, weight_total, instance.capacity, weight_ok)

        def add_profits(b):
            weighted_sum(b, layout, selection, instance.profits, profit_total)

        with uncomputed(block, add_profits):
            greater_than(block, profit_total, threshold, profit_ok)

    with uncomputed(circuit, compute_checks):
        circuit.mcx([bounds_ok, weight_ok, profit_ok], target)


def mark_zero_one_selections(
    circuit: QuantumCircuit,
    regs: OracleRegisters,
    instance: KnapsackInstance,
    threshold: int,
    target=None
) -> None:
    """0/1-knapsack marking oracle (weight <= W ∧ profit > P)."""
    target = regs.target[0] if target is None else target
    selection = list(regs.selection)
    weight_total = list(regs.total)[:instance.weight_width]
    profit_total = list(regs.total)[:instance.profit_width]
    weight_ok, profit_ok = list(regs.checks)

    def compute_checks(block: QuantumCircuit) -> None:
        with uncomputed(block, lambda b: controlled_value_sum(b, selection, instance.weights, weight_total)):
            less_or_equal(block, weight_total, instance.capacity, weight_ok)
        with uncomputed(block, lambda b: controlled_value_sum(b, selection, instance.profits, profit_total)):
            greater_than(block, profit_total, threshold, profit_ok)

    with uncomputed(circuit, compute_checks):
        circuit.mcx([weight_ok, profit_ok], target)


def mark_valid_selections(
    circuit: QuantumCircuit,
    regs: OracleRegisters,
    instance: KnapsackInstance,
    threshold: int,
    target=None
) -> None:
    """
    Flip the marking target iff the selection is a feasible assignment with
    profit strictly above ``threshold``.

    Parameters
    ----------
    circuit : QuantumCircuit
        Circuit built over ``regs``
    regs : OracleRegisters
        Registers from :func:`allocate_oracle_registers`
    instance : KnapsackInstance
        Items, bounds and capacity
    threshold : int
        Profit threshold P
    target : Qubit, optional
        Qubit to flip (default: ``regs.target[0]``)
    """
    if instance.is_zero_one:
        mark_zero_one_selections(circuit, regs, instance, threshold, target)
    else:
        mark_bounded_selections(circuit, regs, instance, threshold, target)


def apply_phase_oracle(
    circuit: QuantumCircuit,
    regs: OracleRegisters,
    instance: KnapsackInstance,
    threshold: int
) -> None:
    """Multiply every marked selection basis state by -1 (phase kickback)."""
    ancilla = regs.target[0]
    circuit.x(ancilla)
    circuit.h(ancilla)
    mark_valid_selections(circuit, regs, instance, threshold)
    circuit.h(ancilla)
    circuit.x(ancilla)


def build_validation_circuit(
    instance: KnapsackInstance,
    threshold: int,
    counts: Optional[Sequence[int]] = None,
    measure: bool = False
):
    """
    Standalone marking-oracle circuit.

    Parameters
    ----------
    instance : KnapsackInstance
        Problem instance
    threshold : int
        Profit threshold P
    counts : Sequence[int], optional
        If given, the selection register is first prepared in this basis state
    measure : bool
        Measure the marking target into classical register ``flag``

    Returns
    -------
    circuit : QuantumCircuit
        Oracle circuit
    regs : OracleRegisters
        Registers of the circuit
    """
    regs = allocate_oracle_registers(instance)
    classical = [ClassicalRegister(1, 'flag')] if measure else []
    circuit = regs.circuit(*classical)

    if counts is not None:
        load_bits(circuit, regs.selection, instance.layout().encode(counts))

    mark_valid_selections(circuit, regs, instance, threshold)

    if measure:
        circuit.measure(regs.target, classical[0])

    logger.debug(f"Validation circuit: {circuit.num_qubits} qubits, threshold={threshold}")
    return circuit, regs


def build_profit_circuit(instance: KnapsackInstance, counts: Sequence[int]) -> QuantumCircuit:
    """
    Prepare ``counts``, accumulate Σ p_i·c_i into a fresh total register and
    measure it into classical register ``profit``.
    """
    layout = instance.layout()
    width = max(instance.profit_width, 1)
    selection = QuantumRegister(layout.num_qubits, 'x')
    total = QuantumRegister(width, 'total')
    result = ClassicalRegister(width, 'profit')
    circuit = QuantumCircuit(selection, total, result)

    load_bits(circuit, selection, layout.encode(counts))
    weighted_sum(circuit, layout, list(selection), instance.profits, list(total))
    circuit.measure(total, result)
    return circuit
