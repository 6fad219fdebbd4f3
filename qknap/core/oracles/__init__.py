"""
Oracle Module
=============

Provides the knapsack marking and phase oracles:
- Bounds checker (count_i <= bound_i for every item)
- Validation oracle (bounds ∧ weight <= W ∧ profit > P), bounded and 0/1
"""

from .bounds_oracle import check_bounds

from .validation_oracle import (
    OracleRegisters,
    allocate_oracle_registers,
    mark_valid_selections,
    mark_bounded_selections,
    mark_zero_one_selections,
    apply_phase_oracle,
    build_validation_circuit,
    build_profit_circuit,
)

__all__ = [
    'check_bounds',
    'OracleRegisters',
    'allocate_oracle_registers',
    'mark_valid_selections',
    'mark_bounded_selections',
    'mark_zero_one_selections',
    'apply_phase_oracle',
    'build_validation_circuit',
    'build_profit_circuit',
]
