"""
Core Circuit Building Blocks
============================

Instance model, reversible arithmetic, comparator, oracles and execution.
"""
