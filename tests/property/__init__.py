# tests/property/__init__.py
"""Property-based tests for dbtest.

Invariants of default propagation and indexing that must hold for every
document, not just the examples we think of.
"""
