"""Warehouse inventory ledger and stock-consistency engine."""

__version__ = "1.0.0"
