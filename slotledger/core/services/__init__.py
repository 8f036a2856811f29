"""
Core ledger services.

Layer-pure services that depend only on:
- slotledger/core/entities/*
- slotledger/core/interfaces/*
- slotledger/core/exceptions.py

NO infrastructure imports. All dependencies injected via constructor.
"""

from slotledger.core.services.concurrency_gate import ConcurrencyGate
from slotledger.core.services.effects import (
    StockEffect,
    effects_of,
    inverse_effects,
    replay,
    stock_discrepancies,
)
from slotledger.core.services.ledger_engine import LedgerEngine
from slotledger.core.services.pagination import normalize_page, page_offset

__all__ = [
    # Engine
    "LedgerEngine",
    # Gate
    "ConcurrencyGate",
    # Effects
    "StockEffect",
    "effects_of",
    "inverse_effects",
    "replay",
    "stock_discrepancies",
    # Pagination
    "normalize_page",
    "page_offset",
]
