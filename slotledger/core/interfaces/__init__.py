"""Core interfaces (ports) for dependency injection."""

from slotledger.core.interfaces.ledger_store import (
    ILedgerReader,
    ILedgerStore,
    IStockStore,
    IUnitOfWork,
    LedgerTransaction,
)
from slotledger.core.interfaces.query_store import IMovementQueryStore, IStockQueryStore
from slotledger.core.interfaces.reference_store import IReferenceResolver, IReferenceStore

__all__ = [
    # Transactional stores
    "IStockStore",
    "ILedgerStore",
    "IUnitOfWork",
    "LedgerTransaction",
    "ILedgerReader",
    # Reference data
    "IReferenceResolver",
    "IReferenceStore",
    # Listings
    "IMovementQueryStore",
    "IStockQueryStore",
]
