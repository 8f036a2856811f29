"""In-memory storage implementations."""

from slotledger.infrastructure.storage.memory.reader import InMemoryLedgerReader
from slotledger.infrastructure.storage.memory.reference_store import InMemoryReferenceStore
from slotledger.infrastructure.storage.memory.unit_of_work import (
    InMemoryLedgerDatabase,
    InMemoryLedgerStore,
    InMemoryStockStore,
    InMemoryUnitOfWork,
)

__all__ = [
    "InMemoryLedgerDatabase",
    "InMemoryUnitOfWork",
    "InMemoryStockStore",
    "InMemoryLedgerStore",
    "InMemoryLedgerReader",
    "InMemoryReferenceStore",
]
