"""Storage infrastructure implementations."""

from slotledger.infrastructure.storage.memory import (
    InMemoryLedgerDatabase,
    InMemoryLedgerReader,
    InMemoryReferenceStore,
    InMemoryUnitOfWork,
)
from slotledger.infrastructure.storage.sqlite import (
    SQLiteLedgerReader,
    SQLiteReferenceStore,
    SQLiteUnitOfWork,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)

__all__ = [
    # SQLite stores
    "SQLiteUnitOfWork",
    "SQLiteLedgerReader",
    "SQLiteReferenceStore",
    # Connection pool
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    # In-memory stores
    "InMemoryLedgerDatabase",
    "InMemoryUnitOfWork",
    "InMemoryLedgerReader",
    "InMemoryReferenceStore",
]
