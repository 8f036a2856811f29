"""SQLite storage implementations."""

from slotledger.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from slotledger.infrastructure.storage.sqlite.ledger_store import SQLiteLedgerStore
from slotledger.infrastructure.storage.sqlite.movement_query_store import (
    SQLiteMovementQueryStore,
)
from slotledger.infrastructure.storage.sqlite.reader import SQLiteLedgerReader
from slotledger.infrastructure.storage.sqlite.reference_store import SQLiteReferenceStore
from slotledger.infrastructure.storage.sqlite.stock_query_store import SQLiteStockQueryStore
from slotledger.infrastructure.storage.sqlite.stock_store import SQLiteStockStore
from slotledger.infrastructure.storage.sqlite.unit_of_work import SQLiteUnitOfWork

# Singleton instances
_unit_of_work: SQLiteUnitOfWork | None = None
_ledger_reader: SQLiteLedgerReader | None = None
_reference_store: SQLiteReferenceStore | None = None
_movement_query_store: SQLiteMovementQueryStore | None = None
_stock_query_store: SQLiteStockQueryStore | None = None


async def get_unit_of_work() -> SQLiteUnitOfWork:
    """Get singleton unit of work instance."""
    global _unit_of_work
    if _unit_of_work is None:
        _unit_of_work = SQLiteUnitOfWork()
    return _unit_of_work


async def get_ledger_reader() -> SQLiteLedgerReader:
    """Get singleton ledger reader instance."""
    global _ledger_reader
    if _ledger_reader is None:
        _ledger_reader = SQLiteLedgerReader()
    return _ledger_reader


async def get_reference_store() -> SQLiteReferenceStore:
    """Get singleton reference store instance."""
    global _reference_store
    if _reference_store is None:
        _reference_store = SQLiteReferenceStore()
    return _reference_store


async def get_movement_query_store() -> SQLiteMovementQueryStore:
    """Get singleton movement query store instance."""
    global _movement_query_store
    if _movement_query_store is None:
        _movement_query_store = SQLiteMovementQueryStore()
    return _movement_query_store


async def get_stock_query_store() -> SQLiteStockQueryStore:
    """Get singleton stock query store instance."""
    global _stock_query_store
    if _stock_query_store is None:
        _stock_query_store = SQLiteStockQueryStore()
    return _stock_query_store


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    # Store classes
    "SQLiteStockStore",
    "SQLiteLedgerStore",
    "SQLiteUnitOfWork",
    "SQLiteLedgerReader",
    "SQLiteReferenceStore",
    "SQLiteMovementQueryStore",
    "SQLiteStockQueryStore",
    # Factory functions
    "get_unit_of_work",
    "get_ledger_reader",
    "get_reference_store",
    "get_movement_query_store",
    "get_stock_query_store",
]
