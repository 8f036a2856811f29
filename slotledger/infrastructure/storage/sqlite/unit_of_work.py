"""SQLite unit of work spanning the ledger and stock stores."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import aiosqlite

from slotledger.config import get_logger
from slotledger.core.exceptions import DatabaseError
from slotledger.core.interfaces.ledger_store import IUnitOfWork, LedgerTransaction
from slotledger.infrastructure.storage.sqlite.connection import get_transaction
from slotledger.infrastructure.storage.sqlite.ledger_store import SQLiteLedgerStore
from slotledger.infrastructure.storage.sqlite.stock_store import SQLiteStockStore

logger = get_logger(__name__)


class SQLiteUnitOfWork(IUnitOfWork):
    """
    One write transaction per ledger operation.

    Both stores share the same connection, so the ledger append and the stock
    updates commit or roll back together. Driver errors surface as
    DatabaseError.
    """

    @asynccontextmanager
    async def begin(self) -> AsyncIterator[LedgerTransaction]:
        try:
            async with get_transaction() as conn:
                yield LedgerTransaction(
                    stock=SQLiteStockStore(conn),
                    ledger=SQLiteLedgerStore(conn),
                )
        except aiosqlite.Error as e:
            logger.error("ledger_transaction_failed", error=str(e))
            raise DatabaseError("ledger_transaction", str(e)) from e
