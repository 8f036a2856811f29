"""SQLite implementation of the transaction-bound stock store."""

from datetime import datetime
from uuid import uuid4

import aiosqlite

from slotledger.core.entities.stock import StockLevel
from slotledger.core.exceptions import NegativeStockError
from slotledger.core.interfaces.ledger_store import IStockStore
from slotledger.infrastructure.storage.sqlite.rows import row_to_stock_level, to_db_time


class SQLiteStockStore(IStockStore):
    """Reads and upserts stock rows through the caller's open transaction."""

    def __init__(self, conn: aiosqlite.Connection):
        self._conn = conn

    async def get(self, item_id: str, slot_id: str) -> StockLevel | None:
        cursor = await self._conn.execute(
            """
            SELECT item_id, slot_id, qty, updated_at
            FROM stock
            WHERE item_id = ? AND slot_id = ?
            """,
            (item_id, slot_id),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return row_to_stock_level(row)

    async def set(
        self, item_id: str, slot_id: str, qty: int, timestamp: datetime
    ) -> StockLevel:
        # Last line of defence; the CHECK constraint backs this up
        if qty < 0:
            raise NegativeStockError(item_id, slot_id, qty)

        await self._conn.execute(
            """
            INSERT INTO stock (id, item_id, slot_id, qty, updated_at)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(item_id, slot_id) DO UPDATE SET
                qty = excluded.qty,
                updated_at = excluded.updated_at
            """,
            (str(uuid4()), item_id, slot_id, qty, to_db_time(timestamp)),
        )
        return StockLevel(item_id=item_id, slot_id=slot_id, qty=qty, updated_at=timestamp)
