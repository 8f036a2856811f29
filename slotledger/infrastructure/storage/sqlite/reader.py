"""SQLite committed-state reads for the ledger."""

from slotledger.core.entities.movement import Movement
from slotledger.core.entities.stock import StockLevel
from slotledger.core.interfaces.ledger_store import ILedgerReader
from slotledger.infrastructure.storage.sqlite.connection import get_connection
from slotledger.infrastructure.storage.sqlite.rows import (
    MOVEMENT_COLUMNS,
    row_to_movement,
    row_to_stock_level,
)


class SQLiteLedgerReader(ILedgerReader):
    """Pooled read-only access; never takes the writer gate."""

    async def get_movement(self, movement_no: str) -> Movement | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"SELECT {MOVEMENT_COLUMNS} FROM movement WHERE movement_no = ?",
                (movement_no,),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return row_to_movement(row)

    async def get_stock_level(self, item_id: str, slot_id: str) -> StockLevel | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
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

    async def all_movements(self) -> list[Movement]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"SELECT {MOVEMENT_COLUMNS} FROM movement ORDER BY rowid"
            )
            rows = await cursor.fetchall()
            return [row_to_movement(row) for row in rows]

    async def all_stock_levels(self) -> list[StockLevel]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT item_id, slot_id, qty, updated_at FROM stock ORDER BY item_id, slot_id"
            )
            rows = await cursor.fetchall()
            return [row_to_stock_level(row) for row in rows]
