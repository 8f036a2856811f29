"""SQLite implementation of the append-only movement ledger."""

import aiosqlite

from slotledger.config import get_logger
from slotledger.core.entities.movement import Movement, MovementKind
from slotledger.core.exceptions import DatabaseError, MovementAlreadyReversedError
from slotledger.core.interfaces.ledger_store import ILedgerStore
from slotledger.infrastructure.storage.sqlite.rows import (
    MOVEMENT_COLUMNS,
    row_to_movement,
    to_db_time,
)

logger = get_logger(__name__)


class SQLiteLedgerStore(ILedgerStore):
    """Appends and reads movements through the caller's open transaction."""

    def __init__(self, conn: aiosqlite.Connection):
        self._conn = conn

    async def append(self, movement: Movement) -> Movement:
        try:
            await self._conn.execute(
                f"""
                INSERT INTO movement ({MOVEMENT_COLUMNS})
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    movement.id,
                    movement.movement_no,
                    movement.kind.value,
                    to_db_time(movement.occurred_at),
                    to_db_time(movement.recorded_at),
                    movement.operator_id,
                    movement.item_id,
                    movement.from_slot_id,
                    movement.to_slot_id,
                    movement.qty,
                    movement.actual_qty,
                    movement.ref_movement_id,
                    movement.note,
                ),
            )
        except aiosqlite.IntegrityError as e:
            if movement.kind == MovementKind.REVERSAL and "ref_movement_id" in str(e):
                target_no = await self._movement_no_of(movement.ref_movement_id or "")
                raise MovementAlreadyReversedError(target_no or movement.ref_movement_id or "") from e
            logger.error(
                "movement_append_failed",
                movement_no=movement.movement_no,
                error=str(e),
            )
            raise DatabaseError("append_movement", str(e)) from e
        return movement

    async def get_by_no(self, movement_no: str) -> Movement | None:
        cursor = await self._conn.execute(
            f"SELECT {MOVEMENT_COLUMNS} FROM movement WHERE movement_no = ?",
            (movement_no,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return row_to_movement(row)

    async def has_reversal(self, movement_id: str) -> bool:
        cursor = await self._conn.execute(
            "SELECT 1 FROM movement WHERE kind = 'REVERSAL' AND ref_movement_id = ? LIMIT 1",
            (movement_id,),
        )
        return await cursor.fetchone() is not None

    async def _movement_no_of(self, movement_id: str) -> str | None:
        cursor = await self._conn.execute(
            "SELECT movement_no FROM movement WHERE id = ?", (movement_id,)
        )
        row = await cursor.fetchone()
        return row["movement_no"] if row else None
