"""Row and timestamp conversions shared by the SQLite stores."""

from datetime import UTC, datetime

import aiosqlite

from slotledger.core.entities.movement import Movement, MovementKind
from slotledger.core.entities.stock import StockLevel

MOVEMENT_COLUMNS = (
    "id, movement_no, kind, occurred_at, recorded_at, operator_id, item_id, "
    "from_slot_id, to_slot_id, qty, actual_qty, ref_movement_id, note"
)


def to_db_time(value: datetime) -> str:
    """Serialise as fixed-width UTC ISO-8601 so text order matches time order."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="microseconds")


def from_db_time(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def row_to_movement(row: aiosqlite.Row) -> Movement:
    """Convert a database row to a Movement entity."""
    return Movement(
        id=row["id"],
        movement_no=row["movement_no"],
        kind=MovementKind(row["kind"]),
        occurred_at=from_db_time(row["occurred_at"]),
        recorded_at=from_db_time(row["recorded_at"]),
        operator_id=row["operator_id"],
        item_id=row["item_id"],
        from_slot_id=row["from_slot_id"],
        to_slot_id=row["to_slot_id"],
        qty=row["qty"],
        actual_qty=row["actual_qty"],
        ref_movement_id=row["ref_movement_id"],
        note=row["note"],
    )


def row_to_stock_level(row: aiosqlite.Row) -> StockLevel:
    """Convert a database row to a StockLevel entity."""
    return StockLevel(
        item_id=row["item_id"],
        slot_id=row["slot_id"],
        qty=row["qty"],
        updated_at=from_db_time(row["updated_at"]),
    )
