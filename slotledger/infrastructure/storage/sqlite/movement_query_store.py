"""SQLite movement listing."""

from typing import Any

import aiosqlite

from slotledger.core.entities.movement import MovementKind
from slotledger.core.entities.reports import MovementFilter, MovementListRow, MovementPage
from slotledger.core.interfaces.query_store import IMovementQueryStore
from slotledger.core.services.pagination import page_offset
from slotledger.infrastructure.storage.sqlite.connection import get_connection
from slotledger.infrastructure.storage.sqlite.rows import from_db_time, to_db_time

_FROM_CLAUSE = """
    FROM movement AS m
    JOIN operator AS op ON m.operator_id = op.id
    JOIN item AS it ON m.item_id = it.id
    LEFT JOIN slot AS fs ON m.from_slot_id = fs.id
    LEFT JOIN slot AS ts ON m.to_slot_id = ts.id
    LEFT JOIN rack AS fr ON fs.rack_id = fr.id
    LEFT JOIN rack AS tr ON ts.rack_id = tr.id
    LEFT JOIN movement AS ref ON m.ref_movement_id = ref.id
"""


class SQLiteMovementQueryStore(IMovementQueryStore):
    """Movement listing joined with operator, item and slot display fields."""

    async def list_movements(
        self, filters: MovementFilter, page_index: int, page_size: int
    ) -> MovementPage:
        offset = page_offset(page_index, page_size)
        where_clause, params = self._build_where(filters)

        async with get_connection() as conn:
            cursor = await conn.execute(
                f"SELECT COUNT(1) {_FROM_CLAUSE} {where_clause}", params
            )
            total = (await cursor.fetchone())[0]

            cursor = await conn.execute(
                f"""
                SELECT
                    m.id, m.movement_no, m.kind, m.occurred_at, m.recorded_at,
                    m.operator_id, op.display_name AS operator_name,
                    m.item_id, it.item_code, it.name AS item_name,
                    m.from_slot_id, fs.code AS from_slot_code,
                    m.to_slot_id, ts.code AS to_slot_code,
                    m.qty, m.actual_qty, m.note,
                    m.ref_movement_id, ref.movement_no AS ref_movement_no, ref.kind AS ref_kind,
                    EXISTS (
                        SELECT 1 FROM movement AS rev
                        WHERE rev.ref_movement_id = m.id AND rev.kind = 'REVERSAL'
                    ) AS has_reversal
                {_FROM_CLAUSE}
                {where_clause}
                ORDER BY m.recorded_at DESC, m.rowid DESC
                LIMIT ? OFFSET ?
                """,
                [*params, page_size, offset],
            )
            rows = await cursor.fetchall()

        return MovementPage(items=[self._row_to_list_row(row) for row in rows], total=total)

    @staticmethod
    def _build_where(filters: MovementFilter) -> tuple[str, list[Any]]:
        conditions: list[str] = []
        params: list[Any] = []

        if filters.kind:
            conditions.append("m.kind = ?")
            params.append(filters.kind.value)

        keyword = (filters.keyword or "").strip()
        if keyword:
            like = f"%{keyword}%"
            conditions.append(
                "(m.movement_no LIKE ? OR it.item_code LIKE ? OR it.name LIKE ?"
                " OR op.display_name LIKE ? OR fs.code LIKE ? OR ts.code LIKE ?)"
            )
            params.extend([like] * 6)

        if filters.item_id:
            conditions.append("m.item_id = ?")
            params.append(filters.item_id)

        if filters.operator_id:
            conditions.append("m.operator_id = ?")
            params.append(filters.operator_id)

        if filters.slot_id:
            conditions.append("(m.from_slot_id = ? OR m.to_slot_id = ?)")
            params.extend([filters.slot_id, filters.slot_id])

        if filters.warehouse_id:
            conditions.append("(fr.warehouse_id = ? OR tr.warehouse_id = ?)")
            params.extend([filters.warehouse_id, filters.warehouse_id])

        if filters.rack_id:
            conditions.append("(fr.id = ? OR tr.id = ?)")
            params.extend([filters.rack_id, filters.rack_id])

        if filters.start_at:
            conditions.append("m.occurred_at >= ?")
            params.append(to_db_time(filters.start_at))

        if filters.end_at:
            conditions.append("m.occurred_at <= ?")
            params.append(to_db_time(filters.end_at))

        where_clause = ""
        if conditions:
            where_clause = "WHERE " + " AND ".join(conditions)
        return where_clause, params

    @staticmethod
    def _row_to_list_row(row: aiosqlite.Row) -> MovementListRow:
        return MovementListRow(
            id=row["id"],
            movement_no=row["movement_no"],
            kind=MovementKind(row["kind"]),
            occurred_at=from_db_time(row["occurred_at"]),
            recorded_at=from_db_time(row["recorded_at"]),
            operator_id=row["operator_id"],
            operator_name=row["operator_name"],
            item_id=row["item_id"],
            item_code=row["item_code"],
            item_name=row["item_name"],
            from_slot_id=row["from_slot_id"],
            from_slot_code=row["from_slot_code"],
            to_slot_id=row["to_slot_id"],
            to_slot_code=row["to_slot_code"],
            qty=row["qty"],
            actual_qty=row["actual_qty"],
            ref_movement_id=row["ref_movement_id"],
            ref_movement_no=row["ref_movement_no"],
            ref_kind=MovementKind(row["ref_kind"]) if row["ref_kind"] else None,
            has_reversal=bool(row["has_reversal"]),
            note=row["note"],
        )
