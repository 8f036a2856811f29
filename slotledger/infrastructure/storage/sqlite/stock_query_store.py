"""SQLite stock listings, by slot and by item."""

from typing import Any

import aiosqlite

from slotledger.core.entities.reports import StockFilter, StockPage, StockRow
from slotledger.core.interfaces.query_store import IStockQueryStore
from slotledger.core.services.pagination import page_offset
from slotledger.infrastructure.storage.sqlite.connection import get_connection

_FROM_CLAUSE = """
    FROM stock
    JOIN slot ON stock.slot_id = slot.id
    JOIN rack ON slot.rack_id = rack.id
    LEFT JOIN warehouse ON rack.warehouse_id = warehouse.id
    JOIN item ON stock.item_id = item.id
"""

# Display name of whoever recorded the latest movement touching the pair
_LATEST_OPERATOR = """
    (
        SELECT op.display_name FROM movement AS t
        JOIN operator AS op ON t.operator_id = op.id
        WHERE t.item_id = stock.item_id
          AND (t.to_slot_id = stock.slot_id OR t.from_slot_id = stock.slot_id)
        ORDER BY t.occurred_at DESC, t.recorded_at DESC
        LIMIT 1
    ) AS operator_name
"""


class SQLiteStockQueryStore(IStockQueryStore):
    """Stock levels joined with warehouse, rack, slot and item metadata."""

    async def list_stock_by_slot(
        self, filters: StockFilter, page_index: int, page_size: int
    ) -> StockPage:
        return await self._list(filters, page_index, page_size, "rack.code, slot.code")

    async def list_stock_by_item(
        self, filters: StockFilter, page_index: int, page_size: int
    ) -> StockPage:
        return await self._list(filters, page_index, page_size, "item.item_code, slot.code")

    async def _list(
        self, filters: StockFilter, page_index: int, page_size: int, order_by: str
    ) -> StockPage:
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
                    warehouse.id AS warehouse_id,
                    warehouse.code AS warehouse_code,
                    warehouse.name AS warehouse_name,
                    rack.id AS rack_id, rack.code AS rack_code, rack.name AS rack_name,
                    slot.id AS slot_id, slot.code AS slot_code,
                    item.id AS item_id, item.item_code, item.name AS item_name,
                    {_LATEST_OPERATOR},
                    stock.qty
                {_FROM_CLAUSE}
                {where_clause}
                ORDER BY {order_by}
                LIMIT ? OFFSET ?
                """,
                [*params, page_size, offset],
            )
            rows = await cursor.fetchall()

        return StockPage(items=[self._row_to_stock_row(row) for row in rows], total=total)

    @staticmethod
    def _build_where(filters: StockFilter) -> tuple[str, list[Any]]:
        conditions: list[str] = []
        params: list[Any] = []

        if filters.warehouse_id:
            conditions.append("warehouse.id = ?")
            params.append(filters.warehouse_id)

        if filters.rack_id:
            conditions.append("rack.id = ?")
            params.append(filters.rack_id)

        if filters.slot_id:
            conditions.append("slot.id = ?")
            params.append(filters.slot_id)

        if filters.item_id:
            conditions.append("item.id = ?")
            params.append(filters.item_id)

        if filters.operator_id:
            conditions.append(
                "EXISTS (SELECT 1 FROM movement AS t2"
                " WHERE (t2.to_slot_id = stock.slot_id OR t2.from_slot_id = stock.slot_id)"
                " AND t2.operator_id = ?)"
            )
            params.append(filters.operator_id)

        where_clause = ""
        if conditions:
            where_clause = "WHERE " + " AND ".join(conditions)
        return where_clause, params

    @staticmethod
    def _row_to_stock_row(row: aiosqlite.Row) -> StockRow:
        return StockRow(
            warehouse_id=row["warehouse_id"],
            warehouse_code=row["warehouse_code"],
            warehouse_name=row["warehouse_name"],
            rack_id=row["rack_id"],
            rack_code=row["rack_code"],
            rack_name=row["rack_name"],
            slot_id=row["slot_id"],
            slot_code=row["slot_code"],
            item_id=row["item_id"],
            item_code=row["item_code"],
            item_name=row["item_name"],
            operator_name=row["operator_name"],
            qty=row["qty"],
        )
