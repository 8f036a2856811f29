"""SQLite implementation of reference data storage."""

from uuid import uuid4

import aiosqlite

from slotledger.config import get_logger
from slotledger.core.entities.reference import (
    Item,
    Operator,
    OperatorRole,
    Rack,
    ResourceStatus,
    Slot,
    Warehouse,
    format_slot_code,
)
from slotledger.core.exceptions import ConflictError, NotFoundError, ValidationError
from slotledger.core.interfaces.reference_store import IReferenceStore
from slotledger.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from slotledger.infrastructure.storage.sqlite.rows import from_db_time, to_db_time

logger = get_logger(__name__)

_STATUS_TABLES = {
    "operator": "operator",
    "warehouse": "warehouse",
    "rack": "rack",
    "slot": "slot",
    "item": "item",
}


class SQLiteReferenceStore(IReferenceStore):
    """Operators, warehouses, racks, slots and items."""

    # Operators

    async def create_operator(self, operator: Operator) -> Operator:
        async with get_transaction() as conn:
            try:
                await conn.execute(
                    """
                    INSERT INTO operator (id, username, display_name, role, status, created_at)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        operator.id,
                        operator.username,
                        operator.display_name,
                        operator.role.value,
                        operator.status.value,
                        to_db_time(operator.created_at),
                    ),
                )
            except aiosqlite.IntegrityError as e:
                raise ConflictError(
                    f"Operator username already exists: {operator.username}",
                    details={"username": operator.username},
                ) from e
        logger.info("operator_created", operator_id=operator.id, username=operator.username)
        return operator

    async def get_operator(self, operator_id: str) -> Operator | None:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM operator WHERE id = ?", (operator_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_operator(row)

    # Warehouses and racks

    async def create_warehouse(self, warehouse: Warehouse) -> Warehouse:
        async with get_transaction() as conn:
            try:
                await conn.execute(
                    """
                    INSERT INTO warehouse (id, code, name, status, created_at)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (
                        warehouse.id,
                        warehouse.code,
                        warehouse.name,
                        warehouse.status.value,
                        to_db_time(warehouse.created_at),
                    ),
                )
            except aiosqlite.IntegrityError as e:
                raise ConflictError(
                    f"Warehouse code already exists: {warehouse.code}",
                    details={"code": warehouse.code},
                ) from e
        logger.info("warehouse_created", warehouse_id=warehouse.id, code=warehouse.code)
        return warehouse

    async def get_warehouse(self, warehouse_id: str) -> Warehouse | None:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM warehouse WHERE id = ?", (warehouse_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            return Warehouse(
                id=row["id"],
                code=row["code"],
                name=row["name"],
                status=ResourceStatus(row["status"]),
                created_at=from_db_time(row["created_at"]),
            )

    async def create_rack(self, rack: Rack) -> tuple[Rack, list[Slot]]:
        """
        Create a rack and its level_count x slots_per_level slots.

        Slot codes are ``<warehouse>-<rack>-<level>-<slot>``, numbered from 1.
        """
        if rack.level_count < 1 or rack.slots_per_level < 1:
            raise ValidationError(
                field="rack",
                message="level_count and slots_per_level must both be >= 1",
                value=f"{rack.level_count}x{rack.slots_per_level}",
            )
        if not rack.warehouse_id:
            raise ValidationError(
                field="warehouse_id",
                message="A warehouse is required to generate slot codes",
            )
        warehouse = await self.get_warehouse(rack.warehouse_id)
        if warehouse is None:
            raise NotFoundError("warehouse", rack.warehouse_id)

        slots = [
            Slot(
                id=str(uuid4()),
                rack_id=rack.id,
                warehouse_id=warehouse.id,
                level_no=level_no,
                slot_no=slot_no,
                code=format_slot_code(warehouse.code, rack.code, level_no, slot_no),
                created_at=rack.created_at,
            )
            for level_no in range(1, rack.level_count + 1)
            for slot_no in range(1, rack.slots_per_level + 1)
        ]

        async with get_transaction() as conn:
            try:
                await conn.execute(
                    """
                    INSERT INTO rack (
                        id, code, name, status, level_count, slots_per_level,
                        location, warehouse_id, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        rack.id,
                        rack.code,
                        rack.name,
                        rack.status.value,
                        rack.level_count,
                        rack.slots_per_level,
                        rack.location,
                        rack.warehouse_id,
                        to_db_time(rack.created_at),
                    ),
                )
                await conn.executemany(
                    """
                    INSERT INTO slot (
                        id, rack_id, warehouse_id, level_no, slot_no, code, status, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    [
                        (
                            s.id,
                            s.rack_id,
                            s.warehouse_id,
                            s.level_no,
                            s.slot_no,
                            s.code,
                            s.status.value,
                            to_db_time(s.created_at),
                        )
                        for s in slots
                    ],
                )
            except aiosqlite.IntegrityError as e:
                raise ConflictError(
                    f"Rack code already exists in warehouse {warehouse.code}: {rack.code}",
                    details={"code": rack.code, "warehouse_id": warehouse.id},
                ) from e

        logger.info(
            "rack_created",
            rack_id=rack.id,
            code=rack.code,
            slot_count=len(slots),
        )
        return rack, slots

    async def get_rack(self, rack_id: str) -> Rack | None:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM rack WHERE id = ?", (rack_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            return Rack(
                id=row["id"],
                code=row["code"],
                name=row["name"],
                status=ResourceStatus(row["status"]),
                level_count=row["level_count"],
                slots_per_level=row["slots_per_level"],
                location=row["location"],
                warehouse_id=row["warehouse_id"],
                created_at=from_db_time(row["created_at"]),
            )

    # Slots

    async def get_slot(self, slot_id: str) -> Slot | None:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM slot WHERE id = ?", (slot_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_slot(row)

    async def get_slot_by_code(self, code: str) -> Slot | None:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM slot WHERE code = ?", (code,))
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_slot(row)

    async def list_slots(self, rack_id: str) -> list[Slot]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM slot WHERE rack_id = ? ORDER BY level_no, slot_no",
                (rack_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_slot(row) for row in rows]

    # Items

    async def create_item(self, item: Item) -> Item:
        async with get_transaction() as conn:
            try:
                await conn.execute(
                    """
                    INSERT INTO item (
                        id, item_code, name, model, spec, uom, status, remark, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        item.id,
                        item.item_code,
                        item.name,
                        item.model,
                        item.spec,
                        item.uom,
                        item.status.value,
                        item.remark,
                        to_db_time(item.created_at),
                    ),
                )
            except aiosqlite.IntegrityError as e:
                raise ConflictError(
                    f"Item code already exists: {item.item_code}",
                    details={"item_code": item.item_code},
                ) from e
        logger.info("item_created", item_id=item.id, item_code=item.item_code)
        return item

    async def get_item(self, item_id: str) -> Item | None:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM item WHERE id = ?", (item_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_item(row)

    async def get_item_by_code(self, item_code: str) -> Item | None:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM item WHERE item_code = ?", (item_code,))
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_item(row)

    # Status

    async def set_status(
        self, resource: str, resource_id: str, status: ResourceStatus
    ) -> None:
        table = _STATUS_TABLES.get(resource)
        if table is None:
            raise ValidationError(field="resource", message="Unknown resource type", value=resource)

        async with get_transaction() as conn:
            cursor = await conn.execute(
                f"UPDATE {table} SET status = ? WHERE id = ?",
                (status.value, resource_id),
            )
            if cursor.rowcount == 0:
                raise NotFoundError(resource, resource_id)
        logger.info(
            "resource_status_changed",
            resource=resource,
            resource_id=resource_id,
            status=status.value,
        )

    @staticmethod
    def _row_to_operator(row: aiosqlite.Row) -> Operator:
        return Operator(
            id=row["id"],
            username=row["username"],
            display_name=row["display_name"],
            role=OperatorRole(row["role"]),
            status=ResourceStatus(row["status"]),
            created_at=from_db_time(row["created_at"]),
        )

    @staticmethod
    def _row_to_slot(row: aiosqlite.Row) -> Slot:
        return Slot(
            id=row["id"],
            rack_id=row["rack_id"],
            warehouse_id=row["warehouse_id"],
            level_no=row["level_no"],
            slot_no=row["slot_no"],
            code=row["code"],
            status=ResourceStatus(row["status"]),
            created_at=from_db_time(row["created_at"]),
        )

    @staticmethod
    def _row_to_item(row: aiosqlite.Row) -> Item:
        return Item(
            id=row["id"],
            item_code=row["item_code"],
            name=row["name"],
            model=row["model"],
            spec=row["spec"],
            uom=row["uom"],
            status=ResourceStatus(row["status"]),
            remark=row["remark"],
            created_at=from_db_time(row["created_at"]),
        )
