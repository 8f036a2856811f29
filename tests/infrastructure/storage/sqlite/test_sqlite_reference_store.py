"""Tests for SQLiteReferenceStore."""

from datetime import UTC, datetime
from uuid import uuid4

import pytest

from slotledger.core.entities import Operator, OperatorRole, Rack, ResourceStatus, Warehouse
from slotledger.core.exceptions import ConflictError, NotFoundError, ValidationError

NOW = datetime(2024, 3, 1, tzinfo=UTC)


def rack(warehouse_id: str | None, code: str = "R2", levels: int = 2, per_level: int = 2) -> Rack:
    return Rack(
        id=str(uuid4()),
        code=code,
        name=f"Rack {code}",
        level_count=levels,
        slots_per_level=per_level,
        location="Aisle 3",
        warehouse_id=warehouse_id,
        created_at=NOW,
    )


class TestOperators:
    async def test_round_trip(self, sqlite_references, sqlite_world):
        stored = await sqlite_references.get_operator(sqlite_world.operator.id)
        assert stored.username == "keeper"
        assert stored.role == OperatorRole.KEEPER
        assert stored.is_active

    async def test_inactive_status_persisted(self, sqlite_references, sqlite_world):
        stored = await sqlite_references.get_operator(sqlite_world.inactive_operator.id)
        assert stored.status == ResourceStatus.INACTIVE

    async def test_duplicate_username(self, sqlite_references, sqlite_world):
        with pytest.raises(ConflictError):
            await sqlite_references.create_operator(
                Operator(id=str(uuid4()), username="keeper", display_name="Dup", created_at=NOW)
            )

    async def test_missing(self, sqlite_references, sqlite_world):
        assert await sqlite_references.get_operator("missing") is None


class TestRacksAndSlots:
    async def test_slots_generated(self, sqlite_references, sqlite_world):
        created, slots = await sqlite_references.create_rack(rack(sqlite_world.warehouse.id))

        assert [s.code for s in slots] == ["WH1-R2-1-1", "WH1-R2-1-2", "WH1-R2-2-1", "WH1-R2-2-2"]
        listed = await sqlite_references.list_slots(created.id)
        assert [s.code for s in listed] == [s.code for s in slots]
        assert all(s.warehouse_id == sqlite_world.warehouse.id for s in listed)

        stored = await sqlite_references.get_rack(created.id)
        assert stored.level_count == 2
        assert stored.location == "Aisle 3"

    async def test_get_slot_by_code(self, sqlite_references, sqlite_world):
        slot = await sqlite_references.get_slot_by_code("WH1-R1-1-3")
        assert slot.id == sqlite_world.slot_c.id
        assert slot.level_no == 1
        assert slot.slot_no == 3
        assert await sqlite_references.get_slot_by_code("WH1-R1-9-9") is None

    async def test_duplicate_rack_code_in_warehouse(self, sqlite_references, sqlite_world):
        with pytest.raises(ConflictError):
            await sqlite_references.create_rack(rack(sqlite_world.warehouse.id, code="R1"))

    async def test_same_rack_code_in_other_warehouse(self, sqlite_references, sqlite_world):
        other = await sqlite_references.create_warehouse(
            Warehouse(id=str(uuid4()), code="WH2", name="Overflow", created_at=NOW)
        )
        _, slots = await sqlite_references.create_rack(rack(other.id, code="R1", levels=1, per_level=1))
        assert slots[0].code == "WH2-R1-1-1"

    @pytest.mark.parametrize("levels, per_level", [(0, 2), (2, 0)])
    async def test_invalid_dimensions(self, sqlite_references, sqlite_world, levels, per_level):
        with pytest.raises(ValidationError):
            await sqlite_references.create_rack(
                rack(sqlite_world.warehouse.id, levels=levels, per_level=per_level)
            )

    async def test_requires_warehouse(self, sqlite_references, sqlite_world):
        with pytest.raises(ValidationError):
            await sqlite_references.create_rack(rack(None))
        with pytest.raises(NotFoundError):
            await sqlite_references.create_rack(rack("missing"))


class TestItems:
    async def test_lookup_by_code(self, sqlite_references, sqlite_world):
        item = await sqlite_references.get_item_by_code("BOLT-M8")
        assert item.id == sqlite_world.item.id
        assert item.uom == "pcs"
        assert await sqlite_references.get_item(sqlite_world.other_item.id) is not None

    async def test_duplicate_code(self, sqlite_references, sqlite_world):
        duplicate = sqlite_world.item.model_copy(update={"id": str(uuid4())})
        with pytest.raises(ConflictError):
            await sqlite_references.create_item(duplicate)


class TestSetStatus:
    async def test_deactivate_item(self, sqlite_references, sqlite_world):
        await sqlite_references.set_status("item", sqlite_world.item.id, ResourceStatus.INACTIVE)
        item = await sqlite_references.get_item(sqlite_world.item.id)
        assert not item.is_active

    async def test_reactivate_operator(self, sqlite_references, sqlite_world):
        await sqlite_references.set_status(
            "operator", sqlite_world.inactive_operator.id, ResourceStatus.ACTIVE
        )
        operator = await sqlite_references.get_operator(sqlite_world.inactive_operator.id)
        assert operator.is_active

    async def test_unknown_resource(self, sqlite_references, sqlite_world):
        with pytest.raises(ValidationError):
            await sqlite_references.set_status("stock", "x", ResourceStatus.INACTIVE)

    async def test_missing_row(self, sqlite_references, sqlite_world):
        with pytest.raises(NotFoundError):
            await sqlite_references.set_status("slot", "missing", ResourceStatus.INACTIVE)
