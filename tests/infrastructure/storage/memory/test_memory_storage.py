"""Unit tests for the in-memory storage backend."""

from datetime import UTC, datetime
from uuid import uuid4

import pytest

from slotledger.core.entities import Movement, MovementKind, Rack, ResourceStatus
from slotledger.core.exceptions import (
    ConflictError,
    DatabaseError,
    MovementAlreadyReversedError,
    NegativeStockError,
    NotFoundError,
    ValidationError,
)
from slotledger.infrastructure.storage.memory import InMemoryUnitOfWork

NOW = datetime(2024, 3, 1, 9, 30, tzinfo=UTC)


def inbound(movement_no: str = "T20240301-000000000001", qty: int = 5) -> Movement:
    return Movement(
        id=str(uuid4()),
        movement_no=movement_no,
        kind=MovementKind.INBOUND,
        occurred_at=NOW,
        recorded_at=NOW,
        operator_id="op1",
        item_id="i1",
        to_slot_id="s1",
        qty=qty,
    )


def reversal_of(target: Movement, movement_no: str) -> Movement:
    return Movement(
        id=str(uuid4()),
        movement_no=movement_no,
        kind=MovementKind.REVERSAL,
        occurred_at=NOW,
        recorded_at=NOW,
        operator_id="op1",
        item_id=target.item_id,
        to_slot_id=target.to_slot_id,
        qty=target.qty,
        ref_movement_id=target.id,
    )


class TestInMemoryUnitOfWork:
    async def test_commit_merges_changes(self, memory_db):
        uow = InMemoryUnitOfWork(memory_db)
        movement = inbound()

        async with uow.begin() as tx:
            await tx.ledger.append(movement)
            await tx.stock.set("i1", "s1", 5, NOW)
            # Staged writes are visible inside the transaction only
            assert await tx.ledger.get_by_no(movement.movement_no) == movement
            assert (await tx.stock.get("i1", "s1")).qty == 5
            assert memory_db.movements == []

        assert memory_db.movements == [movement]
        assert memory_db.stock[("i1", "s1")].qty == 5
        assert memory_db.commits == 1

    async def test_exception_discards_changes(self, memory_db):
        uow = InMemoryUnitOfWork(memory_db)

        with pytest.raises(RuntimeError):
            async with uow.begin() as tx:
                await tx.ledger.append(inbound())
                await tx.stock.set("i1", "s1", 5, NOW)
                raise RuntimeError("boom")

        assert memory_db.movements == []
        assert memory_db.stock == {}
        assert memory_db.commits == 0

    async def test_commit_error_injection(self, memory_db):
        uow = InMemoryUnitOfWork(memory_db)
        memory_db.configure(commit_error=DatabaseError("commit", "disk full"))

        with pytest.raises(DatabaseError):
            async with uow.begin() as tx:
                await tx.ledger.append(inbound())

        assert memory_db.movements == []

    async def test_negative_stock_guard(self, memory_db):
        uow = InMemoryUnitOfWork(memory_db)
        with pytest.raises(NegativeStockError):
            async with uow.begin() as tx:
                await tx.stock.set("i1", "s1", -1, NOW)
        assert memory_db.stock == {}

    async def test_duplicate_movement_no(self, memory_db):
        uow = InMemoryUnitOfWork(memory_db)
        async with uow.begin() as tx:
            await tx.ledger.append(inbound())

        with pytest.raises(DatabaseError):
            async with uow.begin() as tx:
                await tx.ledger.append(inbound())

    @pytest.mark.parametrize(
        "update",
        [
            {"kind": MovementKind.REVERSAL, "qty": -7},
            {"kind": MovementKind.INBOUND, "qty": -1},
            {"kind": MovementKind.COUNT, "qty": 0, "actual_qty": -2},
        ],
    )
    async def test_rejects_rows_the_schema_rejects(self, memory_db, update):
        uow = InMemoryUnitOfWork(memory_db)

        with pytest.raises(DatabaseError) as exc_info:
            async with uow.begin() as tx:
                await tx.ledger.append(inbound().model_copy(update=update))

        assert exc_info.value.code == "DB_ERROR"
        assert memory_db.movements == []

    async def test_signed_adjust_accepted(self, memory_db):
        uow = InMemoryUnitOfWork(memory_db)
        adjust = inbound().model_copy(
            update={"kind": MovementKind.ADJUST, "qty": -3, "to_slot_id": None, "from_slot_id": "s1"}
        )

        async with uow.begin() as tx:
            await tx.ledger.append(adjust)

        assert memory_db.movements == [adjust]

    async def test_second_reversal_rejected(self, memory_db):
        uow = InMemoryUnitOfWork(memory_db)
        target = inbound()
        async with uow.begin() as tx:
            await tx.ledger.append(target)
            await tx.ledger.append(reversal_of(target, "T20240301-000000000002"))

        async with uow.begin() as tx:
            assert await tx.ledger.has_reversal(target.id)
            with pytest.raises(MovementAlreadyReversedError):
                await tx.ledger.append(reversal_of(target, "T20240301-000000000003"))

    async def test_reset(self, memory_db):
        uow = InMemoryUnitOfWork(memory_db)
        async with uow.begin() as tx:
            await tx.ledger.append(inbound())
        memory_db.configure(commit_error=DatabaseError("commit", "x"))

        memory_db.reset()

        assert memory_db.movements == []
        assert memory_db.by_no == {}
        assert memory_db.commit_error is None


class TestInMemoryLedgerReader:
    async def test_reads_committed_state(self, memory_db, memory_reader):
        uow = InMemoryUnitOfWork(memory_db)
        movement = inbound()
        async with uow.begin() as tx:
            await tx.ledger.append(movement)
            await tx.stock.set("i1", "s1", 5, NOW)

        assert await memory_reader.get_movement(movement.movement_no) == movement
        assert (await memory_reader.get_stock_level("i1", "s1")).qty == 5
        assert await memory_reader.get_stock_level("i1", "s2") is None
        assert await memory_reader.all_movements() == [movement]
        assert len(await memory_reader.all_stock_levels()) == 1


class TestInMemoryReferenceStore:
    async def test_rack_generates_slots(self, references, world):
        slots = await references.list_slots(world.rack.id)
        assert [s.code for s in slots] == ["WH1-R1-1-1", "WH1-R1-1-2", "WH1-R1-1-3"]
        assert await references.get_slot_by_code("WH1-R1-1-2") == slots[1]

    async def test_duplicate_item_code(self, references, world):
        duplicate = world.item.model_copy(update={"id": str(uuid4())})
        with pytest.raises(ConflictError):
            await references.create_item(duplicate)

    async def test_rack_requires_existing_warehouse(self, references):
        rack = Rack(
            id=str(uuid4()),
            code="R9",
            name="Rack 9",
            level_count=1,
            slots_per_level=1,
            warehouse_id="missing",
            created_at=NOW,
        )
        with pytest.raises(NotFoundError):
            await references.create_rack(rack)

    async def test_set_status(self, references, world):
        await references.set_status("slot", world.slot_a.id, ResourceStatus.INACTIVE)
        slot = await references.get_slot(world.slot_a.id)
        assert not slot.is_active

    async def test_set_status_unknown_resource(self, references, world):
        with pytest.raises(ValidationError):
            await references.set_status("pallet", world.slot_a.id, ResourceStatus.INACTIVE)

    async def test_set_status_missing_row(self, references, world):
        with pytest.raises(NotFoundError):
            await references.set_status("item", "missing", ResourceStatus.INACTIVE)
