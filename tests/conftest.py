"""Pytest configuration and fixtures."""

from collections.abc import Generator
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from uuid import uuid4

import pytest

from slotledger.application.services import reset_services
from slotledger.config import reset_settings
from slotledger.core.entities import (
    Item,
    Operator,
    OperatorRole,
    Rack,
    ResourceStatus,
    Slot,
    Warehouse,
)
from slotledger.core.interfaces import IReferenceStore
from slotledger.core.services import ConcurrencyGate, LedgerEngine
from slotledger.infrastructure.storage.memory import (
    InMemoryLedgerDatabase,
    InMemoryLedgerReader,
    InMemoryReferenceStore,
    InMemoryUnitOfWork,
)


@dataclass
class SeededReferences:
    """Reference rows every ledger test starts from."""

    operator: Operator
    inactive_operator: Operator
    warehouse: Warehouse
    rack: Rack
    slots: list[Slot]
    item: Item
    other_item: Item

    @property
    def slot_a(self) -> Slot:
        return self.slots[0]

    @property
    def slot_b(self) -> Slot:
        return self.slots[1]

    @property
    def slot_c(self) -> Slot:
        return self.slots[2]


async def seed_references(store: IReferenceStore) -> SeededReferences:
    """Create two operators, one 1x3 rack (slots WH1-R1-1-1..3) and two items."""
    now = datetime.now(UTC)
    operator = await store.create_operator(
        Operator(
            id=str(uuid4()),
            username="keeper",
            display_name="Store Keeper",
            role=OperatorRole.KEEPER,
            created_at=now,
        )
    )
    inactive = await store.create_operator(
        Operator(
            id=str(uuid4()),
            username="former",
            display_name="Former Keeper",
            status=ResourceStatus.INACTIVE,
            created_at=now,
        )
    )
    warehouse = await store.create_warehouse(
        Warehouse(id=str(uuid4()), code="WH1", name="Main warehouse", created_at=now)
    )
    rack, slots = await store.create_rack(
        Rack(
            id=str(uuid4()),
            code="R1",
            name="Rack 1",
            level_count=1,
            slots_per_level=3,
            warehouse_id=warehouse.id,
            created_at=now,
        )
    )
    item = await store.create_item(
        Item(id=str(uuid4()), item_code="BOLT-M8", name="Hex bolt M8", uom="pcs", created_at=now)
    )
    other_item = await store.create_item(
        Item(id=str(uuid4()), item_code="NUT-M8", name="Hex nut M8", uom="pcs", created_at=now)
    )
    return SeededReferences(
        operator=operator,
        inactive_operator=inactive,
        warehouse=warehouse,
        rack=rack,
        slots=slots,
        item=item,
        other_item=other_item,
    )


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Point settings at a temporary data dir and drop service singletons."""
    monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path / "data"))
    reset_settings()
    reset_services()
    yield
    reset_settings()
    reset_services()


@pytest.fixture
def seed():
    """Async helper that seeds any IReferenceStore."""
    return seed_references


@pytest.fixture
def occurred_at() -> datetime:
    """Business time used by movement tests."""
    return datetime(2024, 3, 1, 9, 30, tzinfo=UTC)


@pytest.fixture
def memory_db() -> InMemoryLedgerDatabase:
    return InMemoryLedgerDatabase()


@pytest.fixture
def memory_reader(memory_db: InMemoryLedgerDatabase) -> InMemoryLedgerReader:
    return InMemoryLedgerReader(memory_db)


@pytest.fixture
def references() -> InMemoryReferenceStore:
    return InMemoryReferenceStore()


@pytest.fixture
async def world(references: InMemoryReferenceStore) -> SeededReferences:
    """Seeded in-memory reference data."""
    return await seed_references(references)


@pytest.fixture
def gate() -> ConcurrencyGate:
    return ConcurrencyGate()


@pytest.fixture
def engine(
    memory_db: InMemoryLedgerDatabase,
    references: InMemoryReferenceStore,
    gate: ConcurrencyGate,
) -> LedgerEngine:
    """Ledger engine over the in-memory backend."""
    return LedgerEngine(
        unit_of_work=InMemoryUnitOfWork(memory_db),
        references=references,
        gate=gate,
    )
