"""Pytest fixtures for SQLite storage tests."""

from collections.abc import AsyncGenerator
from pathlib import Path
from unittest.mock import MagicMock

import pytest

import slotledger.infrastructure.storage.sqlite.connection as conn_module
from slotledger.core.services import ConcurrencyGate, LedgerEngine
from slotledger.infrastructure.storage.sqlite import (
    SQLiteLedgerReader,
    SQLiteReferenceStore,
    SQLiteUnitOfWork,
    close_pool,
)
from slotledger.infrastructure.storage.sqlite.migrations import initialize_database


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "test.db"


@pytest.fixture
async def ledger_db(
    temp_db_path: Path, monkeypatch: pytest.MonkeyPatch
) -> AsyncGenerator[Path, None]:
    """Migrated temporary database with the global pool pointed at it."""
    results = await initialize_database(temp_db_path, create_backup_before=False)
    assert all(r.success for r in results)

    conn_module._pool = None
    mock_settings = MagicMock()
    mock_settings.storage.db_path = temp_db_path
    mock_settings.storage.pool_size = 2
    mock_settings.storage.busy_timeout = 5000
    monkeypatch.setattr(conn_module, "get_settings", lambda: mock_settings)

    try:
        yield temp_db_path
    finally:
        await close_pool()


@pytest.fixture
def sqlite_references(ledger_db: Path) -> SQLiteReferenceStore:
    return SQLiteReferenceStore()


@pytest.fixture
async def sqlite_world(sqlite_references: SQLiteReferenceStore, seed):
    """Seeded reference data in the temporary database."""
    return await seed(sqlite_references)


@pytest.fixture
def sqlite_reader(ledger_db: Path) -> SQLiteLedgerReader:
    return SQLiteLedgerReader()


@pytest.fixture
def sqlite_engine(sqlite_references: SQLiteReferenceStore) -> LedgerEngine:
    """Ledger engine over the SQLite backend."""
    return LedgerEngine(
        unit_of_work=SQLiteUnitOfWork(),
        references=sqlite_references,
        gate=ConcurrencyGate(),
    )
