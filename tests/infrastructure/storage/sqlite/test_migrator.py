"""Tests for schema migrations and ledger integrity checks."""

from datetime import UTC, datetime
from pathlib import Path
from unittest.mock import patch

import aiosqlite
import pytest

from slotledger.infrastructure.storage.sqlite.migrations import migrator
from slotledger.infrastructure.storage.sqlite.migrations.migrator import (
    LEDGER_TABLES,
    Migration,
    create_backup,
    discover_migrations,
    get_applied_migrations,
    get_migration_status,
    initialize_database,
    restore_backup,
    verify_schema_integrity,
)

WHEN = datetime(2024, 3, 1, 9, 30, tzinfo=UTC)


def write_script(directory: Path, name: str, sql: str) -> Migration:
    path = directory / name
    path.write_text(sql)
    return Migration.from_path(path)


async def checks_by_name(db_path: Path) -> dict:
    return {check.name: check for check in await verify_schema_integrity(db_path)}


async def execute(db_path: Path, sql: str) -> None:
    async with aiosqlite.connect(db_path) as conn:
        await conn.execute(sql)
        await conn.commit()


class TestMigrationScripts:
    def test_from_path(self, tmp_path: Path):
        migration = write_script(tmp_path, "v007_add_notes.sql", "SELECT 1;")

        assert migration.version == "007"
        assert migration.name == "add_notes"
        assert len(migration.checksum) == 16

    def test_checksum_follows_content(self, tmp_path: Path):
        first = write_script(tmp_path, "v001_a.sql", "SELECT 1;")
        second = write_script(tmp_path, "v002_a.sql", "SELECT 2;")
        assert first.checksum != second.checksum

    def test_invalid_filename(self, tmp_path: Path):
        (tmp_path / "init.sql").write_text("SELECT 1;")
        with pytest.raises(ValueError):
            Migration.from_path(tmp_path / "init.sql")

    def test_discovery_orders_numerically_and_skips_strays(self, tmp_path: Path):
        write_script(tmp_path, "v10_later.sql", "SELECT 1;")
        write_script(tmp_path, "v9_earlier.sql", "SELECT 1;")
        (tmp_path / "vnotes.sql").write_text("-- not a migration")

        assert [m.version for m in discover_migrations(tmp_path)] == ["9", "10"]

    def test_ships_initial_schema(self):
        assert [(m.version, m.name) for m in discover_migrations()][:1] == [("001", "init")]


class TestInitializeDatabase:
    async def test_fresh_database(self, temp_db_path: Path):
        results = await initialize_database(temp_db_path, create_backup_before=False)

        assert [(r.version, r.success) for r in results] == [("001", True)]
        async with aiosqlite.connect(temp_db_path) as conn:
            cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
            assert set(LEDGER_TABLES) <= {row[0] for row in await cursor.fetchall()}

    async def test_rerun_applies_nothing_and_drops_backup(self, temp_db_path: Path):
        await initialize_database(temp_db_path, create_backup_before=False)

        assert await initialize_database(temp_db_path) == []
        assert list(temp_db_path.parent.glob("*.backup_*")) == []

    async def test_edited_script_stops_run(self, temp_db_path: Path, tmp_path: Path):
        await initialize_database(temp_db_path, create_backup_before=False)
        edited = write_script(tmp_path, "v001_init.sql", "-- edited after release")
        later = write_script(tmp_path, "v002_more.sql", "CREATE TABLE more (id INTEGER);")

        with patch.object(migrator, "discover_migrations", return_value=[edited, later]):
            results = await initialize_database(temp_db_path, create_backup_before=False)

        assert results == []
        async with aiosqlite.connect(temp_db_path) as conn:
            assert list(await get_applied_migrations(conn)) == ["001"]

    async def test_failed_migration_restores_backup(self, temp_db_path: Path, tmp_path: Path):
        await initialize_database(temp_db_path, create_backup_before=False)
        broken = write_script(
            tmp_path,
            "v002_broken.sql",
            "CREATE TABLE half_done (id INTEGER);\nCREATE TABLE oops (;",
        )

        with patch.object(
            migrator, "discover_migrations", return_value=[*discover_migrations(), broken]
        ):
            results = await initialize_database(temp_db_path)

        assert [(r.version, r.success) for r in results] == [("002", False)]
        assert results[0].error
        async with aiosqlite.connect(temp_db_path) as conn:
            cursor = await conn.execute(
                "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = 'half_done'"
            )
            assert await cursor.fetchone() is None
            assert list(await get_applied_migrations(conn)) == ["001"]


class TestMigrationStatus:
    async def test_missing_database(self, tmp_path: Path):
        status = await get_migration_status(tmp_path / "absent.db")
        assert status["exists"] is False
        assert status["current_version"] is None

    async def test_up_to_date(self, temp_db_path: Path):
        await initialize_database(temp_db_path, create_backup_before=False)

        status = await get_migration_status(temp_db_path)

        assert status["current_version"] == "001"
        assert status["applied_migrations"] == ["001"]
        assert status["pending_migrations"] == []


class TestIntegrityChecks:
    async def test_fresh_database_passes(self, temp_db_path: Path):
        await initialize_database(temp_db_path, create_backup_before=False)

        checks = await checks_by_name(temp_db_path)

        assert set(checks) == {
            "integrity",
            "foreign_keys",
            "required_tables",
            "reversal_uniqueness",
            "negative_quantities",
            "reversal_targets",
            "count_adjust_pairs",
            "stock_matches_ledger",
        }
        assert all(check.passed for check in checks.values())

    async def test_missing_schema_skips_ledger_checks(self, temp_db_path: Path):
        await execute(temp_db_path, "CREATE TABLE unrelated (id INTEGER)")

        checks = await checks_by_name(temp_db_path)

        assert checks["required_tables"].status == "FAIL"
        assert "movement" in checks["required_tables"].details["missing"]
        assert checks["reversal_uniqueness"].passed is False
        assert "stock_matches_ledger" not in checks

    async def test_recorded_ledger_passes(self, ledger_db, sqlite_engine, sqlite_world):
        w = sqlite_world
        await sqlite_engine.record_inbound(w.operator.id, w.item.id, w.slot_a.id, 9, WHEN)
        await sqlite_engine.record_count(w.operator.id, w.item.id, w.slot_a.id, 2, WHEN)
        outbound_no = await sqlite_engine.record_outbound(w.operator.id, w.item.id, w.slot_a.id, 1, WHEN)
        await sqlite_engine.reverse(w.operator.id, outbound_no, WHEN)

        checks = await checks_by_name(ledger_db)

        assert all(check.passed for check in checks.values())

    async def test_tampered_stock_detected(self, ledger_db, sqlite_engine, sqlite_world):
        w = sqlite_world
        await sqlite_engine.record_inbound(w.operator.id, w.item.id, w.slot_a.id, 5, WHEN)
        await execute(ledger_db, "UPDATE stock SET qty = qty + 1")

        check = (await checks_by_name(ledger_db))["stock_matches_ledger"]

        assert check.passed is False
        assert check.details == {"differing": 1}

    async def test_unpaired_count_detected(self, ledger_db, sqlite_engine, sqlite_world):
        w = sqlite_world
        await sqlite_engine.record_count(w.operator.id, w.item.id, w.slot_a.id, 4, WHEN)
        await execute(ledger_db, "DELETE FROM movement WHERE kind = 'ADJUST'")

        checks = await checks_by_name(ledger_db)

        assert checks["count_adjust_pairs"].details == {"counts": 1}
        assert checks["stock_matches_ledger"].passed is False

    async def test_reversal_of_count_detected(self, ledger_db, sqlite_engine, sqlite_world):
        w = sqlite_world
        await sqlite_engine.record_count(w.operator.id, w.item.id, w.slot_a.id, 4, WHEN)
        await execute(
            ledger_db,
            """
            INSERT INTO movement (
                id, movement_no, kind, occurred_at, recorded_at, operator_id,
                item_id, from_slot_id, qty, ref_movement_id
            )
            SELECT 'bad-reversal', 'T20240301-BADBADBADBAD', 'REVERSAL', occurred_at,
                   recorded_at, operator_id, item_id, from_slot_id, 0, id
            FROM movement WHERE kind = 'COUNT'
            """,
        )

        checks = await checks_by_name(ledger_db)

        assert checks["reversal_targets"].details == {"rows": 1}
        assert checks["stock_matches_ledger"].passed is False
        assert "error" in checks["stock_matches_ledger"].details


class TestBackup:
    def test_create_and_restore(self, tmp_path: Path):
        db_path = tmp_path / "ledger.db"
        db_path.write_bytes(b"before")

        backup_path = create_backup(db_path)
        db_path.write_bytes(b"after")
        restore_backup(db_path, backup_path)

        assert backup_path.name.startswith("ledger.backup_")
        assert db_path.read_bytes() == b"before"
