"""
Schema migrations and integrity checks for the ledger database.

Migrations are ``vNNN_name.sql`` scripts next to this module. They are
applied in version order and recorded with a checksum in
``schema_migrations``; a recorded script whose content has since changed
stops the run. The database file is copied aside before migrating and put
back if a migration fails.
"""

import hashlib
import re
import shutil
import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

import aiosqlite

from slotledger.config import get_logger, get_settings
from slotledger.core.exceptions import LedgerError
from slotledger.core.services.effects import stock_discrepancies
from slotledger.infrastructure.storage.sqlite.rows import (
    MOVEMENT_COLUMNS,
    row_to_movement,
    row_to_stock_level,
)

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent

_SCRIPT_NAME = re.compile(r"v(\d+)_(\w+)\.sql")

LEDGER_TABLES = (
    "schema_migrations",
    "operator",
    "warehouse",
    "rack",
    "slot",
    "item",
    "movement",
    "stock",
)


@dataclass(frozen=True)
class Migration:
    """One versioned schema script."""

    version: str
    name: str
    path: Path
    checksum: str

    @classmethod
    def from_path(cls, path: Path) -> "Migration":
        match = _SCRIPT_NAME.fullmatch(path.name)
        if match is None:
            raise ValueError(f"Invalid migration filename: {path.name}")
        digest = hashlib.sha256(path.read_bytes()).hexdigest()
        return cls(
            version=match.group(1),
            name=match.group(2),
            path=path,
            checksum=digest[:16],
        )


@dataclass
class MigrationResult:
    version: str
    name: str
    success: bool
    execution_time_ms: int
    error: str | None = None


@dataclass
class IntegrityCheck:
    """Outcome of one integrity check; ``details`` explains a failure."""

    name: str
    passed: bool
    details: dict = field(default_factory=dict)

    @property
    def status(self) -> str:
        return "PASS" if self.passed else "FAIL"


def discover_migrations(directory: Path = MIGRATIONS_DIR) -> list[Migration]:
    """Migration scripts in ``directory``, ordered by version."""
    migrations = []
    for path in directory.glob("v*.sql"):
        try:
            migrations.append(Migration.from_path(path))
        except ValueError as e:
            logger.warning("skipping_invalid_migration", path=str(path), error=str(e))
    return sorted(migrations, key=lambda m: int(m.version))


async def get_applied_migrations(conn: aiosqlite.Connection) -> dict[str, str]:
    """Applied versions mapped to their recorded checksums."""
    try:
        cursor = await conn.execute("SELECT version, checksum FROM schema_migrations")
    except aiosqlite.OperationalError:
        # Fresh database
        return {}
    return {version: checksum for version, checksum in await cursor.fetchall()}


async def _apply(conn: aiosqlite.Connection, migration: Migration) -> MigrationResult:
    started = time.perf_counter()

    def elapsed_ms() -> int:
        return int((time.perf_counter() - started) * 1000)

    try:
        await conn.executescript(migration.path.read_text(encoding="utf-8"))
        await conn.execute(
            "INSERT INTO schema_migrations (version, name, checksum, execution_time_ms) "
            "VALUES (?, ?, ?, ?)",
            (migration.version, migration.name, migration.checksum, elapsed_ms()),
        )
        await conn.commit()
    except aiosqlite.Error as e:
        await conn.rollback()
        logger.error("migration_failed", version=migration.version, error=str(e))
        return MigrationResult(
            migration.version, migration.name, False, elapsed_ms(), error=str(e)
        )

    logger.info("migration_applied", version=migration.version, name=migration.name)
    return MigrationResult(migration.version, migration.name, True, elapsed_ms())


def create_backup(db_path: Path) -> Path:
    backup_path = db_path.with_name(
        f"{db_path.stem}.backup_{datetime.now():%Y%m%d_%H%M%S}{db_path.suffix}"
    )
    shutil.copy2(db_path, backup_path)
    logger.info("database_backup_created", backup_path=str(backup_path))
    return backup_path


def restore_backup(db_path: Path, backup_path: Path) -> None:
    shutil.copy2(backup_path, db_path)
    logger.info("database_restored_from_backup", backup_path=str(backup_path))


async def initialize_database(
    db_path: Path | None = None,
    create_backup_before: bool = True,
) -> list[MigrationResult]:
    """
    Apply every pending migration.

    Stops at the first failed migration or at an applied migration whose
    script changed. When a backup was taken it is removed after a clean run
    and restored after a failed one.

    Returns:
        Results of the migrations attempted in this run
    """
    db_path = db_path or get_settings().storage.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)
    logger.info("initializing_database", db_path=str(db_path))

    backup_path = create_backup(db_path) if create_backup_before and db_path.exists() else None
    results: list[MigrationResult] = []

    try:
        async with aiosqlite.connect(db_path) as conn:
            await conn.execute("PRAGMA journal_mode=WAL")
            await conn.execute("PRAGMA foreign_keys=ON")
            applied = await get_applied_migrations(conn)

            for migration in discover_migrations():
                recorded = applied.get(migration.version)
                if recorded is not None:
                    if recorded != migration.checksum:
                        logger.error("migration_checksum_changed", version=migration.version)
                        break
                    continue
                result = await _apply(conn, migration)
                results.append(result)
                if not result.success:
                    break
    except (aiosqlite.Error, OSError) as e:
        logger.error("database_initialization_failed", error=str(e))
        if backup_path is not None:
            restore_backup(db_path, backup_path)
        raise

    if backup_path is not None:
        if all(r.success for r in results):
            backup_path.unlink()
        else:
            restore_backup(db_path, backup_path)
    return results


async def get_migration_status(db_path: Path | None = None) -> dict:
    db_path = db_path or get_settings().storage.db_path
    discovered = discover_migrations()
    if not db_path.exists():
        return {
            "exists": False,
            "current_version": None,
            "applied_migrations": [],
            "pending_migrations": [],
        }

    async with aiosqlite.connect(db_path) as conn:
        applied = sorted(await get_applied_migrations(conn), key=int)
    return {
        "exists": True,
        "current_version": applied[-1] if applied else None,
        "applied_migrations": applied,
        "pending_migrations": [m.version for m in discovered if m.version not in applied],
    }


async def _count(conn: aiosqlite.Connection, sql: str) -> int:
    cursor = await conn.execute(sql)
    return (await cursor.fetchone())[0]


async def verify_schema_integrity(db_path: Path | None = None) -> list[IntegrityCheck]:
    """
    Check the database file, the schema and the ledger's stored invariants.

    Ledger checks run only once the schema checks pass:

    - ``negative_quantities``: no negative stock, and no negative movement
      quantity except on ADJUST
    - ``reversal_targets``: every REVERSAL references an existing movement
      that may be reversed
    - ``count_adjust_pairs``: every COUNT has exactly one ADJUST
    - ``stock_matches_ledger``: stock levels equal the replayed movements
    """
    db_path = db_path or get_settings().storage.db_path
    checks: list[IntegrityCheck] = []

    async with aiosqlite.connect(db_path) as conn:
        conn.row_factory = aiosqlite.Row

        cursor = await conn.execute("PRAGMA integrity_check")
        result = (await cursor.fetchone())[0]
        checks.append(IntegrityCheck("integrity", result == "ok", {"result": result}))

        cursor = await conn.execute("PRAGMA foreign_key_check")
        violations = len(await cursor.fetchall())
        checks.append(IntegrityCheck("foreign_keys", violations == 0, {"violations": violations}))

        cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
        tables = {row[0] for row in await cursor.fetchall()}
        missing = [t for t in LEDGER_TABLES if t not in tables]
        checks.append(IntegrityCheck("required_tables", not missing, {"missing": missing}))

        cursor = await conn.execute(
            "SELECT 1 FROM sqlite_master WHERE type = 'index' AND name = 'uq_reversal_ref'"
        )
        checks.append(IntegrityCheck("reversal_uniqueness", await cursor.fetchone() is not None))

        if missing:
            return checks

        negative = await _count(
            conn,
            "SELECT (SELECT COUNT(*) FROM movement WHERE qty < 0 AND kind != 'ADJUST')"
            " + (SELECT COUNT(*) FROM stock WHERE qty < 0)",
        )
        checks.append(IntegrityCheck("negative_quantities", negative == 0, {"rows": negative}))

        bad_reversals = await _count(
            conn,
            """
            SELECT COUNT(*) FROM movement r
            LEFT JOIN movement t ON t.id = r.ref_movement_id
            WHERE r.kind = 'REVERSAL'
              AND (t.id IS NULL OR t.kind IN ('COUNT', 'REVERSAL'))
            """,
        )
        checks.append(
            IntegrityCheck("reversal_targets", bad_reversals == 0, {"rows": bad_reversals})
        )

        unpaired = await _count(
            conn,
            """
            SELECT COUNT(*) FROM movement c
            WHERE c.kind = 'COUNT'
              AND (SELECT COUNT(*) FROM movement a
                   WHERE a.kind = 'ADJUST' AND a.ref_movement_id = c.id) != 1
            """,
        )
        checks.append(IntegrityCheck("count_adjust_pairs", unpaired == 0, {"counts": unpaired}))

        cursor = await conn.execute(f"SELECT {MOVEMENT_COLUMNS} FROM movement ORDER BY rowid")
        movements = [row_to_movement(row) for row in await cursor.fetchall()]
        cursor = await conn.execute("SELECT item_id, slot_id, qty, updated_at FROM stock")
        levels = [row_to_stock_level(row) for row in await cursor.fetchall()]
        try:
            differing = len(stock_discrepancies(movements, levels))
        except LedgerError as e:
            checks.append(IntegrityCheck("stock_matches_ledger", False, {"error": e.message}))
        else:
            checks.append(
                IntegrityCheck("stock_matches_ledger", differing == 0, {"differing": differing})
            )

    return checks
