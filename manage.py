#!/usr/bin/env python3
"""
SlotLedger management CLI.

Usage:
    python manage.py init-db         Apply pending schema migrations
    python manage.py status          Show migration status
    python manage.py integrity       Verify schema and ledger integrity
    python manage.py check-ledger    Replay the ledger and compare stock levels
"""

import argparse
import asyncio
import sys
from pathlib import Path

from slotledger.config import configure_logging, get_settings


def _db_path() -> Path:
    return get_settings().storage.db_path


def _apply_db_path(db_path: Path | None) -> None:
    """Point the storage settings (and so the connection pool) at ``db_path``."""
    if db_path is None:
        return
    storage = get_settings().storage
    storage.data_dir = db_path.parent
    storage.db_name = db_path.name


def cmd_init_db(args: argparse.Namespace) -> int:
    from slotledger.infrastructure.storage.sqlite.migrations import initialize_database

    results = asyncio.run(
        initialize_database(_db_path(), create_backup_before=not args.no_backup)
    )
    if not results:
        print("Database is up to date.")
    for result in results:
        status = "SUCCESS" if result.success else "FAILED"
        print(f"[{status}] v{result.version}: {result.name} ({result.execution_time_ms}ms)")
        if result.error:
            print(f"         Error: {result.error}")
    return 0 if all(r.success for r in results) else 1


def cmd_status(args: argparse.Namespace) -> int:
    from slotledger.infrastructure.storage.sqlite.migrations import get_migration_status

    status = asyncio.run(get_migration_status(_db_path()))
    print(f"Database exists: {status['exists']}")
    print(f"Current version: {status.get('current_version') or 'N/A'}")
    print(f"Applied migrations: {status.get('applied_migrations', [])}")
    print(f"Pending migrations: {status.get('pending_migrations', [])}")
    return 0


def cmd_integrity(args: argparse.Namespace) -> int:
    from slotledger.infrastructure.storage.sqlite.migrations import verify_schema_integrity

    db_path = _db_path()
    if not db_path.exists():
        print(f"Error: database not found at {db_path}. Run 'init-db' first.")
        return 1

    checks = asyncio.run(verify_schema_integrity(db_path))
    for check in checks:
        print(f"[{check.status}] {check.name}")
        if not check.passed:
            for key, value in check.details.items():
                print(f"       {key}: {value}")
    return 0 if all(c.passed for c in checks) else 1


def cmd_check_ledger(args: argparse.Namespace) -> int:
    from slotledger.application.services import get_concurrency_gate
    from slotledger.application.use_cases import VerifyLedgerUseCase
    from slotledger.infrastructure.storage.sqlite import close_pool

    db_path = _db_path()
    if not db_path.exists():
        print(f"Error: database not found at {db_path}. Run 'init-db' first.")
        return 1

    async def run():
        try:
            # Hold writers off so the replay and the stock snapshot agree
            async with get_concurrency_gate().migration_window():
                return await VerifyLedgerUseCase().execute()
        finally:
            await close_pool()

    result = asyncio.run(run())
    print(f"Movements replayed: {result.movement_count}")
    print(f"Stock levels checked: {result.stock_level_count}")
    if result.consistent:
        print("[PASS] stock levels match the ledger")
        return 0

    print(f"[FAIL] {len(result.discrepancies)} stock level(s) differ from the ledger")
    for d in result.discrepancies:
        print(f"       item={d.item_id} slot={d.slot_id} stored={d.stored_qty} ledger={d.ledger_qty}")
    return 1


def main() -> None:
    parser = argparse.ArgumentParser(
        description="SlotLedger management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--db-path",
        type=Path,
        help="Database path (default from settings)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # init-db
    p_init = sub.add_parser("init-db", help="Apply pending schema migrations")
    p_init.add_argument("--no-backup", action="store_true", help="Skip backup before migrations")
    p_init.set_defaults(func=cmd_init_db)

    # status
    p_status = sub.add_parser("status", help="Show migration status")
    p_status.set_defaults(func=cmd_status)

    # integrity
    p_integrity = sub.add_parser("integrity", help="Verify schema and ledger integrity")
    p_integrity.set_defaults(func=cmd_integrity)

    # check-ledger
    p_check = sub.add_parser("check-ledger", help="Compare stock levels with the replayed ledger")
    p_check.set_defaults(func=cmd_check_ledger)

    args = parser.parse_args()
    _apply_db_path(args.db_path)
    configure_logging()
    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
