"""Database migrations module."""

from slotledger.infrastructure.storage.sqlite.migrations.migrator import (
    LEDGER_TABLES,
    IntegrityCheck,
    Migration,
    MigrationResult,
    create_backup,
    discover_migrations,
    get_applied_migrations,
    get_migration_status,
    initialize_database,
    restore_backup,
    verify_schema_integrity,
)

__all__ = [
    "LEDGER_TABLES",
    "IntegrityCheck",
    "Migration",
    "MigrationResult",
    "create_backup",
    "discover_migrations",
    "get_applied_migrations",
    "get_migration_status",
    "initialize_database",
    "restore_backup",
    "verify_schema_integrity",
]
