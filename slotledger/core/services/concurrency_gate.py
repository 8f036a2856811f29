"""
Process-wide single-writer gate for ledger mutations.

At most one mutating ledger operation holds the gate at a time. A separate
migration flag makes writers fail fast with a conflict while storage is
being relocated; reads never touch the gate.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from slotledger.config import get_logger
from slotledger.core.exceptions import ConflictError, MigrationInProgressError

logger = get_logger(__name__)


class ConcurrencyGate:
    """Serialises mutating ledger operations."""

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._migrating = False

    @property
    def is_migrating(self) -> bool:
        return self._migrating

    @property
    def is_held(self) -> bool:
        return self._lock.locked()

    def ensure_not_migrating(self, operation: str) -> None:
        if self._migrating:
            raise MigrationInProgressError(operation)

    @asynccontextmanager
    async def writer(self, operation: str = "write") -> AsyncIterator[None]:
        """
        Hold the gate for one mutating operation.

        The migration flag is checked before waiting and again once the gate
        is acquired, since a migration may have started in between. The gate
        is released on every exit path.
        """
        self.ensure_not_migrating(operation)
        async with self._lock:
            self.ensure_not_migrating(operation)
            yield

    @asynccontextmanager
    async def migration_window(self) -> AsyncIterator[None]:
        """
        Block all writers while storage is relocated.

        Raises the migration flag first so new writers fail fast, then waits
        for any in-flight writer to finish. The flag is always cleared on exit.
        """
        if self._migrating:
            raise ConflictError("Storage migration already in progress")
        self._migrating = True
        logger.info("gate_migration_started")
        try:
            async with self._lock:
                yield
        finally:
            self._migrating = False
            logger.info("gate_migration_finished")
