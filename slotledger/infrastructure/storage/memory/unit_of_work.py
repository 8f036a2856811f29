"""
In-memory ledger storage with the same transactional contract as SQLite.

Writes made through a transaction are staged and only merged into the
committed state when the block exits cleanly. Any exception, including
cancellation, discards the staged changes.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime

from slotledger.core.entities.movement import Movement, MovementKind
from slotledger.core.entities.stock import StockKey, StockLevel
from slotledger.core.exceptions import (
    DatabaseError,
    MovementAlreadyReversedError,
    NegativeStockError,
)
from slotledger.core.interfaces.ledger_store import (
    ILedgerStore,
    IStockStore,
    IUnitOfWork,
    LedgerTransaction,
)


class InMemoryLedgerDatabase:
    """Committed ledger and stock state shared by transactions and readers."""

    def __init__(self) -> None:
        self.movements: list[Movement] = []
        self.stock: dict[StockKey, StockLevel] = {}
        self.by_no: dict[str, Movement] = {}
        self.by_id: dict[str, Movement] = {}
        self.reversed_ids: set[str] = set()
        self.write_lock = asyncio.Lock()
        self.commit_error: Exception | None = None
        self.commits = 0

    def configure(self, commit_error: Exception | None = None) -> None:
        """Make the next commits fail with ``commit_error`` (for failure tests)."""
        self.commit_error = commit_error

    def reset(self) -> None:
        self.movements.clear()
        self.stock.clear()
        self.by_no.clear()
        self.by_id.clear()
        self.reversed_ids.clear()
        self.commit_error = None
        self.commits = 0

    def merge(self, staged: "_StagedChanges") -> None:
        for movement in staged.movements:
            self.movements.append(movement)
            self.by_no[movement.movement_no] = movement
            self.by_id[movement.id] = movement
            if movement.kind == MovementKind.REVERSAL and movement.ref_movement_id:
                self.reversed_ids.add(movement.ref_movement_id)
        self.stock.update(staged.stock)
        self.commits += 1


@dataclass
class _StagedChanges:
    movements: list[Movement] = field(default_factory=list)
    stock: dict[StockKey, StockLevel] = field(default_factory=dict)

    def find_by_no(self, movement_no: str) -> Movement | None:
        for movement in self.movements:
            if movement.movement_no == movement_no:
                return movement
        return None


class InMemoryStockStore(IStockStore):
    def __init__(self, db: InMemoryLedgerDatabase, staged: _StagedChanges):
        self._db = db
        self._staged = staged

    async def get(self, item_id: str, slot_id: str) -> StockLevel | None:
        key = (item_id, slot_id)
        if key in self._staged.stock:
            return self._staged.stock[key]
        return self._db.stock.get(key)

    async def set(
        self, item_id: str, slot_id: str, qty: int, timestamp: datetime
    ) -> StockLevel:
        if qty < 0:
            raise NegativeStockError(item_id, slot_id, qty)
        level = StockLevel(item_id=item_id, slot_id=slot_id, qty=qty, updated_at=timestamp)
        self._staged.stock[level.key] = level
        return level


def _check_row(movement: Movement) -> None:
    # Mirrors the CHECK constraints on the movement table
    if movement.qty < 0 and movement.kind != MovementKind.ADJUST:
        raise DatabaseError(
            "append_movement",
            f"CHECK constraint failed: negative qty {movement.qty} on {movement.kind.value}",
        )
    if movement.actual_qty is not None and movement.actual_qty < 0:
        raise DatabaseError(
            "append_movement",
            f"CHECK constraint failed: negative actual_qty {movement.actual_qty}",
        )


class InMemoryLedgerStore(ILedgerStore):
    def __init__(self, db: InMemoryLedgerDatabase, staged: _StagedChanges):
        self._db = db
        self._staged = staged

    async def append(self, movement: Movement) -> Movement:
        _check_row(movement)
        if (
            movement.movement_no in self._db.by_no
            or self._staged.find_by_no(movement.movement_no) is not None
        ):
            raise DatabaseError("append_movement", f"duplicate movement_no {movement.movement_no}")
        if movement.kind == MovementKind.REVERSAL and await self.has_reversal(
            movement.ref_movement_id or ""
        ):
            target = self._db.by_id.get(movement.ref_movement_id or "")
            raise MovementAlreadyReversedError(
                target.movement_no if target else movement.ref_movement_id or ""
            )
        self._staged.movements.append(movement)
        return movement

    async def get_by_no(self, movement_no: str) -> Movement | None:
        return self._staged.find_by_no(movement_no) or self._db.by_no.get(movement_no)

    async def has_reversal(self, movement_id: str) -> bool:
        if movement_id in self._db.reversed_ids:
            return True
        return any(
            m.kind == MovementKind.REVERSAL and m.ref_movement_id == movement_id
            for m in self._staged.movements
        )


class InMemoryUnitOfWork(IUnitOfWork):
    """Serialised transactions over an InMemoryLedgerDatabase."""

    def __init__(self, db: InMemoryLedgerDatabase | None = None):
        self.db = db or InMemoryLedgerDatabase()

    @asynccontextmanager
    async def begin(self) -> AsyncIterator[LedgerTransaction]:
        async with self.db.write_lock:
            staged = _StagedChanges()
            yield LedgerTransaction(
                stock=InMemoryStockStore(self.db, staged),
                ledger=InMemoryLedgerStore(self.db, staged),
            )
            if self.db.commit_error is not None:
                raise self.db.commit_error
            self.db.merge(staged)
