"""Abstract interfaces for the transactional ledger and stock stores."""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass
from datetime import datetime

from slotledger.core.entities.movement import Movement
from slotledger.core.entities.stock import StockLevel


class IStockStore(ABC):
    """Per-(item, slot) quantities, bound to one open transaction."""

    @abstractmethod
    async def get(self, item_id: str, slot_id: str) -> StockLevel | None:
        """Get the stock level for an item in a slot, or None if never touched."""
        pass

    @abstractmethod
    async def set(
        self, item_id: str, slot_id: str, qty: int, timestamp: datetime
    ) -> StockLevel:
        """Upsert the stock level.

        Implementations must reject a negative ``qty`` with
        NegativeStockError, independently of any caller-side check.
        """
        pass


class ILedgerStore(ABC):
    """Append-only movement ledger, bound to one open transaction."""

    @abstractmethod
    async def append(self, movement: Movement) -> Movement:
        """Append a movement. Committed movements are never updated or deleted."""
        pass

    @abstractmethod
    async def get_by_no(self, movement_no: str) -> Movement | None:
        """Point lookup by human-facing movement number."""
        pass

    @abstractmethod
    async def has_reversal(self, movement_id: str) -> bool:
        """Whether a REVERSAL referencing this movement already exists."""
        pass


@dataclass
class LedgerTransaction:
    """Store handles sharing a single storage transaction."""

    stock: IStockStore
    ledger: ILedgerStore


class IUnitOfWork(ABC):
    """Opens storage transactions spanning both the ledger and stock stores."""

    @abstractmethod
    def begin(self) -> AbstractAsyncContextManager[LedgerTransaction]:
        """Start a transaction.

        The context commits when the block exits normally and rolls back when
        it raises (including cancellation); no partial state is ever visible.
        """
        pass


class ILedgerReader(ABC):
    """Committed-state reads that never wait for a writer."""

    @abstractmethod
    async def get_movement(self, movement_no: str) -> Movement | None:
        pass

    @abstractmethod
    async def get_stock_level(self, item_id: str, slot_id: str) -> StockLevel | None:
        pass

    @abstractmethod
    async def all_movements(self) -> list[Movement]:
        """All movements in insertion order."""
        pass

    @abstractmethod
    async def all_stock_levels(self) -> list[StockLevel]:
        pass
