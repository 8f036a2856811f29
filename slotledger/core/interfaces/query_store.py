"""Abstract interfaces for the read-only listing layers."""

from abc import ABC, abstractmethod

from slotledger.core.entities.reports import (
    MovementFilter,
    MovementPage,
    StockFilter,
    StockPage,
)


class IMovementQueryStore(ABC):
    """Movement listing joined with display names."""

    @abstractmethod
    async def list_movements(
        self, filters: MovementFilter, page_index: int, page_size: int
    ) -> MovementPage:
        """List movements, newest recorded first."""
        pass


class IStockQueryStore(ABC):
    """Stock listing joined with location and item metadata."""

    @abstractmethod
    async def list_stock_by_slot(
        self, filters: StockFilter, page_index: int, page_size: int
    ) -> StockPage:
        pass

    @abstractmethod
    async def list_stock_by_item(
        self, filters: StockFilter, page_index: int, page_size: int
    ) -> StockPage:
        pass
