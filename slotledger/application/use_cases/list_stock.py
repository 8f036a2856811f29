"""List Stock Use Case — stock levels by slot or by item."""

from slotledger.application.dto.requests import ListStockRequest
from slotledger.application.dto.responses import StockListResponse
from slotledger.config import get_logger, get_settings
from slotledger.core.entities.reports import StockFilter
from slotledger.core.interfaces.query_store import IStockQueryStore
from slotledger.core.services.pagination import normalize_page

logger = get_logger(__name__)


class ListStockUseCase:
    """List stock levels with location and item metadata."""

    def __init__(self, query_store: IStockQueryStore | None = None):
        self._query_store = query_store

    async def _get_query_store(self) -> IStockQueryStore:
        if self._query_store is None:
            from slotledger.infrastructure.storage.sqlite import get_stock_query_store

            self._query_store = await get_stock_query_store()
        return self._query_store

    async def execute(self, request: ListStockRequest) -> StockListResponse:
        page_size = request.page_size
        if page_size is None:
            page_size = get_settings().ledger.default_page_size
        page_index, page_size = normalize_page(request.page_index, page_size)

        filters = StockFilter(
            warehouse_id=request.warehouse_id,
            rack_id=request.rack_id,
            slot_id=request.slot_id,
            item_id=request.item_id,
            operator_id=request.operator_id,
        )

        store = await self._get_query_store()
        if request.group_by == "item":
            page = await store.list_stock_by_item(filters, page_index, page_size)
        else:
            page = await store.list_stock_by_slot(filters, page_index, page_size)

        logger.debug(
            "stock_listed",
            group_by=request.group_by,
            total=page.total,
            page_index=page_index,
        )

        return StockListResponse(
            items=page.items,
            total=page.total,
            page_index=page_index,
            page_size=page_size,
        )
