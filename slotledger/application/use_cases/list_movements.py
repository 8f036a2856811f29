"""List Movements Use Case — filtered, paginated ledger listing."""

from slotledger.application.dto.requests import ListMovementsRequest
from slotledger.application.dto.responses import MovementListResponse
from slotledger.config import get_logger, get_settings
from slotledger.core.entities.reports import MovementFilter
from slotledger.core.interfaces.query_store import IMovementQueryStore
from slotledger.core.services.pagination import normalize_page

logger = get_logger(__name__)


class ListMovementsUseCase:
    """List movements newest first. Never waits for the writer gate."""

    def __init__(self, query_store: IMovementQueryStore | None = None):
        self._query_store = query_store

    async def _get_query_store(self) -> IMovementQueryStore:
        if self._query_store is None:
            from slotledger.infrastructure.storage.sqlite import get_movement_query_store

            self._query_store = await get_movement_query_store()
        return self._query_store

    async def execute(self, request: ListMovementsRequest) -> MovementListResponse:
        page_size = request.page_size
        if page_size is None:
            page_size = get_settings().ledger.default_page_size
        page_index, page_size = normalize_page(request.page_index, page_size)

        filters = MovementFilter(
            kind=request.kind,
            keyword=request.keyword,
            item_id=request.item_id,
            slot_id=request.slot_id,
            warehouse_id=request.warehouse_id,
            rack_id=request.rack_id,
            operator_id=request.operator_id,
            start_at=request.start_at,
            end_at=request.end_at,
        )

        store = await self._get_query_store()
        page = await store.list_movements(filters, page_index, page_size)

        logger.debug("movements_listed", total=page.total, page_index=page_index)

        return MovementListResponse(
            items=page.items,
            total=page.total,
            page_index=page_index,
            page_size=page_size,
        )
