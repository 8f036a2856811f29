"""Count Stock Use Case — physical count with paired adjustment."""

from slotledger.application.dto.requests import CountRequest
from slotledger.application.dto.responses import MovementRecordedResponse
from slotledger.application.use_cases.base import MovementUseCase
from slotledger.config import get_logger
from slotledger.core.entities.movement import MovementKind

logger = get_logger(__name__)


class CountStockUseCase(MovementUseCase):
    """Record a count; the slot is set to the counted quantity."""

    async def execute(self, request: CountRequest) -> MovementRecordedResponse:
        """Execute count use case. Returns the COUNT movement number."""
        logger.info(
            "count_stock_started",
            item_code=request.item_code,
            slot_code=request.slot_code,
            actual_qty=request.actual_qty,
        )

        item = await self._require_active_item(request.item_code)
        slot = await self._require_active_slot(request.slot_code)

        engine = await self._get_engine()
        movement_no = await engine.record_count(
            operator_id=request.recorded_operator_id,
            item_id=item.id,
            slot_id=slot.id,
            actual_qty=request.actual_qty,
            occurred_at=request.occurred_at,
            note=request.note,
        )

        logger.info("count_stock_complete", movement_no=movement_no)

        return MovementRecordedResponse(
            movement_no=movement_no,
            kind=MovementKind.COUNT.value,
            operator_id=request.recorded_operator_id,
            item_id=item.id,
            from_slot_id=slot.id,
        )
