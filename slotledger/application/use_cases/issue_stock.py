"""Issue Stock Use Case — OUT movement with balance check."""

from slotledger.application.dto.requests import OutboundRequest
from slotledger.application.dto.responses import MovementRecordedResponse
from slotledger.application.use_cases.base import MovementUseCase
from slotledger.config import get_logger
from slotledger.core.entities.movement import MovementKind

logger = get_logger(__name__)


class IssueStockUseCase(MovementUseCase):
    """Issue stock (OUT movement); fails with INSUFFICIENT_STOCK on short slots."""

    async def execute(self, request: OutboundRequest) -> MovementRecordedResponse:
        """Execute issue stock use case."""
        logger.info(
            "issue_stock_started",
            item_code=request.item_code,
            from_slot_code=request.from_slot_code,
            qty=request.qty,
        )

        item = await self._require_active_item(request.item_code)
        slot = await self._require_active_slot(request.from_slot_code)

        engine = await self._get_engine()
        movement_no = await engine.record_outbound(
            operator_id=request.recorded_operator_id,
            item_id=item.id,
            from_slot_id=slot.id,
            qty=request.qty,
            occurred_at=request.occurred_at,
            note=request.note,
        )

        logger.info("issue_stock_complete", movement_no=movement_no)

        return MovementRecordedResponse(
            movement_no=movement_no,
            kind=MovementKind.OUTBOUND.value,
            operator_id=request.recorded_operator_id,
            item_id=item.id,
            from_slot_id=slot.id,
        )
