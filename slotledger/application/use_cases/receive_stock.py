"""Receive Stock Use Case — IN movement into a slot."""

from slotledger.application.dto.requests import InboundRequest
from slotledger.application.dto.responses import MovementRecordedResponse
from slotledger.application.use_cases.base import MovementUseCase
from slotledger.config import get_logger
from slotledger.core.entities.movement import MovementKind

logger = get_logger(__name__)


class ReceiveStockUseCase(MovementUseCase):
    """Receive stock (IN movement) into an active slot."""

    async def execute(self, request: InboundRequest) -> MovementRecordedResponse:
        """Execute receive stock use case."""
        logger.info(
            "receive_stock_started",
            item_code=request.item_code,
            to_slot_code=request.to_slot_code,
            qty=request.qty,
        )

        item = await self._require_active_item(request.item_code)
        slot = await self._require_active_slot(request.to_slot_code)

        engine = await self._get_engine()
        movement_no = await engine.record_inbound(
            operator_id=request.recorded_operator_id,
            item_id=item.id,
            to_slot_id=slot.id,
            qty=request.qty,
            occurred_at=request.occurred_at,
            note=request.note,
        )

        logger.info("receive_stock_complete", movement_no=movement_no)

        return MovementRecordedResponse(
            movement_no=movement_no,
            kind=MovementKind.INBOUND.value,
            operator_id=request.recorded_operator_id,
            item_id=item.id,
            to_slot_id=slot.id,
        )
