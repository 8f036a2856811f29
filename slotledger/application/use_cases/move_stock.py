"""Move Stock Use Case — MOVE between two slots."""

from slotledger.application.dto.requests import MoveRequest
from slotledger.application.dto.responses import MovementRecordedResponse
from slotledger.application.use_cases.base import MovementUseCase
from slotledger.config import get_logger
from slotledger.core.entities.movement import MovementKind
from slotledger.core.exceptions import ValidationError

logger = get_logger(__name__)


class MoveStockUseCase(MovementUseCase):
    """Move stock between two different active slots."""

    async def execute(self, request: MoveRequest) -> MovementRecordedResponse:
        """Execute move stock use case."""
        logger.info(
            "move_stock_started",
            item_code=request.item_code,
            from_slot_code=request.from_slot_code,
            to_slot_code=request.to_slot_code,
            qty=request.qty,
        )

        if request.from_slot_code.strip() == request.to_slot_code.strip():
            raise ValidationError(
                field="to_slot_code",
                message="Source and target slot must differ",
                value=request.to_slot_code,
            )

        item = await self._require_active_item(request.item_code)
        from_slot = await self._require_active_slot(request.from_slot_code)
        to_slot = await self._require_active_slot(request.to_slot_code)

        engine = await self._get_engine()
        movement_no = await engine.record_move(
            operator_id=request.recorded_operator_id,
            item_id=item.id,
            from_slot_id=from_slot.id,
            to_slot_id=to_slot.id,
            qty=request.qty,
            occurred_at=request.occurred_at,
            note=request.note,
        )

        logger.info("move_stock_complete", movement_no=movement_no)

        return MovementRecordedResponse(
            movement_no=movement_no,
            kind=MovementKind.MOVE.value,
            operator_id=request.recorded_operator_id,
            item_id=item.id,
            from_slot_id=from_slot.id,
            to_slot_id=to_slot.id,
        )
