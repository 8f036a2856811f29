"""Reverse Movement Use Case — compensating REVERSAL of an earlier movement."""

from slotledger.application.dto.requests import ReversalRequest
from slotledger.application.dto.responses import MovementRecordedResponse
from slotledger.config import get_logger
from slotledger.core.services.ledger_engine import LedgerEngine

logger = get_logger(__name__)


class ReverseMovementUseCase:
    """Reverse a movement by number.

    The target is identified by its movement number only; item and slot
    status are not rechecked since the reversal restores an earlier state.
    """

    def __init__(self, engine: LedgerEngine | None = None):
        self._engine = engine

    async def _get_engine(self) -> LedgerEngine:
        if self._engine is None:
            from slotledger.application.services import get_ledger_engine

            self._engine = await get_ledger_engine()
        return self._engine

    async def execute(self, request: ReversalRequest) -> MovementRecordedResponse:
        """Execute reversal use case."""
        movement_no = request.movement_no.strip()
        logger.info("reverse_movement_started", target_no=movement_no)

        engine = await self._get_engine()
        reversal, target = await engine.reverse_movement(
            operator_id=request.recorded_operator_id,
            movement_no=movement_no,
            occurred_at=request.occurred_at,
            note=request.note,
        )

        logger.info(
            "reverse_movement_complete",
            movement_no=reversal.movement_no,
            target_no=target.movement_no,
        )

        return MovementRecordedResponse(
            movement_no=reversal.movement_no,
            kind=reversal.kind.value,
            operator_id=reversal.operator_id,
            item_id=reversal.item_id,
            from_slot_id=reversal.from_slot_id,
            to_slot_id=reversal.to_slot_id,
            target_movement_no=target.movement_no,
        )
