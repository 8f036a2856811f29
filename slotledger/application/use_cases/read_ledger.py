"""Point reads over the committed ledger."""

from slotledger.application.dto.responses import StockLevelResponse
from slotledger.core.entities.movement import Movement
from slotledger.core.exceptions import MovementNotFoundError, ValidationError
from slotledger.core.interfaces.ledger_store import ILedgerReader


class ReadLedgerUseCase:
    """Look up a single movement or a single stock level."""

    def __init__(self, reader: ILedgerReader | None = None):
        self._reader = reader

    async def _get_reader(self) -> ILedgerReader:
        if self._reader is None:
            from slotledger.infrastructure.storage.sqlite import get_ledger_reader

            self._reader = await get_ledger_reader()
        return self._reader

    async def get_movement(self, movement_no: str) -> Movement:
        if not movement_no or not movement_no.strip():
            raise ValidationError(field="movement_no", message="Movement number is required")
        reader = await self._get_reader()
        movement = await reader.get_movement(movement_no.strip())
        if movement is None:
            raise MovementNotFoundError(movement_no)
        return movement

    async def get_stock_level(self, item_id: str, slot_id: str) -> StockLevelResponse:
        """Current quantity; a pair never touched reads as zero."""
        reader = await self._get_reader()
        level = await reader.get_stock_level(item_id, slot_id)
        if level is None:
            return StockLevelResponse(item_id=item_id, slot_id=slot_id, qty=0)
        return StockLevelResponse(
            item_id=level.item_id,
            slot_id=level.slot_id,
            qty=level.qty,
            updated_at=level.updated_at,
        )
