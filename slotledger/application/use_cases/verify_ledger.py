"""Verify Ledger Use Case — replay movements and compare with stock levels."""

from slotledger.application.dto.responses import LedgerCheckResponse
from slotledger.config import get_logger
from slotledger.core.interfaces.ledger_store import ILedgerReader
from slotledger.core.services.effects import stock_discrepancies

logger = get_logger(__name__)


class VerifyLedgerUseCase:
    """
    Check that every stock level equals the net effect of the ledger.

    Reads committed state only. Run it while writers are quiescent (or
    inside the gate's migration window) for an exact snapshot; a writer
    committing between the two reads can show a transient difference.
    """

    def __init__(self, reader: ILedgerReader | None = None):
        self._reader = reader

    async def _get_reader(self) -> ILedgerReader:
        if self._reader is None:
            from slotledger.infrastructure.storage.sqlite import get_ledger_reader

            self._reader = await get_ledger_reader()
        return self._reader

    async def execute(self) -> LedgerCheckResponse:
        reader = await self._get_reader()
        movements = await reader.all_movements()
        levels = await reader.all_stock_levels()

        discrepancies = stock_discrepancies(movements, levels)

        if discrepancies:
            logger.warning("ledger_inconsistent", discrepancies=len(discrepancies))
        else:
            logger.info(
                "ledger_consistent",
                movements=len(movements),
                stock_levels=len(levels),
            )

        return LedgerCheckResponse(
            consistent=not discrepancies,
            movement_count=len(movements),
            stock_level_count=len(levels),
            discrepancies=discrepancies,
        )
