"""In-memory committed-state reads."""

from slotledger.core.entities.movement import Movement
from slotledger.core.entities.stock import StockLevel
from slotledger.core.interfaces.ledger_store import ILedgerReader
from slotledger.infrastructure.storage.memory.unit_of_work import InMemoryLedgerDatabase


class InMemoryLedgerReader(ILedgerReader):
    def __init__(self, db: InMemoryLedgerDatabase):
        self._db = db

    async def get_movement(self, movement_no: str) -> Movement | None:
        return self._db.by_no.get(movement_no)

    async def get_stock_level(self, item_id: str, slot_id: str) -> StockLevel | None:
        return self._db.stock.get((item_id, slot_id))

    async def all_movements(self) -> list[Movement]:
        return list(self._db.movements)

    async def all_stock_levels(self) -> list[StockLevel]:
        return sorted(self._db.stock.values(), key=lambda level: level.key)
