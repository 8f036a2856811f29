"""Stock level entities."""

from datetime import datetime

from pydantic import BaseModel, Field

StockKey = tuple[str, str]  # (item_id, slot_id)


class StockLevel(BaseModel):
    """Materialised quantity of one item held in one slot."""

    item_id: str
    slot_id: str
    qty: int = Field(default=0, ge=0)
    updated_at: datetime

    @property
    def key(self) -> StockKey:
        return (self.item_id, self.slot_id)
