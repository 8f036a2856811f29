"""Ledger movement entities."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict


class MovementKind(str, Enum):
    """Movement categories; the value is the persisted kind code."""

    INBOUND = "IN"
    OUTBOUND = "OUT"
    MOVE = "MOVE"
    COUNT = "COUNT"
    ADJUST = "ADJUST"
    REVERSAL = "REVERSAL"

    @property
    def is_reversible(self) -> bool:
        return self not in (MovementKind.COUNT, MovementKind.REVERSAL)


class Movement(BaseModel):
    """One immutable ledger entry.

    ``qty`` is non-negative for every kind except ADJUST, which carries the
    signed delta between the counted and the prior quantity. COUNT records
    are informational (``qty == 0``) and hold the counted value in
    ``actual_qty``. A REVERSAL stores the magnitude of the change it undoes;
    its direction comes from the referenced movement.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    movement_no: str
    kind: MovementKind
    occurred_at: datetime
    recorded_at: datetime
    operator_id: str
    item_id: str
    from_slot_id: str | None = None
    to_slot_id: str | None = None
    qty: int
    actual_qty: int | None = None
    ref_movement_id: str | None = None  # FK → movement.id
    note: str | None = None
