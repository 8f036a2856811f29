"""Read models returned by the listing and stock query layers."""

from datetime import datetime

from pydantic import BaseModel, Field

from slotledger.core.entities.movement import MovementKind


class MovementFilter(BaseModel):
    """Filters accepted by the movement listing."""

    kind: MovementKind | None = None
    keyword: str | None = None
    item_id: str | None = None
    slot_id: str | None = None
    warehouse_id: str | None = None
    rack_id: str | None = None
    operator_id: str | None = None
    start_at: datetime | None = None
    end_at: datetime | None = None


class StockFilter(BaseModel):
    """Filters accepted by the stock listings."""

    warehouse_id: str | None = None
    rack_id: str | None = None
    slot_id: str | None = None
    item_id: str | None = None
    operator_id: str | None = None


class MovementListRow(BaseModel):
    """A movement joined with display names and its reversal linkage."""

    id: str
    movement_no: str
    kind: MovementKind
    occurred_at: datetime
    recorded_at: datetime
    operator_id: str
    operator_name: str
    item_id: str
    item_code: str
    item_name: str
    from_slot_id: str | None = None
    from_slot_code: str | None = None
    to_slot_id: str | None = None
    to_slot_code: str | None = None
    qty: int
    actual_qty: int | None = None
    ref_movement_id: str | None = None
    ref_movement_no: str | None = None
    ref_kind: MovementKind | None = None
    has_reversal: bool = False
    note: str | None = None


class StockRow(BaseModel):
    """A stock level joined with its location and item metadata."""

    warehouse_id: str | None = None
    warehouse_code: str | None = None
    warehouse_name: str | None = None
    rack_id: str
    rack_code: str
    rack_name: str
    slot_id: str
    slot_code: str
    item_id: str
    item_code: str
    item_name: str
    operator_name: str | None = None  # recorder of the latest movement on the pair
    qty: int


class MovementPage(BaseModel):
    items: list[MovementListRow] = Field(default_factory=list)
    total: int = 0


class StockPage(BaseModel):
    items: list[StockRow] = Field(default_factory=list)
    total: int = 0


class StockDiscrepancy(BaseModel):
    """A stock level that disagrees with the replayed ledger."""

    item_id: str
    slot_id: str
    stored_qty: int | None
    ledger_qty: int
