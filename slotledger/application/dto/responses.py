"""Response DTOs for the ledger use cases.

Pydantic v2 models returned to callers.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from slotledger.core.entities.reports import MovementListRow, StockDiscrepancy, StockRow


class MovementRecordedResponse(BaseModel):
    """Outcome of a successful movement or reversal.

    Carries the resolved participants so the caller can hand them to its
    audit log.
    """

    movement_no: str
    kind: str
    operator_id: str
    item_id: str
    from_slot_id: str | None = None
    to_slot_id: str | None = None
    target_movement_no: str | None = None


class MovementListResponse(BaseModel):
    """Paginated movement listing."""

    items: list[MovementListRow] = Field(default_factory=list)
    total: int
    page_index: int
    page_size: int


class StockListResponse(BaseModel):
    """Paginated stock listing."""

    items: list[StockRow] = Field(default_factory=list)
    total: int
    page_index: int
    page_size: int


class StockLevelResponse(BaseModel):
    item_id: str
    slot_id: str
    qty: int
    updated_at: datetime | None = None


class LedgerCheckResponse(BaseModel):
    """Result of replaying the ledger against the stock levels."""

    consistent: bool
    movement_count: int
    stock_level_count: int
    discrepancies: list[StockDiscrepancy] = Field(default_factory=list)
