"""Request DTOs for the ledger use cases.

Pydantic v2 models for caller input. Quantities and pagination are only
type-checked here; range checks belong to the ledger so that every caller
gets the same VALIDATION_ERROR regardless of entry point.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from slotledger.core.entities.movement import MovementKind


class _MovementRequest(BaseModel):
    """Fields shared by every movement request."""

    actor_operator_id: str = Field(..., description="Operator performing the request")
    operator_id: str | None = Field(
        default=None,
        description="Business operator to record; defaults to the acting operator",
    )
    occurred_at: datetime = Field(..., description="Business time of the movement")
    note: str | None = Field(default=None, max_length=500, description="Free-text note")

    @property
    def recorded_operator_id(self) -> str:
        return self.operator_id or self.actor_operator_id


# --- Movements ---


class InboundRequest(_MovementRequest):
    """Request to receive stock into a slot."""

    item_code: str = Field(..., min_length=1, description="Item code")
    to_slot_code: str = Field(..., min_length=1, description="Target slot code")
    qty: int = Field(..., description="Quantity to receive")


class OutboundRequest(_MovementRequest):
    """Request to issue stock from a slot."""

    item_code: str = Field(..., min_length=1, description="Item code")
    from_slot_code: str = Field(..., min_length=1, description="Source slot code")
    qty: int = Field(..., description="Quantity to issue")


class MoveRequest(_MovementRequest):
    """Request to move stock between two slots."""

    item_code: str = Field(..., min_length=1, description="Item code")
    from_slot_code: str = Field(..., min_length=1, description="Source slot code")
    to_slot_code: str = Field(..., min_length=1, description="Target slot code")
    qty: int = Field(..., description="Quantity to move")


class CountRequest(_MovementRequest):
    """Request to record a physical count."""

    item_code: str = Field(..., min_length=1, description="Item code")
    slot_code: str = Field(..., min_length=1, description="Counted slot code")
    actual_qty: int = Field(..., description="Counted quantity")


class ReversalRequest(_MovementRequest):
    """Request to reverse an earlier movement."""

    movement_no: str = Field(..., min_length=1, description="Movement number to reverse")


# --- Listings ---


class ListMovementsRequest(BaseModel):
    """Filters and pagination for the movement listing."""

    kind: MovementKind | None = None
    keyword: str | None = Field(default=None, max_length=100)
    item_id: str | None = None
    slot_id: str | None = None
    warehouse_id: str | None = None
    rack_id: str | None = None
    operator_id: str | None = None
    start_at: datetime | None = None
    end_at: datetime | None = None
    page_index: int = 1
    page_size: int | None = Field(default=None, description="Defaults to the configured page size")


class ListStockRequest(BaseModel):
    """Filters and pagination for the stock listings."""

    group_by: Literal["slot", "item"] = "slot"
    warehouse_id: str | None = None
    rack_id: str | None = None
    slot_id: str | None = None
    item_id: str | None = None
    operator_id: str | None = None
    page_index: int = 1
    page_size: int | None = Field(default=None, description="Defaults to the configured page size")
