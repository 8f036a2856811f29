"""Core domain entities."""

from slotledger.core.entities.movement import Movement, MovementKind
from slotledger.core.entities.reference import (
    Item,
    Operator,
    OperatorRole,
    Rack,
    ResourceStatus,
    Slot,
    Warehouse,
    format_slot_code,
)
from slotledger.core.entities.reports import (
    MovementFilter,
    MovementListRow,
    MovementPage,
    StockDiscrepancy,
    StockFilter,
    StockPage,
    StockRow,
)
from slotledger.core.entities.stock import StockKey, StockLevel

__all__ = [
    # Ledger entities
    "Movement",
    "MovementKind",
    "StockLevel",
    "StockKey",
    # Reference entities
    "Operator",
    "OperatorRole",
    "Warehouse",
    "Rack",
    "Slot",
    "Item",
    "ResourceStatus",
    "format_slot_code",
    # Read models
    "MovementFilter",
    "MovementListRow",
    "MovementPage",
    "StockFilter",
    "StockRow",
    "StockPage",
    "StockDiscrepancy",
]
