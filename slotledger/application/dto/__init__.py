"""Data Transfer Objects for the ledger use cases.

Request DTOs: Validate and parse caller input.
Response DTOs: Structure use case results.
"""

from slotledger.application.dto.requests import (
    CountRequest,
    InboundRequest,
    ListMovementsRequest,
    ListStockRequest,
    MoveRequest,
    OutboundRequest,
    ReversalRequest,
)
from slotledger.application.dto.responses import (
    LedgerCheckResponse,
    MovementListResponse,
    MovementRecordedResponse,
    StockLevelResponse,
    StockListResponse,
)

__all__ = [
    # Requests
    "InboundRequest",
    "OutboundRequest",
    "MoveRequest",
    "CountRequest",
    "ReversalRequest",
    "ListMovementsRequest",
    "ListStockRequest",
    # Responses
    "MovementRecordedResponse",
    "MovementListResponse",
    "StockListResponse",
    "StockLevelResponse",
    "LedgerCheckResponse",
]
