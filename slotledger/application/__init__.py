"""
Application layer - Use cases, DTOs, and service factories.

This layer orchestrates the ledger by:
1. Defining request/response DTOs for caller contracts
2. Implementing use cases that resolve codes and invoke the engine
3. Providing factory functions for dependency injection
"""

from slotledger.application.dto import (
    CountRequest,
    InboundRequest,
    LedgerCheckResponse,
    ListMovementsRequest,
    ListStockRequest,
    MovementListResponse,
    MovementRecordedResponse,
    MoveRequest,
    OutboundRequest,
    ReversalRequest,
    StockLevelResponse,
    StockListResponse,
)
from slotledger.application.services import (
    get_concurrency_gate,
    get_ledger_engine,
    reset_services,
)
from slotledger.application.use_cases import (
    CountStockUseCase,
    IssueStockUseCase,
    ListMovementsUseCase,
    ListStockUseCase,
    MoveStockUseCase,
    ReadLedgerUseCase,
    ReceiveStockUseCase,
    ReverseMovementUseCase,
    VerifyLedgerUseCase,
)

__all__ = [
    # Request DTOs
    "InboundRequest",
    "OutboundRequest",
    "MoveRequest",
    "CountRequest",
    "ReversalRequest",
    "ListMovementsRequest",
    "ListStockRequest",
    # Response DTOs
    "MovementRecordedResponse",
    "MovementListResponse",
    "StockListResponse",
    "StockLevelResponse",
    "LedgerCheckResponse",
    # Use Cases
    "ReceiveStockUseCase",
    "IssueStockUseCase",
    "MoveStockUseCase",
    "CountStockUseCase",
    "ReverseMovementUseCase",
    "ListMovementsUseCase",
    "ListStockUseCase",
    "ReadLedgerUseCase",
    "VerifyLedgerUseCase",
    # Service factories
    "get_concurrency_gate",
    "get_ledger_engine",
    "reset_services",
]
