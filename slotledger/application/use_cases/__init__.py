"""Application use cases."""

from slotledger.application.use_cases.count_stock import CountStockUseCase
from slotledger.application.use_cases.issue_stock import IssueStockUseCase
from slotledger.application.use_cases.list_movements import ListMovementsUseCase
from slotledger.application.use_cases.list_stock import ListStockUseCase
from slotledger.application.use_cases.move_stock import MoveStockUseCase
from slotledger.application.use_cases.read_ledger import ReadLedgerUseCase
from slotledger.application.use_cases.receive_stock import ReceiveStockUseCase
from slotledger.application.use_cases.reverse_movement import ReverseMovementUseCase
from slotledger.application.use_cases.verify_ledger import VerifyLedgerUseCase

__all__ = [
    "ReceiveStockUseCase",
    "IssueStockUseCase",
    "MoveStockUseCase",
    "CountStockUseCase",
    "ReverseMovementUseCase",
    "ListMovementsUseCase",
    "ListStockUseCase",
    "ReadLedgerUseCase",
    "VerifyLedgerUseCase",
]
