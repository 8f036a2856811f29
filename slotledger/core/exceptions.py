"""
Domain exceptions for the ledger.

Every error carries a stable ``code`` (the error kind callers branch on), a
human-readable message and optional details.
"""

from typing import Any


class LedgerError(Exception):
    """Base exception for all ledger errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for callers that serialise errors."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Validation Exceptions
class ValidationError(LedgerError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


class NegativeStockError(ValidationError):
    """A stock level write would store a negative quantity."""

    def __init__(self, item_id: str, slot_id: str, qty: int):
        super().__init__(
            field="qty",
            message=f"Stock for item {item_id} in slot {slot_id} cannot be negative",
            value=qty,
        )
        self.details.update({"item_id": item_id, "slot_id": slot_id})


class MovementNotReversibleError(ValidationError):
    """The referenced movement kind cannot be reversed."""

    def __init__(self, movement_no: str, kind: str):
        super().__init__(
            field="movement_no",
            message=f"Movement {movement_no} of kind {kind} cannot be reversed",
            value=movement_no,
        )
        self.details.update({"movement_no": movement_no, "kind": kind})


class InvalidPageError(ValidationError):
    """Pagination parameters are out of range."""

    def __init__(self, page_index: int, page_size: int):
        super().__init__(
            field="page",
            message="page_index and page_size must both be >= 1",
            value=f"{page_index}/{page_size}",
        )
        self.details.update({"page_index": page_index, "page_size": page_size})


# Not Found Exceptions
class NotFoundError(LedgerError):
    """A referenced resource does not exist."""

    def __init__(self, resource: str, key: str):
        super().__init__(
            f"{resource.capitalize()} not found: {key}",
            code="NOT_FOUND",
            details={"resource": resource, "key": key},
        )


class OperatorNotFoundError(NotFoundError):
    def __init__(self, operator_id: str):
        super().__init__("operator", operator_id)


class ItemNotFoundError(NotFoundError):
    def __init__(self, key: str):
        super().__init__("item", key)


class SlotNotFoundError(NotFoundError):
    def __init__(self, key: str):
        super().__init__("slot", key)


class MovementNotFoundError(NotFoundError):
    def __init__(self, movement_no: str):
        super().__init__("movement", movement_no)


# Inactive Resource Exceptions
class InactiveResourceError(LedgerError):
    """A referenced resource exists but is not active."""

    def __init__(self, resource: str, key: str):
        super().__init__(
            f"{resource.capitalize()} is inactive: {key}",
            code="INACTIVE_RESOURCE",
            details={"resource": resource, "key": key},
        )


class OperatorInactiveError(InactiveResourceError):
    def __init__(self, operator_id: str):
        super().__init__("operator", operator_id)


class ItemInactiveError(InactiveResourceError):
    def __init__(self, key: str):
        super().__init__("item", key)


class SlotInactiveError(InactiveResourceError):
    def __init__(self, key: str):
        super().__init__("slot", key)


# Stock Exceptions
class InsufficientStockError(LedgerError):
    """A movement would drive a stock level below zero."""

    def __init__(self, item_id: str, slot_id: str, requested: int, available: int):
        super().__init__(
            f"Insufficient stock for item {item_id} in slot {slot_id}: "
            f"requested {requested}, available {available}",
            code="INSUFFICIENT_STOCK",
            details={
                "item_id": item_id,
                "slot_id": slot_id,
                "requested": requested,
                "available": available,
            },
        )


# Conflict Exceptions
class ConflictError(LedgerError):
    """The operation conflicts with the current ledger state."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, code="CONFLICT", details=details)


class MovementAlreadyReversedError(ConflictError):
    def __init__(self, movement_no: str):
        super().__init__(
            f"Movement already reversed: {movement_no}",
            details={"movement_no": movement_no},
        )


class MigrationInProgressError(ConflictError):
    def __init__(self, operation: str):
        super().__init__(
            f"Storage migration in progress, '{operation}' is unavailable",
            details={"operation": operation},
        )


# Storage Exceptions
class StorageError(LedgerError):
    """Base exception for storage operations."""

    pass


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DB_ERROR",
            details={"operation": operation, "error": error},
        )
