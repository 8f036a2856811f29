"""Infrastructure layer implementations."""

from slotledger.infrastructure import storage

__all__ = ["storage"]
