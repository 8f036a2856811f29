"""
Service factory functions for dependency injection.

This module provides factory functions that wire infrastructure
implementations to core services. Use cases should import from here.

Clean Architecture: Application layer orchestrates DI, not core layer.
"""

from typing import TYPE_CHECKING

from slotledger.config import get_settings
from slotledger.core.services import ConcurrencyGate, LedgerEngine

if TYPE_CHECKING:
    from slotledger.core.interfaces import IReferenceResolver, IUnitOfWork


# Singleton service instances
_concurrency_gate: ConcurrencyGate | None = None
_ledger_engine: LedgerEngine | None = None


def get_concurrency_gate() -> ConcurrencyGate:
    """Get the process-wide concurrency gate."""
    global _concurrency_gate
    if _concurrency_gate is None:
        _concurrency_gate = ConcurrencyGate()
    return _concurrency_gate


async def get_ledger_engine(
    unit_of_work: "IUnitOfWork | None" = None,
    references: "IReferenceResolver | None" = None,
) -> LedgerEngine:
    """
    Get or create the LedgerEngine instance.

    Creates SQLite-backed dependencies if not provided. Every engine shares
    the process-wide gate, so overrides never bypass write serialisation.

    Args:
        unit_of_work: Optional unit of work override
        references: Optional reference resolver override

    Returns:
        Configured LedgerEngine
    """
    global _ledger_engine

    if _ledger_engine is not None and unit_of_work is None and references is None:
        return _ledger_engine

    # Lazy import infrastructure to avoid circular imports
    from slotledger.infrastructure.storage.sqlite import get_reference_store, get_unit_of_work

    settings = get_settings()
    engine = LedgerEngine(
        unit_of_work=unit_of_work or await get_unit_of_work(),
        references=references or await get_reference_store(),
        gate=get_concurrency_gate(),
        movement_no_prefix=settings.ledger.movement_no_prefix,
    )

    if unit_of_work is None and references is None:
        _ledger_engine = engine

    return engine


def reset_services() -> None:
    """Reset all service singletons (for testing)."""
    global _concurrency_gate
    global _ledger_engine

    _concurrency_gate = None
    _ledger_engine = None


__all__ = [
    "get_concurrency_gate",
    "get_ledger_engine",
    "reset_services",
]
