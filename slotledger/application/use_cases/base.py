"""Shared wiring for movement use cases."""

from slotledger.core.entities.reference import Item, Slot
from slotledger.core.exceptions import (
    ItemInactiveError,
    ItemNotFoundError,
    SlotInactiveError,
    SlotNotFoundError,
)
from slotledger.core.interfaces.reference_store import IReferenceResolver
from slotledger.core.services.ledger_engine import LedgerEngine


class MovementUseCase:
    """
    Base for use cases that record movements.

    Resolves human-facing item and slot codes to active entities before the
    engine is called; the engine itself only checks the operator.
    """

    def __init__(
        self,
        engine: LedgerEngine | None = None,
        references: IReferenceResolver | None = None,
    ):
        self._engine = engine
        self._references = references

    async def _get_engine(self) -> LedgerEngine:
        if self._engine is None:
            from slotledger.application.services import get_ledger_engine

            self._engine = await get_ledger_engine()
        return self._engine

    async def _get_references(self) -> IReferenceResolver:
        if self._references is None:
            from slotledger.infrastructure.storage.sqlite import get_reference_store

            self._references = await get_reference_store()
        return self._references

    async def _require_active_item(self, item_code: str) -> Item:
        references = await self._get_references()
        item = await references.get_item_by_code(item_code.strip())
        if item is None:
            raise ItemNotFoundError(item_code)
        if not item.is_active:
            raise ItemInactiveError(item_code)
        return item

    async def _require_active_slot(self, slot_code: str) -> Slot:
        references = await self._get_references()
        slot = await references.get_slot_by_code(slot_code.strip())
        if slot is None:
            raise SlotNotFoundError(slot_code)
        if not slot.is_active:
            raise SlotInactiveError(slot_code)
        return slot
