"""Abstract interfaces for reference data (operators, items, slots)."""

from abc import ABC, abstractmethod

from slotledger.core.entities.reference import (
    Item,
    Operator,
    Rack,
    ResourceStatus,
    Slot,
    Warehouse,
)


class IReferenceResolver(ABC):
    """Identity and status lookups for movement participants."""

    @abstractmethod
    async def get_operator(self, operator_id: str) -> Operator | None:
        pass

    @abstractmethod
    async def get_item(self, item_id: str) -> Item | None:
        pass

    @abstractmethod
    async def get_item_by_code(self, item_code: str) -> Item | None:
        pass

    @abstractmethod
    async def get_slot(self, slot_id: str) -> Slot | None:
        pass

    @abstractmethod
    async def get_slot_by_code(self, code: str) -> Slot | None:
        pass


class IReferenceStore(IReferenceResolver):
    """Reference data persistence."""

    @abstractmethod
    async def create_operator(self, operator: Operator) -> Operator:
        pass

    @abstractmethod
    async def create_warehouse(self, warehouse: Warehouse) -> Warehouse:
        pass

    @abstractmethod
    async def create_rack(self, rack: Rack) -> tuple[Rack, list[Slot]]:
        """Create a rack and generate its slots."""
        pass

    @abstractmethod
    async def create_item(self, item: Item) -> Item:
        pass

    @abstractmethod
    async def get_warehouse(self, warehouse_id: str) -> Warehouse | None:
        pass

    @abstractmethod
    async def get_rack(self, rack_id: str) -> Rack | None:
        pass

    @abstractmethod
    async def list_slots(self, rack_id: str) -> list[Slot]:
        pass

    @abstractmethod
    async def set_status(
        self, resource: str, resource_id: str, status: ResourceStatus
    ) -> None:
        """Activate or deactivate an operator, warehouse, rack, slot or item."""
        pass
