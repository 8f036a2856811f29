"""In-memory reference data store."""

from uuid import uuid4

from slotledger.core.entities.reference import (
    Item,
    Operator,
    Rack,
    ResourceStatus,
    Slot,
    Warehouse,
    format_slot_code,
)
from slotledger.core.exceptions import ConflictError, NotFoundError, ValidationError
from slotledger.core.interfaces.reference_store import IReferenceStore


class InMemoryReferenceStore(IReferenceStore):
    """Operators, warehouses, racks, slots and items held in dictionaries."""

    def __init__(self) -> None:
        self.operators: dict[str, Operator] = {}
        self.warehouses: dict[str, Warehouse] = {}
        self.racks: dict[str, Rack] = {}
        self.slots: dict[str, Slot] = {}
        self.items: dict[str, Item] = {}

    async def create_operator(self, operator: Operator) -> Operator:
        if any(o.username == operator.username for o in self.operators.values()):
            raise ConflictError(
                f"Operator username already exists: {operator.username}",
                details={"username": operator.username},
            )
        self.operators[operator.id] = operator
        return operator

    async def get_operator(self, operator_id: str) -> Operator | None:
        return self.operators.get(operator_id)

    async def create_warehouse(self, warehouse: Warehouse) -> Warehouse:
        if any(w.code == warehouse.code for w in self.warehouses.values()):
            raise ConflictError(
                f"Warehouse code already exists: {warehouse.code}",
                details={"code": warehouse.code},
            )
        self.warehouses[warehouse.id] = warehouse
        return warehouse

    async def get_warehouse(self, warehouse_id: str) -> Warehouse | None:
        return self.warehouses.get(warehouse_id)

    async def create_rack(self, rack: Rack) -> tuple[Rack, list[Slot]]:
        if rack.level_count < 1 or rack.slots_per_level < 1:
            raise ValidationError(
                field="rack",
                message="level_count and slots_per_level must both be >= 1",
                value=f"{rack.level_count}x{rack.slots_per_level}",
            )
        if not rack.warehouse_id:
            raise ValidationError(
                field="warehouse_id",
                message="A warehouse is required to generate slot codes",
            )
        warehouse = self.warehouses.get(rack.warehouse_id)
        if warehouse is None:
            raise NotFoundError("warehouse", rack.warehouse_id)
        if any(
            r.code == rack.code and r.warehouse_id == rack.warehouse_id
            for r in self.racks.values()
        ):
            raise ConflictError(
                f"Rack code already exists in warehouse {warehouse.code}: {rack.code}",
                details={"code": rack.code, "warehouse_id": warehouse.id},
            )

        slots = [
            Slot(
                id=str(uuid4()),
                rack_id=rack.id,
                warehouse_id=warehouse.id,
                level_no=level_no,
                slot_no=slot_no,
                code=format_slot_code(warehouse.code, rack.code, level_no, slot_no),
                created_at=rack.created_at,
            )
            for level_no in range(1, rack.level_count + 1)
            for slot_no in range(1, rack.slots_per_level + 1)
        ]
        self.racks[rack.id] = rack
        for slot in slots:
            self.slots[slot.id] = slot
        return rack, slots

    async def get_rack(self, rack_id: str) -> Rack | None:
        return self.racks.get(rack_id)

    async def get_slot(self, slot_id: str) -> Slot | None:
        return self.slots.get(slot_id)

    async def get_slot_by_code(self, code: str) -> Slot | None:
        return next((s for s in self.slots.values() if s.code == code), None)

    async def list_slots(self, rack_id: str) -> list[Slot]:
        return sorted(
            (s for s in self.slots.values() if s.rack_id == rack_id),
            key=lambda s: (s.level_no, s.slot_no),
        )

    async def create_item(self, item: Item) -> Item:
        if any(i.item_code == item.item_code for i in self.items.values()):
            raise ConflictError(
                f"Item code already exists: {item.item_code}",
                details={"item_code": item.item_code},
            )
        self.items[item.id] = item
        return item

    async def get_item(self, item_id: str) -> Item | None:
        return self.items.get(item_id)

    async def get_item_by_code(self, item_code: str) -> Item | None:
        return next((i for i in self.items.values() if i.item_code == item_code), None)

    async def set_status(
        self, resource: str, resource_id: str, status: ResourceStatus
    ) -> None:
        tables = {
            "operator": self.operators,
            "warehouse": self.warehouses,
            "rack": self.racks,
            "slot": self.slots,
            "item": self.items,
        }
        table = tables.get(resource)
        if table is None:
            raise ValidationError(field="resource", message="Unknown resource type", value=resource)
        current = table.get(resource_id)
        if current is None:
            raise NotFoundError(resource, resource_id)
        table[resource_id] = current.model_copy(update={"status": status})
