"""Reference entities: operators, warehouses, racks, slots and items."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel


class ResourceStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class OperatorRole(str, Enum):
    ADMIN = "admin"
    KEEPER = "keeper"
    VIEWER = "viewer"
    MEMBER = "member"


class _Resource(BaseModel):
    id: str
    status: ResourceStatus = ResourceStatus.ACTIVE
    created_at: datetime

    @property
    def is_active(self) -> bool:
        return self.status == ResourceStatus.ACTIVE


class Operator(_Resource):
    """A person who records movements."""

    username: str
    display_name: str
    role: OperatorRole = OperatorRole.MEMBER


class Warehouse(_Resource):
    code: str
    name: str


class Rack(_Resource):
    """A shelving unit; its slots are laid out as levels x slots per level."""

    code: str
    name: str
    level_count: int
    slots_per_level: int
    location: str | None = None
    warehouse_id: str | None = None


class Slot(_Resource):
    """An addressable storage location on a rack."""

    rack_id: str
    warehouse_id: str | None = None
    level_no: int
    slot_no: int
    code: str


class Item(_Resource):
    item_code: str
    name: str
    model: str | None = None
    spec: str | None = None
    uom: str | None = None
    remark: str | None = None


def format_slot_code(warehouse_code: str, rack_code: str, level_no: int, slot_no: int) -> str:
    """Human-facing slot code: ``<warehouse>-<rack>-<level>-<slot>``."""
    return f"{warehouse_code}-{rack_code}-{level_no}-{slot_no}"
