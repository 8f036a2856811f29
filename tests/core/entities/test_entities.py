"""Unit tests for ledger and reference entities."""

from datetime import UTC, datetime

import pydantic
import pytest

from slotledger.core.entities import (
    Item,
    Movement,
    MovementKind,
    Operator,
    ResourceStatus,
    StockLevel,
    format_slot_code,
)

NOW = datetime(2024, 3, 1, 9, 30, tzinfo=UTC)


def make_movement(**overrides) -> Movement:
    fields = {
        "id": "m1",
        "movement_no": "T20240301-000000000001",
        "kind": MovementKind.INBOUND,
        "occurred_at": NOW,
        "recorded_at": NOW,
        "operator_id": "op1",
        "item_id": "i1",
        "to_slot_id": "s1",
        "qty": 5,
    }
    fields.update(overrides)
    return Movement(**fields)


class TestMovementKind:
    def test_persisted_codes(self):
        assert [k.value for k in MovementKind] == [
            "IN",
            "OUT",
            "MOVE",
            "COUNT",
            "ADJUST",
            "REVERSAL",
        ]

    def test_from_code(self):
        assert MovementKind("OUT") is MovementKind.OUTBOUND

    @pytest.mark.parametrize(
        "kind, reversible",
        [
            (MovementKind.INBOUND, True),
            (MovementKind.OUTBOUND, True),
            (MovementKind.MOVE, True),
            (MovementKind.ADJUST, True),
            (MovementKind.COUNT, False),
            (MovementKind.REVERSAL, False),
        ],
    )
    def test_is_reversible(self, kind: MovementKind, reversible: bool):
        assert kind.is_reversible is reversible


class TestMovement:
    def test_defaults(self):
        movement = make_movement()
        assert movement.from_slot_id is None
        assert movement.actual_qty is None
        assert movement.ref_movement_id is None
        assert movement.note is None

    def test_is_immutable(self):
        movement = make_movement()
        with pytest.raises(pydantic.ValidationError):
            movement.qty = 10

    def test_adjust_carries_signed_qty(self):
        movement = make_movement(kind=MovementKind.ADJUST, from_slot_id="s1", qty=-3)
        assert movement.qty == -3


class TestStockLevel:
    def test_key(self):
        level = StockLevel(item_id="i1", slot_id="s1", qty=4, updated_at=NOW)
        assert level.key == ("i1", "s1")

    def test_negative_qty_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            StockLevel(item_id="i1", slot_id="s1", qty=-1, updated_at=NOW)


class TestReferenceEntities:
    def test_active_by_default(self):
        item = Item(id="i1", item_code="BOLT-M8", name="Hex bolt", created_at=NOW)
        assert item.status == ResourceStatus.ACTIVE
        assert item.is_active

    def test_inactive(self):
        operator = Operator(
            id="op1",
            username="keeper",
            display_name="Keeper",
            status=ResourceStatus.INACTIVE,
            created_at=NOW,
        )
        assert not operator.is_active

    def test_format_slot_code(self):
        assert format_slot_code("WH1", "R2", 3, 4) == "WH1-R2-3-4"
