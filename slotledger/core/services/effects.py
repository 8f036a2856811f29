"""
Stock effects of ledger movements.

Each movement kind maps to the signed quantity changes it applies to
(item, slot) pairs. REVERSAL has no effect of its own: it applies the
inverse of the movement it references.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from slotledger.core.entities.movement import Movement, MovementKind
from slotledger.core.entities.reports import StockDiscrepancy
from slotledger.core.entities.stock import StockKey, StockLevel
from slotledger.core.exceptions import MovementNotReversibleError, ValidationError


@dataclass(frozen=True)
class StockEffect:
    """A signed quantity change for one (item, slot) pair."""

    item_id: str
    slot_id: str
    delta: int

    @property
    def key(self) -> StockKey:
        return (self.item_id, self.slot_id)

    def inverted(self) -> "StockEffect":
        return StockEffect(self.item_id, self.slot_id, -self.delta)


def _require_slot(movement: Movement, field: str) -> str:
    slot_id = getattr(movement, field)
    if not slot_id:
        raise ValidationError(
            field=field,
            message=f"{movement.kind.value} movement {movement.movement_no} has no {field}",
        )
    return slot_id


def _inbound(m: Movement) -> tuple[StockEffect, ...]:
    return (StockEffect(m.item_id, _require_slot(m, "to_slot_id"), m.qty),)


def _outbound(m: Movement) -> tuple[StockEffect, ...]:
    return (StockEffect(m.item_id, _require_slot(m, "from_slot_id"), -m.qty),)


def _move(m: Movement) -> tuple[StockEffect, ...]:
    return (
        StockEffect(m.item_id, _require_slot(m, "from_slot_id"), -m.qty),
        StockEffect(m.item_id, _require_slot(m, "to_slot_id"), m.qty),
    )


def _count(m: Movement) -> tuple[StockEffect, ...]:
    # Informational; the paired ADJUST carries the change.
    return ()


def _adjust(m: Movement) -> tuple[StockEffect, ...]:
    return (StockEffect(m.item_id, _require_slot(m, "from_slot_id"), m.qty),)


_DIRECT_EFFECTS: dict[MovementKind, Callable[[Movement], tuple[StockEffect, ...]]] = {
    MovementKind.INBOUND: _inbound,
    MovementKind.OUTBOUND: _outbound,
    MovementKind.MOVE: _move,
    MovementKind.COUNT: _count,
    MovementKind.ADJUST: _adjust,
}

# Every kind is either direct or REVERSAL
assert set(_DIRECT_EFFECTS) | {MovementKind.REVERSAL} == set(MovementKind)


def inverse_effects(target: Movement) -> tuple[StockEffect, ...]:
    """Effects a REVERSAL of ``target`` applies.

    Raises:
        MovementNotReversibleError: target is a COUNT or a REVERSAL
    """
    if not target.kind.is_reversible:
        raise MovementNotReversibleError(target.movement_no, target.kind.value)
    return tuple(effect.inverted() for effect in _DIRECT_EFFECTS[target.kind](target))


def effects_of(
    movement: Movement, referenced: Movement | None = None
) -> tuple[StockEffect, ...]:
    """Effects a movement applies; REVERSAL requires the movement it references."""
    if movement.kind == MovementKind.REVERSAL:
        if referenced is None or referenced.id != movement.ref_movement_id:
            raise ValidationError(
                field="ref_movement_id",
                message=f"Reversal {movement.movement_no} requires its referenced movement",
                value=movement.ref_movement_id,
            )
        return inverse_effects(referenced)
    return _DIRECT_EFFECTS[movement.kind](movement)


def replay(movements: Iterable[Movement]) -> dict[StockKey, int]:
    """Fold movements (in insertion order) into the stock quantities they imply."""
    by_id: dict[str, Movement] = {}
    totals: dict[StockKey, int] = {}
    for movement in movements:
        referenced = None
        if movement.kind == MovementKind.REVERSAL:
            referenced = by_id.get(movement.ref_movement_id or "")
        for effect in effects_of(movement, referenced):
            totals[effect.key] = totals.get(effect.key, 0) + effect.delta
        by_id[movement.id] = movement
    return totals


def stock_discrepancies(
    movements: Iterable[Movement], levels: Iterable[StockLevel]
) -> list[StockDiscrepancy]:
    """Stock levels that differ from the replayed ledger, ordered by (item, slot).

    A pair the ledger implies but with no stored row reports ``stored_qty=None``.
    """
    expected = replay(movements)
    stored = {level.key: level.qty for level in levels}
    discrepancies = []
    for key in sorted(set(expected) | set(stored)):
        ledger_qty = expected.get(key, 0)
        stored_qty = stored.get(key)
        if (stored_qty or 0) != ledger_qty:
            discrepancies.append(
                StockDiscrepancy(
                    item_id=key[0],
                    slot_id=key[1],
                    stored_qty=stored_qty,
                    ledger_qty=ledger_qty,
                )
            )
    return discrepancies
