"""
Ledger engine.

Records stock movements and keeps the materialised stock levels equal to the
net effect of the ledger. Every mutating operation:

1. validates its input before touching storage,
2. holds the concurrency gate,
3. requires an active recording operator,
4. appends ledger rows and updates stock rows inside one storage transaction.

The engine works on internal identifiers; resolving human-facing item and
slot codes is the caller's job.
"""

from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from datetime import UTC, datetime, timedelta
from uuid import uuid4

from slotledger.config import get_logger
from slotledger.core.entities.movement import Movement, MovementKind
from slotledger.core.entities.reference import Operator
from slotledger.core.exceptions import (
    InsufficientStockError,
    LedgerError,
    MovementAlreadyReversedError,
    MovementNotFoundError,
    MovementNotReversibleError,
    OperatorInactiveError,
    OperatorNotFoundError,
    ValidationError,
)
from slotledger.core.interfaces.ledger_store import IUnitOfWork, LedgerTransaction
from slotledger.core.interfaces.reference_store import IReferenceResolver
from slotledger.core.services.concurrency_gate import ConcurrencyGate
from slotledger.core.services.effects import StockEffect, effects_of, inverse_effects

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class LedgerEngine:
    """Records movements and reversals atomically against the stock levels."""

    def __init__(
        self,
        unit_of_work: IUnitOfWork,
        references: IReferenceResolver,
        gate: ConcurrencyGate,
        movement_no_prefix: str = "T",
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._uow = unit_of_work
        self._references = references
        self._gate = gate
        self._prefix = movement_no_prefix
        self._clock = clock
        self._last_recorded_at: datetime | None = None

    @property
    def gate(self) -> ConcurrencyGate:
        return self._gate

    async def record_inbound(
        self,
        operator_id: str,
        item_id: str,
        to_slot_id: str,
        qty: int,
        occurred_at: datetime,
        note: str | None = None,
    ) -> str:
        """Receive ``qty`` units of an item into a slot. Returns the movement number."""
        _require_positive(qty)
        async with self._writing("inbound"):
            operator = await self._require_active_operator(operator_id)
            async with self._uow.begin() as tx:
                movement = self._new_movement(
                    MovementKind.INBOUND,
                    operator=operator,
                    item_id=item_id,
                    to_slot_id=to_slot_id,
                    qty=qty,
                    occurred_at=occurred_at,
                    note=note,
                )
                await tx.ledger.append(movement)
                await self._apply(tx, effects_of(movement), movement.recorded_at)

        self._log_recorded(movement)
        return movement.movement_no

    async def record_outbound(
        self,
        operator_id: str,
        item_id: str,
        from_slot_id: str,
        qty: int,
        occurred_at: datetime,
        note: str | None = None,
    ) -> str:
        """Issue ``qty`` units of an item from a slot. Returns the movement number.

        Raises:
            InsufficientStockError: the slot holds less than ``qty``
        """
        _require_positive(qty)
        async with self._writing("outbound"):
            operator = await self._require_active_operator(operator_id)
            async with self._uow.begin() as tx:
                movement = self._new_movement(
                    MovementKind.OUTBOUND,
                    operator=operator,
                    item_id=item_id,
                    from_slot_id=from_slot_id,
                    qty=qty,
                    occurred_at=occurred_at,
                    note=note,
                )
                await self._apply(tx, effects_of(movement), movement.recorded_at)
                await tx.ledger.append(movement)

        self._log_recorded(movement)
        return movement.movement_no

    async def record_move(
        self,
        operator_id: str,
        item_id: str,
        from_slot_id: str,
        to_slot_id: str,
        qty: int,
        occurred_at: datetime,
        note: str | None = None,
    ) -> str:
        """Move ``qty`` units between two different slots. Returns the movement number.

        Raises:
            InsufficientStockError: the source slot holds less than ``qty``
        """
        _require_positive(qty)
        if from_slot_id == to_slot_id:
            raise ValidationError(
                field="to_slot_id",
                message="Source and target slot must differ",
                value=to_slot_id,
            )
        async with self._writing("move"):
            operator = await self._require_active_operator(operator_id)
            async with self._uow.begin() as tx:
                movement = self._new_movement(
                    MovementKind.MOVE,
                    operator=operator,
                    item_id=item_id,
                    from_slot_id=from_slot_id,
                    to_slot_id=to_slot_id,
                    qty=qty,
                    occurred_at=occurred_at,
                    note=note,
                )
                await self._apply(tx, effects_of(movement), movement.recorded_at)
                await tx.ledger.append(movement)

        self._log_recorded(movement)
        return movement.movement_no

    async def record_count(
        self,
        operator_id: str,
        item_id: str,
        slot_id: str,
        actual_qty: int,
        occurred_at: datetime,
        note: str | None = None,
    ) -> str:
        """
        Record a physical count and set the slot to the counted quantity.

        Writes two rows: an informational COUNT (qty 0, ``actual_qty`` set) and
        an ADJUST referencing it whose ``qty`` is the signed difference between
        the counted and the prior quantity. Only the ADJUST is reversible.

        Returns:
            The COUNT movement number
        """
        if actual_qty < 0:
            raise ValidationError(
                field="actual_qty",
                message="Counted quantity cannot be negative",
                value=actual_qty,
            )
        async with self._writing("count"):
            operator = await self._require_active_operator(operator_id)
            async with self._uow.begin() as tx:
                current = await tx.stock.get(item_id, slot_id)
                prior_qty = current.qty if current else 0

                count = self._new_movement(
                    MovementKind.COUNT,
                    operator=operator,
                    item_id=item_id,
                    from_slot_id=slot_id,
                    qty=0,
                    actual_qty=actual_qty,
                    occurred_at=occurred_at,
                    note=note,
                )
                adjust = self._new_movement(
                    MovementKind.ADJUST,
                    operator=operator,
                    item_id=item_id,
                    from_slot_id=slot_id,
                    qty=actual_qty - prior_qty,
                    ref_movement_id=count.id,
                    occurred_at=occurred_at,
                    note=note,
                )
                await tx.ledger.append(count)
                await tx.ledger.append(adjust)
                await self._apply(tx, effects_of(adjust), adjust.recorded_at)

        logger.info(
            "count_recorded",
            movement_no=count.movement_no,
            adjust_no=adjust.movement_no,
            item_id=item_id,
            slot_id=slot_id,
            prior_qty=prior_qty,
            actual_qty=actual_qty,
        )
        return count.movement_no

    async def reverse(
        self,
        operator_id: str,
        movement_no: str,
        occurred_at: datetime,
        note: str | None = None,
    ) -> str:
        """Reverse a movement by number and return the REVERSAL's number."""
        reversal, _ = await self.reverse_movement(operator_id, movement_no, occurred_at, note)
        return reversal.movement_no

    async def reverse_movement(
        self,
        operator_id: str,
        movement_no: str,
        occurred_at: datetime,
        note: str | None = None,
    ) -> tuple[Movement, Movement]:
        """
        Append a REVERSAL that undoes the stock effect of an earlier movement.

        The REVERSAL copies the target's item and slots and stores the size of
        the undone change in ``qty``; the direction comes from the target.

        Returns:
            The committed REVERSAL and the movement it reverses

        Raises:
            MovementNotFoundError: no movement with this number
            MovementNotReversibleError: target is a COUNT or a REVERSAL
            MovementAlreadyReversedError: target already has a REVERSAL
            InsufficientStockError: undoing would drive a slot negative;
                nothing is applied
        """
        if not movement_no or not movement_no.strip():
            raise ValidationError(field="movement_no", message="Movement number is required")
        async with self._writing("reversal"):
            operator = await self._require_active_operator(operator_id)
            async with self._uow.begin() as tx:
                target = await tx.ledger.get_by_no(movement_no.strip())
                if target is None:
                    raise MovementNotFoundError(movement_no)
                if not target.kind.is_reversible:
                    raise MovementNotReversibleError(target.movement_no, target.kind.value)
                if await tx.ledger.has_reversal(target.id):
                    raise MovementAlreadyReversedError(target.movement_no)

                reversal = self._new_movement(
                    MovementKind.REVERSAL,
                    operator=operator,
                    item_id=target.item_id,
                    from_slot_id=target.from_slot_id,
                    to_slot_id=target.to_slot_id,
                    qty=abs(target.qty),
                    ref_movement_id=target.id,
                    occurred_at=occurred_at,
                    note=note,
                )
                await self._apply(tx, inverse_effects(target), reversal.recorded_at)
                await tx.ledger.append(reversal)

        logger.info(
            "reversal_recorded",
            movement_no=reversal.movement_no,
            target_no=target.movement_no,
            target_kind=target.kind.value,
        )
        return reversal, target

    @asynccontextmanager
    async def _writing(self, operation: str) -> AsyncIterator[None]:
        """Hold the gate for one mutating operation, logging any rejection."""
        try:
            async with self._gate.writer(operation):
                yield
        except LedgerError as e:
            log = logger.error if e.code == "DB_ERROR" else logger.warning
            log(
                "movement_rejected",
                operation=operation,
                error_code=e.code,
                error=e.message,
            )
            raise

    async def _require_active_operator(self, operator_id: str) -> Operator:
        operator = await self._references.get_operator(operator_id)
        if operator is None:
            raise OperatorNotFoundError(operator_id)
        if not operator.is_active:
            raise OperatorInactiveError(operator_id)
        return operator

    async def _apply(
        self,
        tx: LedgerTransaction,
        effects: tuple[StockEffect, ...],
        timestamp: datetime,
    ) -> None:
        """Apply effects in order, refusing any that would go below zero."""
        for effect in effects:
            current = await tx.stock.get(effect.item_id, effect.slot_id)
            current_qty = current.qty if current else 0
            next_qty = current_qty + effect.delta
            if next_qty < 0:
                raise InsufficientStockError(
                    item_id=effect.item_id,
                    slot_id=effect.slot_id,
                    requested=-effect.delta,
                    available=current_qty,
                )
            await tx.stock.set(effect.item_id, effect.slot_id, next_qty, timestamp)

    def _next_recorded_at(self) -> datetime:
        # Strictly increasing so insertion order is recoverable from recorded_at
        now = self._clock()
        if self._last_recorded_at is not None and now <= self._last_recorded_at:
            now = self._last_recorded_at + timedelta(microseconds=1)
        self._last_recorded_at = now
        return now

    def _new_movement(
        self,
        kind: MovementKind,
        operator: Operator,
        item_id: str,
        qty: int,
        occurred_at: datetime,
        from_slot_id: str | None = None,
        to_slot_id: str | None = None,
        actual_qty: int | None = None,
        ref_movement_id: str | None = None,
        note: str | None = None,
    ) -> Movement:
        recorded_at = self._next_recorded_at()
        return Movement(
            id=str(uuid4()),
            movement_no=f"{self._prefix}{recorded_at:%Y%m%d}-{uuid4().hex[:12].upper()}",
            kind=kind,
            occurred_at=occurred_at,
            recorded_at=recorded_at,
            operator_id=operator.id,
            item_id=item_id,
            from_slot_id=from_slot_id,
            to_slot_id=to_slot_id,
            qty=qty,
            actual_qty=actual_qty,
            ref_movement_id=ref_movement_id,
            note=note,
        )

    @staticmethod
    def _log_recorded(movement: Movement) -> None:
        logger.info(
            "movement_recorded",
            movement_no=movement.movement_no,
            kind=movement.kind.value,
            item_id=movement.item_id,
            from_slot_id=movement.from_slot_id,
            to_slot_id=movement.to_slot_id,
            qty=movement.qty,
        )


def _require_positive(qty: int) -> None:
    if qty <= 0:
        raise ValidationError(field="qty", message="Quantity must be a positive integer", value=qty)
