"""
Batch allocator — state-changing operations (receive, issue, adjust, transfer).

All methods run under transaction.atomic(), so they commit with the
caller's document transaction or roll back entirely. Reductions lock the
candidate batches before allocating oldest-first.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal

from django.db import transaction

from ledgerman.conf import ADJUSTMENT_COST_POLICIES, ledgerman_settings
from ledgerman.exceptions import (
    ConsistencyViolation,
    InsufficientStock,
    InvalidQuantity,
    LedgerError,
)
from ledgerman.location import Location, Reference
from ledgerman.models.batch import COST_PLACES, QUANTITY_PLACES, StockBatch
from ledgerman.models.enums import MovementKind
from ledgerman.services import batches
from ledgerman.services.recorder import record

logger = logging.getLogger('ledgerman')


@dataclass(frozen=True)
class TransferResult:
    """Outcome of a transfer."""

    issued_from: list[tuple[StockBatch, Decimal]]
    received_batch: StockBatch
    unit_cost: Decimal

    @property
    def quantity(self) -> Decimal:
        return sum((taken for _, taken in self.issued_from), Decimal('0'))


def _fits(value: Decimal, places: Decimal) -> bool:
    """True when value is representable at the stored precision."""
    return value == value.quantize(places)


def _require_positive(quantity: Decimal, **context):
    if quantity is None or quantity <= 0 or not _fits(quantity, QUANTITY_PLACES):
        raise InvalidQuantity(requested=quantity, **context)


def _require_cost(unit_cost: Decimal, **context):
    if unit_cost is None or unit_cost < 0 or not _fits(unit_cost, COST_PLACES):
        raise InvalidQuantity(unit_cost=unit_cost, **context)


def weighted_average_cost(slices: list[tuple[StockBatch, Decimal]]) -> Decimal:
    """Unit cost of the slices taken, weighted by quantity."""
    quantity = sum((taken for _, taken in slices), Decimal('0'))
    if quantity == 0:
        return Decimal('0')
    value = sum((batch.unit_cost * taken for batch, taken in slices), Decimal('0'))
    places = Decimal(1).scaleb(-ledgerman_settings.COST_DECIMAL_PLACES)
    return (value / quantity).quantize(places)


class BatchAllocator:
    """State-changing batch operations."""

    @classmethod
    def receive(cls, quantity: Decimal, item, location: Location,
                unit_cost: Decimal, reference: Reference,
                kind: MovementKind = MovementKind.IN) -> StockBatch:
        """
        Stock entry.

        Creates one new batch and one movement.

        Raises:
            InvalidQuantity: If quantity <= 0, unit_cost < 0, or either is
                finer than the stored precision
            NotFound: If item or location do not exist
        """
        _require_positive(quantity)
        _require_cost(unit_cost)

        with transaction.atomic():
            batches.require_item(item)
            batch = batches.create_batch(item, location, quantity, unit_cost)
            record(batch, location, kind, Decimal('0'), quantity, quantity, reference)

            logger.info(
                "ledger.receive",
                extra={
                    "item": item.code,
                    "qty": str(quantity),
                    "location": str(location),
                    "unit_cost": str(unit_cost),
                    "batch_id": batch.pk,
                    "reference": str(reference),
                },
            )
            cls._verify_if_configured(item, location)
            return batch

    @classmethod
    def issue(cls, quantity: Decimal, item, location: Location,
              reference: Reference) -> list[tuple[StockBatch, Decimal]]:
        """
        Stock exit, oldest batch first.

        Returns:
            List of (batch, quantity taken) in allocation order

        Raises:
            InvalidQuantity: If quantity <= 0
            InsufficientStock: If quantity > current stock (nothing is written)
            NotFound: If item or location do not exist

        Concurrency:
            - Runs under transaction.atomic()
            - Uses select_for_update() on every candidate batch
            - Verifies availability after lock
        """
        _require_positive(quantity)

        with transaction.atomic():
            batches.require_item(item)
            location.resolve()
            taken = cls._consume(quantity, item, location, MovementKind.OUT, reference)

            logger.info(
                "ledger.issue",
                extra={
                    "item": item.code,
                    "qty": str(quantity),
                    "location": str(location),
                    "batches": [batch.pk for batch, _ in taken],
                    "reference": str(reference),
                },
            )
            cls._verify_if_configured(item, location)
            return taken

    @classmethod
    def adjust(cls, delta: Decimal, item, location: Location, reference: Reference,
               unit_cost: Decimal | None = None) -> list[tuple[StockBatch, Decimal]]:
        """
        Inventory correction by a signed delta.

        Negative delta consumes oldest-first like issue(). Positive delta
        creates one batch at unit_cost, or at the configured
        ADJUSTMENT_COST_POLICY when no cost is given. Zero changes nothing.

        Returns:
            List of (batch, signed delta applied)

        Raises:
            InvalidQuantity: If delta or unit_cost is finer than the stored precision
            InsufficientStock: If -delta > current stock
            NotFound: If item or location do not exist
        """
        if delta is None or not _fits(delta, QUANTITY_PLACES):
            raise InvalidQuantity(requested=delta)
        if unit_cost is not None:
            _require_cost(unit_cost)

        with transaction.atomic():
            batches.require_item(item)
            location.resolve()

            if delta == 0:
                logger.debug(
                    "ledger.adjust.noop",
                    extra={"item": item.code, "location": str(location), "reference": str(reference)},
                )
                return []

            if delta < 0:
                taken = cls._consume(-delta, item, location, MovementKind.ADJUSTMENT_DECREASE, reference)
                result = [(batch, -qty) for batch, qty in taken]
            else:
                cost = unit_cost if unit_cost is not None else cls.adjustment_cost(item, location)
                _require_cost(cost)
                batch = batches.create_batch(item, location, delta, cost)
                record(batch, location, MovementKind.ADJUSTMENT_INCREASE, Decimal('0'), delta, delta, reference)
                result = [(batch, delta)]

            logger.info(
                "ledger.adjust",
                extra={
                    "item": item.code,
                    "delta": str(delta),
                    "location": str(location),
                    "batches": [batch.pk for batch, _ in result],
                    "reference": str(reference),
                },
            )
            cls._verify_if_configured(item, location)
            return result

    @classmethod
    def transfer(cls, quantity: Decimal, item, source: Location,
                 destination: Location, reference: Reference) -> TransferResult:
        """
        Move stock between locations.

        Issues oldest-first at the source and receives one new batch at the
        destination, costed at the weighted average of what was issued.
        Every movement is a TRANSFER referencing the same line.

        Raises:
            InvalidQuantity: If quantity <= 0
            LedgerError('SAME_LOCATION'): If source == destination
            InsufficientStock: If quantity > stock at source
            NotFound: If item or either location do not exist
        """
        _require_positive(quantity)
        if source == destination:
            raise LedgerError('SAME_LOCATION', location=str(source))

        with transaction.atomic():
            batches.require_item(item)
            source.resolve()
            destination.resolve()

            issued = cls._consume(quantity, item, source, MovementKind.TRANSFER, reference)
            cost = weighted_average_cost(issued)
            received = batches.create_batch(item, destination, quantity, cost)
            record(received, destination, MovementKind.TRANSFER, Decimal('0'), quantity, quantity, reference)

            logger.info(
                "ledger.transfer",
                extra={
                    "item": item.code,
                    "qty": str(quantity),
                    "source": str(source),
                    "destination": str(destination),
                    "unit_cost": str(cost),
                    "batch_id": received.pk,
                    "reference": str(reference),
                },
            )
            cls._verify_if_configured(item, source)
            cls._verify_if_configured(item, destination)
            return TransferResult(issued_from=issued, received_batch=received, unit_cost=cost)

    @classmethod
    def adjustment_cost(cls, item, location: Location) -> Decimal:
        """Unit cost for a positive adjustment without explicit cost."""
        policy = ledgerman_settings.ADJUSTMENT_COST_POLICY
        if policy == 'zero':
            return Decimal('0')
        if policy == 'last_known':
            return batches.last_known_cost(item, location)
        raise LedgerError(
            'IMPROPERLY_CONFIGURED',
            message=f"ADJUSTMENT_COST_POLICY inválida: {policy!r}",
            policy=policy,
            choices=", ".join(ADJUSTMENT_COST_POLICIES),
        )

    # ══════════════════════════════════════════════════════════════
    # INTERNALS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def _consume(cls, quantity: Decimal, item, location: Location,
                 kind: MovementKind, reference: Reference) -> list[tuple[StockBatch, Decimal]]:
        """Take quantity oldest-first, one movement per batch touched."""
        candidates = batches.lock_batches(item, location)
        available = sum((batch.quantity for batch in candidates), Decimal('0'))

        if available < quantity:
            raise InsufficientStock(
                item=item.code,
                location=str(location),
                available=available,
                requested=quantity,
            )

        remaining = quantity
        taken = []
        for batch in candidates:
            if remaining <= 0:
                break
            portion = min(remaining, batch.quantity)
            previous = batch.quantity
            batch.quantity = previous - portion
            batch.save(update_fields=['quantity', 'updated_at'])
            record(batch, location, kind, previous, -portion, batch.quantity, reference)
            taken.append((batch, portion))
            remaining -= portion

        if remaining != 0:
            logger.error(
                "ledger.allocate.incomplete",
                extra={"item": item.code, "location": str(location), "remaining": str(remaining)},
            )
            raise ConsistencyViolation(
                item=item.code,
                location=str(location),
                problem=f"alocação incompleta, faltam {remaining}",
            )
        return taken

    @classmethod
    def _verify_if_configured(cls, item, location: Location):
        if ledgerman_settings.VERIFY_AFTER_WRITE:
            from ledgerman.services.queries import LedgerQueries
            LedgerQueries.verify(item, location)
