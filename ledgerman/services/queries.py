"""
Ledger queries — read-only operations.

All methods are classmethods and use no locking.
"""

import logging
from decimal import Decimal

from django.db.models import Sum
from django.db.models.functions import Coalesce

from ledgerman.exceptions import ConsistencyViolation
from ledgerman.location import Location
from ledgerman.models.batch import StockBatch
from ledgerman.models.enums import HolderKind
from ledgerman.models.movement import StockMovement
from ledgerman.services import batches

logger = logging.getLogger('ledgerman')


class LedgerQueries:
    """Read-only ledger query methods."""

    @classmethod
    def current_stock(cls, item, location: Location) -> Decimal:
        """On-hand quantity of item at location."""
        return batches.current_stock(item, location)

    @classmethod
    def list_batches(cls, item, location: Location, include_empty: bool = True):
        """Batches of item at location, oldest first."""
        return batches.list_batches(item, location, include_empty=include_empty)

    @classmethod
    def stock_by_location(cls, item) -> dict[Location, Decimal]:
        """On-hand quantity of item per location (locations with batches only)."""
        rows = (
            StockBatch.objects.for_item(item)
            .values('holder_type', 'holder_id')
            .annotate(t=Coalesce(Sum('quantity'), Decimal('0')))
            .order_by('holder_type', 'holder_id')
        )
        return {
            Location(HolderKind(row['holder_type']), row['holder_id']): row['t']
            for row in rows
        }

    @classmethod
    def movements(cls, item=None, location: Location | None = None, reference=None):
        """Movements in creation order, optionally filtered."""
        qs = StockMovement.objects.select_related('batch')
        if item is not None:
            qs = qs.for_item(item)
        if location is not None:
            qs = qs.at(location)
        if reference is not None:
            qs = qs.for_reference(reference)
        return qs.order_by('created_at', 'id')

    @classmethod
    def verify(cls, item, location: Location) -> Decimal:
        """
        Replay movements against the batches of (item, location).

        Use for:
        - Integrity audit
        - Checking a suspicious location after an incident

        Unlike a recalculation, nothing is corrected: any mismatch raises.

        Returns:
            The verified on-hand quantity

        Raises:
            ConsistencyViolation: On the first mismatch found
        """
        total = Decimal('0')
        for batch in batches.list_batches(item, location):
            replayed = Decimal('0')
            for move in batch.movements.order_by('created_at', 'id'):
                if move.location != location:
                    cls._fail(batch, f"movimento {move.pk} registrado em {move.location}")
                if move.previous_quantity != replayed:
                    cls._fail(batch, f"movimento {move.pk} parte de {move.previous_quantity}, esperado {replayed}")
                replayed += move.delta
                if replayed != move.after_quantity or replayed < 0:
                    cls._fail(batch, f"movimento {move.pk} termina em {move.after_quantity}, esperado {replayed}")
            if replayed != batch.quantity:
                cls._fail(batch, f"saldo {batch.quantity}, movimentos somam {replayed}")
            total += batch.quantity
        return total

    @staticmethod
    def _fail(batch, problem: str):
        logger.error(
            "ledger.verify.failed",
            extra={"batch_id": batch.pk, "sku": batch.sku, "problem": problem},
        )
        raise ConsistencyViolation(batch=batch.pk, sku=batch.sku, problem=problem)
