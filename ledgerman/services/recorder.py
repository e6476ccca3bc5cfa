"""
Movement recorder — the only writer of StockMovement.

Validates the arithmetic of every change before appending it. A failed
check raises ConsistencyViolation and the enclosing transaction aborts;
nothing is retried or corrected.
"""

import logging
from decimal import Decimal

from ledgerman.exceptions import ConsistencyViolation
from ledgerman.models.enums import MovementKind
from ledgerman.models.movement import INBOUND_KINDS, OUTBOUND_KINDS, StockMovement

logger = logging.getLogger('ledgerman')


def _check(batch, location, kind, previous: Decimal, delta: Decimal, after: Decimal) -> str | None:
    if batch.location != location:
        return f"lote {batch.pk} pertence a {batch.location}, não a {location}"
    if previous < 0 or after < 0:
        return "quantidade negativa"
    if previous + delta != after:
        return f"{previous} + {delta} != {after}"
    if kind in INBOUND_KINDS and delta <= 0:
        return f"{kind} exige variação positiva"
    if kind in OUTBOUND_KINDS and delta >= 0:
        return f"{kind} exige variação negativa"
    if delta == 0:
        return "variação nula"
    return None


def record(batch, location, kind, previous: Decimal, delta: Decimal,
           after: Decimal, reference) -> StockMovement:
    """
    Append one movement for one batch.

    Args:
        batch: StockBatch touched (already saved with its new quantity)
        location: Location of the batch
        kind: MovementKind
        previous: Batch quantity before the change
        delta: Signed change
        after: Batch quantity after the change
        reference: Reference to the causing document line

    Raises:
        ConsistencyViolation: If the numbers do not add up
    """
    kind = MovementKind(kind)
    problem = _check(batch, location, kind, previous, delta, after)
    if problem:
        logger.error(
            "ledger.consistency_violation",
            extra={
                "batch_id": batch.pk,
                "location": str(location),
                "kind": kind.value,
                "previous": str(previous),
                "delta": str(delta),
                "after": str(after),
                "problem": problem,
            },
        )
        raise ConsistencyViolation(
            batch=batch.pk,
            kind=kind.value,
            problem=problem,
        )

    return StockMovement.objects.create(
        batch=batch,
        holder_type=location.kind.value,
        holder_id=location.id,
        kind=kind,
        previous_quantity=previous,
        movement_quantity=abs(delta),
        after_quantity=after,
        reference_type=reference.kind.value,
        reference_id=reference.id,
    )
