"""
Ledger Service — The single public interface for all ledger operations.

Usage:
    from ledgerman import ledger, Location, Reference

    loja = Location.of(branch)
    ledger.receive(Decimal('10'), item, loja, Decimal('2.50'), Reference.of(line))
    ledger.issue(Decimal('4'), item, loja, Reference.of(waybill_line))
    ledger.current_stock(item, loja)  # 6
"""

from decimal import Decimal

from ledgerman.location import Location, Reference
from ledgerman.models.batch import StockBatch
from ledgerman.models.enums import DocumentKind
from ledgerman.services.allocator import BatchAllocator, TransferResult
from ledgerman.services.queries import LedgerQueries
from ledgerman.services.resolver import StatusResolver


class Ledger:
    """
    Single interface for all ledger operations.

    Parameter convention: (quantity, item, location, ...)
    Follows natural language: "Receive 10 of this item at this branch"

    IMPORTANT: Every state-changing method runs under transaction.atomic()
    and joins the caller's transaction. Document services call these once
    per line inside their own transaction.
    """

    # ══════════════════════════════════════════════════════════════
    # QUERIES
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def current_stock(cls, item, location: Location) -> Decimal:
        """On-hand quantity: sum of batch quantities."""
        return LedgerQueries.current_stock(item, location)

    @classmethod
    def list_batches(cls, item, location: Location, include_empty: bool = True):
        """Batches of item at location, oldest first."""
        return LedgerQueries.list_batches(item, location, include_empty=include_empty)

    @classmethod
    def stock_by_location(cls, item) -> dict[Location, Decimal]:
        return LedgerQueries.stock_by_location(item)

    @classmethod
    def movements(cls, item=None, location: Location | None = None, reference: Reference | None = None):
        """Ledger rows in creation order."""
        return LedgerQueries.movements(item=item, location=location, reference=reference)

    @classmethod
    def verify(cls, item, location: Location) -> Decimal:
        """Replay movements against batches. Raises ConsistencyViolation."""
        return LedgerQueries.verify(item, location)

    # ══════════════════════════════════════════════════════════════
    # MOVEMENTS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def receive(cls, quantity: Decimal, item, location: Location,
                unit_cost: Decimal, reference: Reference) -> StockBatch:
        """Create a batch. See BatchAllocator.receive."""
        return BatchAllocator.receive(quantity, item, location, unit_cost, reference)

    @classmethod
    def issue(cls, quantity: Decimal, item, location: Location,
              reference: Reference) -> list[tuple[StockBatch, Decimal]]:
        """FIFO exit. See BatchAllocator.issue."""
        return BatchAllocator.issue(quantity, item, location, reference)

    @classmethod
    def adjust(cls, delta: Decimal, item, location: Location, reference: Reference,
               unit_cost: Decimal | None = None) -> list[tuple[StockBatch, Decimal]]:
        """Signed correction. See BatchAllocator.adjust."""
        return BatchAllocator.adjust(delta, item, location, reference, unit_cost=unit_cost)

    @classmethod
    def transfer(cls, quantity: Decimal, item, source: Location,
                 destination: Location, reference: Reference) -> TransferResult:
        """Move between locations. See BatchAllocator.transfer."""
        return BatchAllocator.transfer(quantity, item, source, destination, reference)

    # ══════════════════════════════════════════════════════════════
    # STATUS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def recompute_status(cls, document_id: int, document_kind: DocumentKind) -> str:
        """Recompute and persist a parent document status."""
        return StatusResolver.recompute(document_id, document_kind)
