"""
Stock document services.

    StockAdjustments   create: apply a signed delta per line
    StockTransfers     create: move every line between two locations
    StockAudits        create, update, destroy, lock: count, then post
                       the discrepancies as adjustments
"""

import logging
from dataclasses import dataclass
from datetime import date as date_type
from decimal import Decimal

from django.db import transaction
from django.utils import timezone

from ledgerman.context import ActingContext
from ledgerman.documents.base import (
    COST_PLACES,
    QUANTITY_PLACES,
    DocumentService,
    line_errors,
    require_non_negative,
    require_positive,
)
from ledgerman.exceptions import InvalidQuantity, InvalidStatus, LedgerError
from ledgerman.location import Location, Reference
from ledgerman.models.stock import (
    StockAdjustment,
    StockAdjustmentLine,
    StockAudit,
    StockAuditLine,
    StockTransfer,
    StockTransferLine,
)
from ledgerman.services import batches
from ledgerman.services.allocator import BatchAllocator
from ledgerman.services.queries import LedgerQueries

logger = logging.getLogger('ledgerman')


@dataclass(frozen=True)
class AdjustmentLineInput:
    item: object
    delta: Decimal
    reason: str = ''
    unit_cost: Decimal | None = None


@dataclass(frozen=True)
class TransferLineInput:
    item: object
    quantity: Decimal


@dataclass(frozen=True)
class AuditLineInput:
    item: object
    physical_quantity: Decimal
    reason: str = ''


# ══════════════════════════════════════════════════════════════
# ADJUSTMENTS
# ══════════════════════════════════════════════════════════════


class StockAdjustments(DocumentService):
    document_type = 'stock_adjustment'

    @classmethod
    def create(cls, ctx: ActingContext | None, code: str, date: date_type,
               location: Location, lines: list[AdjustmentLineInput]) -> StockAdjustment:
        """
        Correct stock at one location.

        Each line stores the quantity before and after its delta. Lines
        apply in order, so an item listed twice sees the first delta.

        Raises:
            InsufficientStock: With data['line'] and data['item_code'] set
            InvalidQuantity: If a unit_cost < 0
            NotFound: If the location does not exist
        """
        ctx = cls.context(ctx)
        for index, line in enumerate(lines):
            if line.delta is None or line.delta != line.delta.quantize(QUANTITY_PLACES):
                raise InvalidQuantity(line=index)
            if line.unit_cost is not None:
                require_non_negative(line.unit_cost, COST_PLACES, line=index)

        with transaction.atomic():
            location.resolve()
            adjustment = StockAdjustment(code=code, date=date, user=ctx.user)
            adjustment.location = location
            adjustment.save()

            for index, line in enumerate(lines):
                before = LedgerQueries.current_stock(line.item, location)
                adjustment_line = StockAdjustmentLine.objects.create(
                    adjustment=adjustment,
                    item=line.item,
                    before_quantity=before,
                    adjustment_quantity=line.delta,
                    after_quantity=before + line.delta,
                    unit_cost=line.unit_cost,
                    reason=line.reason,
                )
                with line_errors(index, line.item):
                    BatchAllocator.adjust(
                        line.delta,
                        line.item,
                        location,
                        Reference.of(adjustment_line),
                        unit_cost=line.unit_cost,
                    )

            cls.confirm_number(adjustment.code, location)
            cls.log_created(adjustment, ctx, lines=len(lines), location=str(location))
            return adjustment


# ══════════════════════════════════════════════════════════════
# TRANSFERS
# ══════════════════════════════════════════════════════════════


class StockTransfers(DocumentService):
    document_type = 'stock_transfer'

    @classmethod
    def create(cls, ctx: ActingContext | None, code: str, date: date_type,
               source: Location, destination: Location,
               lines: list[TransferLineInput]) -> StockTransfer:
        """
        Move stock between two locations.

        Each line records both sides before and after the move.

        Raises:
            LedgerError('SAME_LOCATION'): If source == destination
            InsufficientStock: With data['line'] and data['item_code'] set
            InvalidQuantity: If a quantity <= 0
        """
        ctx = cls.context(ctx)
        if source == destination:
            raise LedgerError('SAME_LOCATION', location=str(source))
        for index, line in enumerate(lines):
            require_positive(line.quantity, line=index)

        with transaction.atomic():
            source.resolve()
            destination.resolve()
            transfer = StockTransfer(code=code, date=date, user=ctx.user)
            transfer.source = source
            transfer.destination = destination
            transfer.save()

            for index, line in enumerate(lines):
                transfer_line = StockTransferLine.objects.create(
                    transfer=transfer,
                    item=line.item,
                    quantity=line.quantity,
                    source_before_quantity=LedgerQueries.current_stock(line.item, source),
                    destination_before_quantity=LedgerQueries.current_stock(line.item, destination),
                )
                with line_errors(index, line.item):
                    BatchAllocator.transfer(
                        line.quantity,
                        line.item,
                        source,
                        destination,
                        Reference.of(transfer_line),
                    )
                transfer_line.source_after_quantity = LedgerQueries.current_stock(line.item, source)
                transfer_line.destination_after_quantity = LedgerQueries.current_stock(line.item, destination)
                transfer_line.save(update_fields=['source_after_quantity', 'destination_after_quantity'])

            cls.confirm_number(transfer.code, source)
            cls.log_created(
                transfer, ctx,
                lines=len(lines), source=str(source), destination=str(destination),
            )
            return transfer


# ══════════════════════════════════════════════════════════════
# AUDITS
# ══════════════════════════════════════════════════════════════


class StockAudits(DocumentService):
    """
    Physical counts.

    An audit snapshots the system quantity of every counted item when its
    lines are written. Nothing touches the ledger until lock(), which
    recounts the system quantity and posts the final discrepancy as an
    adjustment referencing the audit line.
    After that the audit is frozen.
    """

    document_type = 'stock_audit'

    @classmethod
    def create(cls, ctx: ActingContext | None, code: str, date: date_type,
               location: Location, lines: list[AuditLineInput]) -> StockAudit:
        ctx = cls.context(ctx)
        cls._validate(lines)

        with transaction.atomic():
            location.resolve()
            audit = StockAudit(code=code, date=date, user=ctx.user)
            audit.location = location
            audit.save()
            cls._write_lines(audit, lines)
            cls.confirm_number(audit.code, location)
            cls.log_created(audit, ctx, lines=len(lines), location=str(location))
            return audit

    @classmethod
    def update(cls, ctx: ActingContext | None, audit: StockAudit,
               lines: list[AuditLineInput], date: date_type | None = None) -> StockAudit:
        """
        Replace the counted lines. System quantities are read again.

        Raises:
            InvalidStatus: If the audit is locked
        """
        cls._validate(lines)

        with transaction.atomic():
            audit = cls._lock_open(audit)
            if date is not None:
                audit.date = date
                audit.save(update_fields=['date', 'updated_at'])
            audit.lines.all().delete()
            cls._write_lines(audit, lines)
            return audit

    @classmethod
    def destroy(cls, ctx: ActingContext | None, audit: StockAudit) -> None:
        """
        Raises:
            InvalidStatus: If the audit is locked
        """
        ctx = cls.context(ctx)
        with transaction.atomic():
            audit = cls._lock_open(audit)
            code, location = audit.code, audit.location
            audit.delete()
            cls.cancel_number(code, location)
            cls.log_destroyed(code, ctx)

    @classmethod
    def lock(cls, ctx: ActingContext | None, audit: StockAudit) -> StockAudit:
        """
        Bring stock to the counted quantities and freeze the audit.

        System quantities are read again under the batch lock, so movements
        made after the count do not leave stock away from it.

        Raises:
            InvalidStatus: If the audit is already locked
        """
        ctx = cls.context(ctx)
        with transaction.atomic():
            audit = cls._lock_open(audit)
            location = audit.location

            for index, line in enumerate(audit.lines.select_related('item')):
                locked = batches.lock_batches(line.item, location)
                line.system_quantity = sum((batch.quantity for batch in locked), Decimal('0'))
                line.discrepancy_quantity = line.physical_quantity - line.system_quantity
                line.save(update_fields=['system_quantity', 'discrepancy_quantity'])
                with line_errors(index, line.item):
                    BatchAllocator.adjust(
                        line.discrepancy_quantity,
                        line.item,
                        location,
                        Reference.of(line),
                    )

            audit.is_locked = True
            audit.locked_at = timezone.now()
            audit.save(update_fields=['is_locked', 'locked_at', 'updated_at'])

            logger.info(
                "document.stock_audit.locked",
                extra={
                    "code": audit.code,
                    "user": getattr(ctx.user, 'pk', None),
                    "location": str(location),
                },
            )
            return audit

    @classmethod
    def _lock_open(cls, audit: StockAudit) -> StockAudit:
        audit = DocumentService.lock(audit)
        if audit.is_locked:
            raise InvalidStatus(document=audit.code, status='locked')
        return audit

    @staticmethod
    def _validate(lines: list[AuditLineInput]):
        for index, line in enumerate(lines):
            require_non_negative(line.physical_quantity, line=index)

    @staticmethod
    def _write_lines(audit: StockAudit, lines: list[AuditLineInput]):
        location = audit.location
        for line in lines:
            system = LedgerQueries.current_stock(line.item, location)
            StockAuditLine.objects.create(
                audit=audit,
                item=line.item,
                system_quantity=system,
                physical_quantity=line.physical_quantity,
                discrepancy_quantity=line.physical_quantity - system,
                reason=line.reason,
            )
