"""
Document service base — shared plumbing for document operations.

Every document operation runs in one transaction.atomic(). Ledger
writes happen per line inside it; numbering is confirmed only after the
transaction commits.
"""

import logging
from contextlib import contextmanager
from decimal import Decimal

from django.db import transaction

from ledgerman.adapters.numbering import get_document_numbering
from ledgerman.context import ActingContext
from ledgerman.exceptions import InsufficientStock, InvalidQuantity, NotFound
from ledgerman.models.batch import COST_PLACES, QUANTITY_PLACES  # noqa: F401

logger = logging.getLogger('ledgerman')

MONEY_PLACES = Decimal('0.01')


@contextmanager
def line_errors(index: int, item):
    """Name the failing line on InsufficientStock before it propagates."""
    try:
        yield
    except InsufficientStock as e:
        e.data.setdefault('line', index)
        e.data.setdefault('item_code', item.code)
        raise


def _fits(value: Decimal, places: Decimal) -> bool:
    return value == value.quantize(places)


def require_positive(value: Decimal, places: Decimal = QUANTITY_PLACES, **context):
    """Reject values <= 0 or finer than places."""
    if value is None or value <= 0 or not _fits(value, places):
        raise InvalidQuantity(requested=value, **context)


def require_non_negative(value: Decimal, places: Decimal = QUANTITY_PLACES, **context):
    if value is None or value < 0 or not _fits(value, places):
        raise InvalidQuantity(requested=value, **context)


def line_total(lines, quantity: str = 'quantity', price: str = 'unit_price') -> Decimal:
    total = sum(
        (getattr(line, quantity) * getattr(line, price) for line in lines),
        Decimal('0'),
    )
    return total.quantize(MONEY_PLACES)


class DocumentService:
    """Base for document services. Subclasses set document_type."""

    document_type: str = ''

    @staticmethod
    def context(ctx: ActingContext | None) -> ActingContext:
        return ctx if ctx is not None else ActingContext()

    @staticmethod
    def lock(document):
        """Re-read a document with a row lock. Must run inside atomic()."""
        model = type(document)
        try:
            return model.objects.select_for_update().get(pk=document.pk)
        except model.DoesNotExist:
            raise NotFound(document=f"{model._meta.model_name}:{document.pk}")

    @classmethod
    def confirm_number(cls, code: str, location=None):
        document_type = cls.document_type
        transaction.on_commit(
            lambda: get_document_numbering().confirm(document_type, code, location)
        )

    @classmethod
    def cancel_number(cls, code: str, location=None):
        document_type = cls.document_type
        transaction.on_commit(
            lambda: get_document_numbering().cancel(document_type, code, location)
        )

    @classmethod
    def log_created(cls, document, ctx: ActingContext, **extra):
        logger.info(
            f"document.{cls.document_type}.created",
            extra={
                "code": document.code,
                "user": getattr(ctx.user, 'pk', None),
                **extra,
            },
        )

    @classmethod
    def log_destroyed(cls, code: str, ctx: ActingContext, event: str = "destroyed"):
        logger.info(
            f"document.{cls.document_type}.{event}",
            extra={"code": code, "user": getattr(ctx.user, 'pk', None)},
        )
