"""
Status resolver — derives parent document status from its children.

Purchase and sales orders share one fulfillment rule, parameterised by
how to read the ordered and fulfilled quantity of a line. Invoice
payment status is read from the stored amounts. Every resolver is
idempotent: running it twice yields the same status and no extra writes.

Usage:
    StatusResolver.recompute(order.pk, DocumentKind.PURCHASE_ORDER)
"""

import logging
from decimal import Decimal
from enum import Enum
from operator import attrgetter
from typing import Callable, Iterable

from django.apps import apps
from django.core.exceptions import ImproperlyConfigured
from django.db import transaction
from django.db.models import Sum
from django.db.models.functions import Coalesce

from ledgerman.exceptions import NotFound
from ledgerman.models.enums import (
    DocumentKind,
    InvoicingStatus,
    PaymentStatus,
    PurchaseOrderStatus,
    SalesOrderStatus,
)

logger = logging.getLogger('ledgerman')


class FulfillmentState(str, Enum):
    """Estado de atendimento de um documento."""

    NONE = "none"
    PARTIAL = "partial"
    COMPLETE = "complete"


PURCHASE_ORDER_STATUS = {
    FulfillmentState.NONE: PurchaseOrderStatus.PENDING,
    FulfillmentState.PARTIAL: PurchaseOrderStatus.PARTIALLY_RECEIVED,
    FulfillmentState.COMPLETE: PurchaseOrderStatus.RECEIVED,
}

SALES_ORDER_STATUS = {
    FulfillmentState.NONE: SalesOrderStatus.PENDING,
    FulfillmentState.PARTIAL: SalesOrderStatus.PROCESSED,
    FulfillmentState.COMPLETE: SalesOrderStatus.COMPLETED,
}


def resolve_fulfillment(lines: Iterable, ordered: Callable, fulfilled: Callable) -> FulfillmentState:
    """
    Fulfillment state of a set of lines.

    COMPLETE when there is at least one line and every line is fulfilled
    up to its ordered quantity; PARTIAL when any line has something
    fulfilled; NONE otherwise.
    """
    any_line = False
    complete = True
    started = False
    for line in lines:
        any_line = True
        done = fulfilled(line)
        if done > 0:
            started = True
        if done < ordered(line):
            complete = False

    if any_line and complete:
        return FulfillmentState.COMPLETE
    if started:
        return FulfillmentState.PARTIAL
    return FulfillmentState.NONE


def payment_status(remaining: Decimal, has_payments: bool) -> PaymentStatus:
    """Paid once nothing remains; partial once anything was paid."""
    if remaining <= 0:
        return PaymentStatus.PAID
    if has_payments:
        return PaymentStatus.PARTIALLY_PAID
    return PaymentStatus.UNPAID


class StatusResolver:
    """Recompute and persist document status."""

    @classmethod
    def purchase_order(cls, order) -> str:
        lines = order.lines.annotate(
            received=Coalesce(Sum('receipt_lines__received_quantity'), Decimal('0'))
        )
        state = resolve_fulfillment(lines, attrgetter('quantity'), attrgetter('received'))
        return cls._store(order, 'status', PURCHASE_ORDER_STATUS[state])

    @classmethod
    def sales_order(cls, order) -> str:
        if order.status == SalesOrderStatus.CANCELLED:
            return order.status
        lines = order.lines.annotate(
            shipped=Coalesce(Sum('waybill_lines__quantity'), Decimal('0'))
        )
        state = resolve_fulfillment(lines, attrgetter('quantity'), attrgetter('shipped'))
        return cls._store(order, 'status', SALES_ORDER_STATUS[state])

    @classmethod
    def goods_receipt(cls, receipt) -> str:
        invoiced = receipt.purchase_invoices.exists()
        status = InvoicingStatus.INVOICED if invoiced else InvoicingStatus.NOT_INVOICED
        return cls._store(receipt, 'status', status)

    @classmethod
    def waybill(cls, waybill) -> str:
        invoiced = waybill.sales_invoices.exists()
        status = InvoicingStatus.INVOICED if invoiced else InvoicingStatus.NOT_INVOICED
        return cls._store(waybill, 'status', status)

    @classmethod
    def purchase_invoice(cls, invoice) -> str:
        status = payment_status(invoice.remaining_amount, invoice.payments.exists())
        return cls._store(invoice, 'status', status)

    @classmethod
    def sales_invoice(cls, invoice) -> str:
        status = payment_status(invoice.remaining_amount, invoice.payments.exists())
        return cls._store(invoice, 'paid_status', status)

    @classmethod
    def recompute(cls, document_id: int, document_kind: DocumentKind) -> str:
        """
        Recompute the status of any parent document.

        Raises:
            NotFound: If the document does not exist
        """
        kind = DocumentKind(document_kind)
        label, method = DOCUMENT_RESOLVERS[kind]
        model = apps.get_model(label)

        with transaction.atomic():
            try:
                document = model.objects.select_for_update().get(pk=document_id)
            except model.DoesNotExist:
                raise NotFound(document=f"{kind.value}:{document_id}")
            return getattr(cls, method)(document)

    @staticmethod
    def _store(document, field: str, status) -> str:
        current = getattr(document, field)
        if current != status:
            setattr(document, field, status)
            document.save(update_fields=[field, 'updated_at'])
            logger.info(
                "document.status",
                extra={
                    "document": document._meta.model_name,
                    "code": document.code,
                    "from": str(current),
                    "to": str(status),
                },
            )
        return str(status)


DOCUMENT_RESOLVERS = {
    DocumentKind.PURCHASE_ORDER: ('ledgerman.PurchaseOrder', 'purchase_order'),
    DocumentKind.GOODS_RECEIPT: ('ledgerman.GoodsReceipt', 'goods_receipt'),
    DocumentKind.PURCHASE_INVOICE: ('ledgerman.PurchaseInvoice', 'purchase_invoice'),
    DocumentKind.SALES_ORDER: ('ledgerman.SalesOrder', 'sales_order'),
    DocumentKind.WAYBILL: ('ledgerman.Waybill', 'waybill'),
    DocumentKind.SALES_INVOICE: ('ledgerman.SalesInvoice', 'sales_invoice'),
}

_missing = [kind.value for kind in DocumentKind if kind not in DOCUMENT_RESOLVERS]
if _missing:
    raise ImproperlyConfigured(f"DocumentKind sem resolvedor: {', '.join(_missing)}")
