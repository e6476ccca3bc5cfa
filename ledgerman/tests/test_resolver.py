"""
Tests for status resolution.
"""

from decimal import Decimal
from operator import attrgetter
from types import SimpleNamespace

import pytest

from ledgerman import ledger
from ledgerman.exceptions import NotFound
from ledgerman.models import (
    DocumentKind,
    PaymentStatus,
    PurchaseOrder,
    PurchaseOrderStatus,
    SalesOrder,
    SalesOrderStatus,
)
from ledgerman.services.resolver import FulfillmentState, payment_status, resolve_fulfillment


def lines(*pairs):
    return [SimpleNamespace(ordered=Decimal(o), done=Decimal(d)) for o, d in pairs]


def state(*pairs):
    return resolve_fulfillment(lines(*pairs), attrgetter('ordered'), attrgetter('done'))


class TestResolveFulfillment:
    """Shared rule for purchase and sales orders."""

    def test_empty_document_is_none(self):
        assert state() == FulfillmentState.NONE

    def test_nothing_fulfilled(self):
        assert state(('10', '0'), ('5', '0')) == FulfillmentState.NONE

    def test_some_fulfilled(self):
        assert state(('10', '5')) == FulfillmentState.PARTIAL

    def test_one_line_complete_other_untouched(self):
        assert state(('10', '10'), ('5', '0')) == FulfillmentState.PARTIAL

    def test_all_complete(self):
        assert state(('10', '10'), ('5', '5')) == FulfillmentState.COMPLETE

    def test_over_fulfilled_counts_as_complete(self):
        assert state(('10', '12')) == FulfillmentState.COMPLETE


class TestPaymentStatus:

    def test_unpaid(self):
        assert payment_status(Decimal('100'), has_payments=False) == PaymentStatus.UNPAID

    def test_partially_paid(self):
        assert payment_status(Decimal('60'), has_payments=True) == PaymentStatus.PARTIALLY_PAID

    def test_paid(self):
        assert payment_status(Decimal('0'), has_payments=True) == PaymentStatus.PAID

    def test_overpaid(self):
        assert payment_status(Decimal('-5'), has_payments=True) == PaymentStatus.PAID


@pytest.mark.django_db
class TestRecomputeStatus:
    """Tests for ledger.recompute_status()."""

    def test_purchase_order_without_lines_stays_pending(self, branch, today):
        order = PurchaseOrder.objects.create(code='PC-1', date=today, branch=branch, supplier='F')

        assert ledger.recompute_status(order.pk, DocumentKind.PURCHASE_ORDER) == PurchaseOrderStatus.PENDING

    def test_recompute_corrects_stale_status(self, branch, today):
        """A wrong stored status is replaced by the derived one."""
        order = PurchaseOrder.objects.create(
            code='PC-1', date=today, branch=branch, supplier='F',
            status=PurchaseOrderStatus.RECEIVED,
        )

        ledger.recompute_status(order.pk, DocumentKind.PURCHASE_ORDER)

        order.refresh_from_db()
        assert order.status == PurchaseOrderStatus.PENDING

    def test_cancelled_sales_order_untouched(self, branch, today):
        order = SalesOrder.objects.create(
            code='PV-1', date=today, branch=branch, status=SalesOrderStatus.CANCELLED,
        )

        assert ledger.recompute_status(order.pk, 'sales_order') == SalesOrderStatus.CANCELLED

    def test_missing_document(self, db):
        with pytest.raises(NotFound):
            ledger.recompute_status(9999, DocumentKind.WAYBILL)

    def test_unknown_kind(self, db):
        with pytest.raises(ValueError):
            ledger.recompute_status(1, 'quote')
