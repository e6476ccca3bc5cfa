"""
Tests for document services.
"""

from decimal import Decimal

import pytest

from ledgerman import ledger
from ledgerman.context import ActingContext
from ledgerman.documents import (
    AdjustmentLineInput,
    AuditLineInput,
    GoodsReceipts,
    OrderLineInput,
    PurchaseInvoicePayments,
    PurchaseInvoices,
    PurchaseOrders,
    ReceiptLineInput,
    ReceiptOrderInput,
    SalesInvoicePayments,
    SalesInvoices,
    SalesOrders,
    StockAdjustments,
    StockAudits,
    StockTransfers,
    TransferLineInput,
    WaybillLineInput,
    Waybills,
)
from ledgerman.exceptions import (
    DocumentError,
    InsufficientStock,
    InvalidQuantity,
    InvalidStatus,
    LedgerError,
)
from ledgerman.location import Reference
from ledgerman.models import (
    GoodsReceipt,
    InvoicingStatus,
    MovementKind,
    PaymentStatus,
    PurchaseOrder,
    PurchaseOrderStatus,
    SalesOrderStatus,
    StockAudit,
    StockMovement,
)


pytestmark = pytest.mark.django_db


class RecordingNumbering:
    """Numbering backend that remembers every call."""

    calls = []

    def confirm(self, document_type, code, location):
        self.calls.append(('confirm', document_type, code))

    def cancel(self, document_type, code, location):
        self.calls.append(('cancel', document_type, code))


@pytest.fixture
def recording_numbering(settings):
    RecordingNumbering.calls = []
    settings.LEDGERMAN = {'DOCUMENT_NUMBERING': 'ledgerman.tests.test_documents.RecordingNumbering'}
    return RecordingNumbering


@pytest.fixture
def purchase_order(ctx, branch, item, other_item, today):
    """10 of item at 2.00, 4 of other_item at 5.00."""
    return PurchaseOrders.create(ctx, 'PC-0001', today, branch, 'Distribuidora Sul', [
        OrderLineInput(item, Decimal('10'), Decimal('2.00')),
        OrderLineInput(other_item, Decimal('4'), Decimal('5.00')),
    ])


@pytest.fixture
def sales_order(ctx, branch, item, today):
    """3 of item."""
    return SalesOrders.create(ctx, 'PV-0001', today, branch, 'Maria', [
        OrderLineInput(item, Decimal('3'), Decimal('4.00')),
    ])


def receive(ctx, code, today, armazem, order, *quantities):
    lines = [
        ReceiptLineInput(line, Decimal(qty))
        for line, qty in zip(order.lines.all(), quantities)
    ]
    return GoodsReceipts.create(ctx, code, today, armazem, order.supplier, [ReceiptOrderInput(order, lines)])


def ship(ctx, code, today, loja, order, quantity):
    line = order.lines.get()
    return Waybills.create(ctx, code, today, order, loja, [WaybillLineInput(line, Decimal(quantity))])


class TestPurchaseOrders:

    def test_create(self, purchase_order, user):
        assert purchase_order.status == PurchaseOrderStatus.PENDING
        assert purchase_order.grand_total == Decimal('40.00')
        assert purchase_order.lines.count() == 2
        assert purchase_order.user == user

    def test_create_invalid_line(self, ctx, branch, item, today):
        with pytest.raises(InvalidQuantity):
            PurchaseOrders.create(ctx, 'PC-X', today, branch, 'F', [
                OrderLineInput(item, Decimal('0'), Decimal('1')),
            ])
        assert not PurchaseOrder.objects.exists()

    def test_destroy_pending(self, ctx, purchase_order):
        PurchaseOrders.destroy(ctx, purchase_order)

        assert not PurchaseOrder.objects.exists()

    def test_destroy_received_forbidden(self, ctx, purchase_order, armazem, today):
        receive(ctx, 'REC-0001', today, armazem, purchase_order, '10', '4')

        with pytest.raises(InvalidStatus):
            PurchaseOrders.destroy(ctx, purchase_order)


class TestGoodsReceipts:

    def test_receipt_creates_batches_at_order_price(self, ctx, purchase_order, item, armazem, today):
        """Each line becomes a batch costed at its order line unit price."""
        receipt = receive(ctx, 'REC-0001', today, armazem, purchase_order, '5', '4')

        assert ledger.current_stock(item, armazem) == Decimal('5')
        first = receipt.lines.first()
        assert first.batch.unit_cost == Decimal('2.00')
        assert first.unit_cost == Decimal('2.00')
        assert ledger.movements(reference=Reference.of(first)).get().kind == MovementKind.IN

    def test_partial_then_complete(self, ctx, purchase_order, armazem, today):
        """10 ordered: 5 received = partial; 5 more = received."""
        receive(ctx, 'REC-0001', today, armazem, purchase_order, '5', '0.5')
        purchase_order.refresh_from_db()
        assert purchase_order.status == PurchaseOrderStatus.PARTIALLY_RECEIVED

        receive(ctx, 'REC-0002', today, armazem, purchase_order, '5', '3.5')
        purchase_order.refresh_from_db()
        assert purchase_order.status == PurchaseOrderStatus.RECEIVED

    def test_line_from_other_order(self, ctx, purchase_order, branch, item, armazem, today):
        other = PurchaseOrders.create(ctx, 'PC-0002', today, branch, 'F', [
            OrderLineInput(item, Decimal('1'), Decimal('1')),
        ])

        with pytest.raises(DocumentError):
            GoodsReceipts.create(ctx, 'REC-0001', today, armazem, 'F', [
                ReceiptOrderInput(purchase_order, [ReceiptLineInput(other.lines.get(), Decimal('1'))]),
            ])
        assert not GoodsReceipt.objects.exists()

    def test_negative_line_rejects_receipt(self, ctx, purchase_order, item, armazem, today):
        """A bad line aborts the whole receipt, earlier lines included."""
        with pytest.raises(InvalidQuantity):
            receive(ctx, 'REC-0001', today, armazem, purchase_order, '5', '-1')

        assert not GoodsReceipt.objects.exists()
        assert ledger.current_stock(item, armazem) == Decimal('0')
        purchase_order.refresh_from_db()
        assert purchase_order.status == PurchaseOrderStatus.PENDING

    def test_zero_lines_stay_on_receipt(self, ctx, purchase_order, item, other_item, armazem, today):
        """Ordered (10, 4): receiving (10, 0) then (0, 4) completes the order."""
        first = receive(ctx, 'REC-0001', today, armazem, purchase_order, '10', '0')
        purchase_order.refresh_from_db()
        assert purchase_order.status == PurchaseOrderStatus.PARTIALLY_RECEIVED
        skipped = first.lines.get(received_quantity=0)
        assert skipped.batch is None
        assert not ledger.movements(reference=Reference.of(skipped)).exists()
        assert ledger.current_stock(other_item, armazem) == Decimal('0')

        receive(ctx, 'REC-0002', today, armazem, purchase_order, '0', '4')
        purchase_order.refresh_from_db()
        assert purchase_order.status == PurchaseOrderStatus.RECEIVED
        assert ledger.current_stock(item, armazem) == Decimal('10')
        assert ledger.current_stock(other_item, armazem) == Decimal('4')

    def test_ordered_ten_and_five(self, ctx, branch, item, other_item, armazem, today):
        order = PurchaseOrders.create(ctx, 'PC-0002', today, branch, 'F', [
            OrderLineInput(item, Decimal('10'), Decimal('1')),
            OrderLineInput(other_item, Decimal('5'), Decimal('1')),
        ])

        receive(ctx, 'REC-0001', today, armazem, order, '10', '0')
        order.refresh_from_db()
        assert order.status == PurchaseOrderStatus.PARTIALLY_RECEIVED

        receive(ctx, 'REC-0002', today, armazem, order, '0', '5')
        order.refresh_from_db()
        assert order.status == PurchaseOrderStatus.RECEIVED

    def test_quantity_finer_than_stored_precision(self, ctx, purchase_order, armazem, today):
        with pytest.raises(InvalidQuantity):
            receive(ctx, 'REC-0001', today, armazem, purchase_order, '0.0004', '1')

        assert not GoodsReceipt.objects.exists()


class TestPurchaseInvoices:

    @pytest.fixture
    def receipt(self, ctx, purchase_order, armazem, today):
        return receive(ctx, 'REC-0001', today, armazem, purchase_order, '10', '4')

    def test_attach_marks_invoiced(self, ctx, receipt, today):
        invoice = PurchaseInvoices.create(ctx, 'FC-0001', today, 'F', Decimal('40.00'), [receipt])

        receipt.refresh_from_db()
        assert receipt.status == InvoicingStatus.INVOICED
        assert invoice.remaining_amount == Decimal('40.00')
        assert invoice.status == PaymentStatus.UNPAID

    def test_receipt_invoiced_once(self, ctx, receipt, today):
        PurchaseInvoices.create(ctx, 'FC-0001', today, 'F', Decimal('40.00'), [receipt])

        with pytest.raises(DocumentError):
            PurchaseInvoices.create(ctx, 'FC-0002', today, 'F', Decimal('40.00'), [receipt])

    def test_update_detaches(self, ctx, receipt, today):
        invoice = PurchaseInvoices.create(ctx, 'FC-0001', today, 'F', Decimal('40.00'), [receipt])

        PurchaseInvoices.update(ctx, invoice, goods_receipts=[])

        receipt.refresh_from_db()
        assert receipt.status == InvoicingStatus.NOT_INVOICED

    def test_update_total_keeps_payments(self, ctx, receipt, today):
        invoice = PurchaseInvoices.create(ctx, 'FC-0001', today, 'F', Decimal('40.00'), [receipt])
        PurchaseInvoicePayments.create(ctx, invoice, 'PG-0001', today, Decimal('10.00'))

        invoice = PurchaseInvoices.update(ctx, invoice, grand_total=Decimal('50.00'))

        assert invoice.remaining_amount == Decimal('40.00')
        assert invoice.status == PaymentStatus.PARTIALLY_PAID

    def test_destroy_releases_receipts(self, ctx, receipt, today):
        invoice = PurchaseInvoices.create(ctx, 'FC-0001', today, 'F', Decimal('40.00'), [receipt])

        PurchaseInvoices.destroy(ctx, invoice)

        receipt.refresh_from_db()
        assert receipt.status == InvoicingStatus.NOT_INVOICED

    def test_destroy_paid_forbidden(self, ctx, receipt, today):
        invoice = PurchaseInvoices.create(ctx, 'FC-0001', today, 'F', Decimal('40.00'), [receipt])
        PurchaseInvoicePayments.create(ctx, invoice, 'PG-0001', today, Decimal('10.00'))

        with pytest.raises(InvalidStatus):
            PurchaseInvoices.destroy(ctx, invoice)

    def test_payments(self, ctx, receipt, today):
        invoice = PurchaseInvoices.create(ctx, 'FC-0001', today, 'F', Decimal('40.00'), [receipt])

        PurchaseInvoicePayments.create(ctx, invoice, 'PG-0001', today, Decimal('15.00'))
        invoice.refresh_from_db()
        assert invoice.remaining_amount == Decimal('25.00')
        assert invoice.status == PaymentStatus.PARTIALLY_PAID

        PurchaseInvoicePayments.create(ctx, invoice, 'PG-0002', today, Decimal('25.00'))
        invoice.refresh_from_db()
        assert invoice.remaining_amount == Decimal('0')
        assert invoice.status == PaymentStatus.PAID

    def test_payment_must_be_positive(self, ctx, receipt, today):
        invoice = PurchaseInvoices.create(ctx, 'FC-0001', today, 'F', Decimal('40.00'), [receipt])

        with pytest.raises(InvalidQuantity):
            PurchaseInvoicePayments.create(ctx, invoice, 'PG-0001', today, Decimal('0'))
        with pytest.raises(InvalidQuantity):
            PurchaseInvoicePayments.create(ctx, invoice, 'PG-0001', today, Decimal('10.001'))


class TestSalesOrders:

    def test_cancel_pending(self, ctx, sales_order):
        order = SalesOrders.cancel(ctx, sales_order)

        assert order.status == SalesOrderStatus.CANCELLED

    def test_cancel_processed_forbidden(self, ctx, sales_order, item, loja, ref, today):
        ledger.receive(Decimal('3'), item, loja, Decimal('1'), ref())
        ship(ctx, 'GR-0001', today, loja, sales_order, '1')

        with pytest.raises(InvalidStatus):
            SalesOrders.cancel(ctx, sales_order)


class TestWaybills:

    def test_waybill_issues_fifo(self, ctx, sales_order, item, loja, ref, today):
        ledger.receive(Decimal('2'), item, loja, Decimal('1'), ref())
        ledger.receive(Decimal('2'), item, loja, Decimal('2'), ref())

        waybill = ship(ctx, 'GR-0001', today, loja, sales_order, '3')

        assert ledger.current_stock(item, loja) == Decimal('1')
        moves = ledger.movements(reference=Reference.of(waybill.lines.get()))
        assert [m.after_quantity for m in moves] == [Decimal('0'), Decimal('1')]

    def test_partial_then_complete(self, ctx, sales_order, item, loja, ref, today):
        ledger.receive(Decimal('10'), item, loja, Decimal('1'), ref())

        ship(ctx, 'GR-0001', today, loja, sales_order, '1')
        sales_order.refresh_from_db()
        assert sales_order.status == SalesOrderStatus.PROCESSED

        ship(ctx, 'GR-0002', today, loja, sales_order, '2')
        sales_order.refresh_from_db()
        assert sales_order.status == SalesOrderStatus.COMPLETED

    def test_insufficient_names_the_line(self, ctx, sales_order, item, loja, ref, today):
        """The error says which line lacked stock; nothing is written."""
        ledger.receive(Decimal('2'), item, loja, Decimal('1'), ref())

        with pytest.raises(InsufficientStock) as exc:
            ship(ctx, 'GR-0001', today, loja, sales_order, '3')

        assert exc.value.data['line'] == 0
        assert exc.value.data['item_code'] == item.code
        assert ledger.current_stock(item, loja) == Decimal('2')
        sales_order.refresh_from_db()
        assert sales_order.status == SalesOrderStatus.PENDING

    def test_defaults_to_acting_branch(self, ctx, sales_order, item, loja, ref, today):
        ledger.receive(Decimal('3'), item, loja, Decimal('1'), ref())

        waybill = ship(ctx, 'GR-0001', today, None, sales_order, '3')

        assert waybill.location == loja

    def test_without_location(self, sales_order, today):
        with pytest.raises(DocumentError):
            ship(ActingContext(), 'GR-0001', today, None, sales_order, '1')

    def test_cancelled_order(self, ctx, sales_order, loja, today):
        SalesOrders.cancel(ctx, sales_order)

        with pytest.raises(InvalidStatus):
            ship(ctx, 'GR-0001', today, loja, sales_order, '1')

    def test_zero_line_skips_ledger(self, ctx, sales_order, item, loja, today):
        """A line shipped at zero needs no stock and moves nothing."""
        waybill = ship(ctx, 'GR-0001', today, loja, sales_order, '0')

        line = waybill.lines.get()
        assert line.quantity == Decimal('0')
        assert not ledger.movements(reference=Reference.of(line)).exists()
        sales_order.refresh_from_db()
        assert sales_order.status == SalesOrderStatus.PENDING

    def test_negative_line(self, ctx, sales_order, item, loja, ref, today):
        ledger.receive(Decimal('3'), item, loja, Decimal('1'), ref())

        with pytest.raises(InvalidQuantity):
            ship(ctx, 'GR-0001', today, loja, sales_order, '-1')
        assert ledger.current_stock(item, loja) == Decimal('3')


class TestSalesInvoices:

    @pytest.fixture
    def waybill(self, ctx, sales_order, item, loja, ref, today):
        ledger.receive(Decimal('3'), item, loja, Decimal('1'), ref())
        return ship(ctx, 'GR-0001', today, loja, sales_order, '3')

    def test_payment_sequence(self, ctx, waybill, today):
        """Invoice of 100: pay 40 then 60."""
        invoice = SalesInvoices.create(ctx, 'FV-0001', today, Decimal('100.00'), [waybill])
        waybill.refresh_from_db()
        assert waybill.status == InvoicingStatus.INVOICED
        assert invoice.paid_status == PaymentStatus.UNPAID

        SalesInvoicePayments.create(ctx, invoice, 'RC-0001', today, Decimal('40.00'))
        invoice.refresh_from_db()
        assert invoice.paid_amount == Decimal('40.00')
        assert invoice.remaining_amount == Decimal('60.00')
        assert invoice.paid_status == PaymentStatus.PARTIALLY_PAID

        SalesInvoicePayments.create(ctx, invoice, 'RC-0002', today, Decimal('60.00'))
        invoice.refresh_from_db()
        assert invoice.paid_amount == Decimal('100.00')
        assert invoice.remaining_amount == Decimal('0')
        assert invoice.paid_status == PaymentStatus.PAID

    def test_destroy_releases_waybills(self, ctx, waybill, today):
        invoice = SalesInvoices.create(ctx, 'FV-0001', today, Decimal('100.00'), [waybill])

        SalesInvoices.destroy(ctx, invoice)

        waybill.refresh_from_db()
        assert waybill.status == InvoicingStatus.NOT_INVOICED

    def test_update_swaps_waybills(self, ctx, waybill, sales_order, item, loja, ref, today):
        invoice = SalesInvoices.create(ctx, 'FV-0001', today, Decimal('100.00'), [waybill])
        ledger.receive(Decimal('1'), item, loja, Decimal('1'), ref())
        other = Waybills.create(ctx, 'GR-0002', today, sales_order, loja, [
            WaybillLineInput(sales_order.lines.get(), Decimal('1')),
        ])

        SalesInvoices.update(ctx, invoice, waybills=[other])

        waybill.refresh_from_db()
        other.refresh_from_db()
        assert waybill.status == InvoicingStatus.NOT_INVOICED
        assert other.status == InvoicingStatus.INVOICED


class TestStockAdjustments:

    def test_lines_store_before_and_after(self, ctx, item, other_item, loja, ref, today):
        ledger.receive(Decimal('10'), item, loja, Decimal('1'), ref())

        adjustment = StockAdjustments.create(ctx, 'AJ-0001', today, loja, [
            AdjustmentLineInput(item, Decimal('-5'), reason='Quebra'),
            AdjustmentLineInput(other_item, Decimal('8'), unit_cost=Decimal('3')),
        ])

        first, second = adjustment.lines.all()
        assert (first.before_quantity, first.after_quantity) == (Decimal('10'), Decimal('5'))
        assert (second.before_quantity, second.after_quantity) == (Decimal('0'), Decimal('8'))
        assert ledger.current_stock(item, loja) == Decimal('5')
        assert ledger.current_stock(other_item, loja) == Decimal('8')

    def test_insufficient_rolls_back_all_lines(self, ctx, item, other_item, loja, ref, today):
        ledger.receive(Decimal('1'), other_item, loja, Decimal('1'), ref())

        with pytest.raises(InsufficientStock) as exc:
            StockAdjustments.create(ctx, 'AJ-0001', today, loja, [
                AdjustmentLineInput(item, Decimal('4'), unit_cost=Decimal('1')),
                AdjustmentLineInput(other_item, Decimal('-2')),
            ])

        assert exc.value.data['line'] == 1
        assert ledger.current_stock(item, loja) == Decimal('0')


class TestStockTransfers:

    def test_lines_store_both_sides(self, ctx, item, loja, armazem, ref, today):
        ledger.receive(Decimal('10'), item, armazem, Decimal('2'), ref())

        transfer = StockTransfers.create(ctx, 'TR-0001', today, armazem, loja, [
            TransferLineInput(item, Decimal('4')),
        ])

        line = transfer.lines.get()
        assert (line.source_before_quantity, line.source_after_quantity) == (Decimal('10'), Decimal('6'))
        assert (line.destination_before_quantity, line.destination_after_quantity) == (Decimal('0'), Decimal('4'))
        assert transfer.source == armazem
        assert transfer.destination == loja

    def test_same_location(self, ctx, item, loja, today):
        with pytest.raises(LedgerError) as exc:
            StockTransfers.create(ctx, 'TR-0001', today, loja, loja, [TransferLineInput(item, Decimal('1'))])

        assert exc.value.code == 'SAME_LOCATION'


class TestStockAudits:

    @pytest.fixture
    def audit(self, ctx, item, loja, ref, today):
        ledger.receive(Decimal('10'), item, loja, Decimal('1'), ref())
        return StockAudits.create(ctx, 'INV-0001', today, loja, [
            AuditLineInput(item, Decimal('8'), reason='Contagem mensal'),
        ])

    def test_create_snapshots_system_quantity(self, audit, item, loja):
        line = audit.lines.get()

        assert line.system_quantity == Decimal('10')
        assert line.discrepancy_quantity == Decimal('-2')
        assert ledger.current_stock(item, loja) == Decimal('10')

    def test_lock_posts_discrepancies(self, ctx, audit, item, loja):
        StockAudits.lock(ctx, audit)

        audit.refresh_from_db()
        assert audit.is_locked
        assert audit.locked_at is not None
        assert ledger.current_stock(item, loja) == Decimal('8')
        move = ledger.movements(reference=Reference.of(audit.lines.get())).get()
        assert move.kind == MovementKind.ADJUSTMENT_DECREASE

    def test_lock_recounts_after_later_movements(self, ctx, audit, item, loja, ref):
        """Counted 8 of 10, then 3 leave before lock: lock adds 1 to reach 8."""
        ledger.issue(Decimal('3'), item, loja, ref())

        StockAudits.lock(ctx, audit)

        assert ledger.current_stock(item, loja) == Decimal('8')
        line = audit.lines.get()
        assert line.system_quantity == Decimal('7')
        assert line.discrepancy_quantity == Decimal('1')
        move = ledger.movements(reference=Reference.of(line)).get()
        assert move.kind == MovementKind.ADJUSTMENT_INCREASE

    def test_update_recounts(self, ctx, audit, item):
        StockAudits.update(ctx, audit, [AuditLineInput(item, Decimal('12'))])

        assert audit.lines.get().discrepancy_quantity == Decimal('2')

    def test_locked_audit_is_frozen(self, ctx, audit, item):
        StockAudits.lock(ctx, audit)
        moves = StockMovement.objects.count()

        with pytest.raises(InvalidStatus):
            StockAudits.lock(ctx, audit)
        with pytest.raises(InvalidStatus):
            StockAudits.update(ctx, audit, [AuditLineInput(item, Decimal('1'))])
        with pytest.raises(InvalidStatus):
            StockAudits.destroy(ctx, audit)

        assert StockMovement.objects.count() == moves

    def test_destroy_open_audit(self, ctx, audit):
        StockAudits.destroy(ctx, audit)

        assert not StockAudit.objects.exists()


class TestNumbering:
    """Numbering backend runs only after commit."""

    def test_confirm_after_commit(self, recording_numbering, django_capture_on_commit_callbacks,
                                  ctx, branch, item, today):
        with django_capture_on_commit_callbacks(execute=True):
            PurchaseOrders.create(ctx, 'PC-0001', today, branch, 'F', [
                OrderLineInput(item, Decimal('1'), Decimal('1')),
            ])

        assert recording_numbering.calls == [('confirm', 'purchase_order', 'PC-0001')]

    def test_nothing_on_failure(self, recording_numbering, django_capture_on_commit_callbacks,
                                ctx, sales_order, loja, today):
        with django_capture_on_commit_callbacks(execute=True):
            with pytest.raises(InsufficientStock):
                ship(ctx, 'GR-0001', today, loja, sales_order, '1')

        assert recording_numbering.calls == []

    def test_cancel_on_destroy(self, recording_numbering, django_capture_on_commit_callbacks,
                               ctx, branch, item, today):
        order = PurchaseOrders.create(ctx, 'PC-0001', today, branch, 'F', [])

        with django_capture_on_commit_callbacks(execute=True):
            PurchaseOrders.destroy(ctx, order)

        assert recording_numbering.calls == [('cancel', 'purchase_order', 'PC-0001')]
