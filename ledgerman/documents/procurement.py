"""
Procurement document services.

    PurchaseOrders            create, destroy (only while pending)
    GoodsReceipts             create: receive every line into the ledger
    PurchaseInvoices          create, update, destroy: link goods receipts
    PurchaseInvoicePayments   create: reduce the invoice balance
"""

from dataclasses import dataclass, field
from datetime import date as date_type
from decimal import Decimal

from django.db import transaction

from ledgerman.context import ActingContext
from ledgerman.documents.base import (
    COST_PLACES,
    MONEY_PLACES,
    DocumentService,
    line_total,
    require_non_negative,
    require_positive,
)
from ledgerman.exceptions import DocumentError, InvalidStatus
from ledgerman.location import Location, Reference
from ledgerman.models.enums import DocumentKind, PurchaseOrderStatus
from ledgerman.models.procurement import (
    GoodsReceipt,
    GoodsReceiptLine,
    PurchaseInvoice,
    PurchaseInvoicePayment,
    PurchaseOrder,
    PurchaseOrderLine,
)
from ledgerman.services.allocator import BatchAllocator
from ledgerman.services.resolver import StatusResolver


# ══════════════════════════════════════════════════════════════
# INPUTS
# ══════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class OrderLineInput:
    """One ordered item. Shared by purchase and sales orders."""

    item: object
    quantity: Decimal
    unit_price: Decimal


@dataclass(frozen=True)
class ReceiptLineInput:
    purchase_order_line: PurchaseOrderLine
    received_quantity: Decimal


@dataclass(frozen=True)
class ReceiptOrderInput:
    """Lines received against one purchase order."""

    purchase_order: PurchaseOrder
    lines: list[ReceiptLineInput] = field(default_factory=list)


# ══════════════════════════════════════════════════════════════
# PURCHASE ORDERS
# ══════════════════════════════════════════════════════════════


class PurchaseOrders(DocumentService):
    document_type = DocumentKind.PURCHASE_ORDER.value

    @classmethod
    def create(cls, ctx: ActingContext | None, code: str, date: date_type, branch,
               supplier: str, lines: list[OrderLineInput],
               expected_delivery_date: date_type | None = None) -> PurchaseOrder:
        """
        Create a pending purchase order.

        Raises:
            InvalidQuantity: If a line quantity <= 0 or unit_price < 0
        """
        ctx = cls.context(ctx)
        for index, line in enumerate(lines):
            require_positive(line.quantity, line=index)
            require_non_negative(line.unit_price, COST_PLACES, line=index)

        with transaction.atomic():
            order = PurchaseOrder.objects.create(
                code=code,
                date=date,
                user=ctx.user,
                branch=branch,
                supplier=supplier,
                expected_delivery_date=expected_delivery_date,
                grand_total=line_total(lines),
            )
            PurchaseOrderLine.objects.bulk_create([
                PurchaseOrderLine(
                    order=order,
                    item=line.item,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                )
                for line in lines
            ])
            cls.confirm_number(order.code, branch.location)
            cls.log_created(order, ctx, lines=len(lines))
            return order

    @classmethod
    def destroy(cls, ctx: ActingContext | None, order: PurchaseOrder) -> None:
        """
        Delete a purchase order that received nothing yet.

        Raises:
            InvalidStatus: If the order is not pending
        """
        ctx = cls.context(ctx)
        with transaction.atomic():
            order = cls.lock(order)
            if order.status != PurchaseOrderStatus.PENDING:
                raise InvalidStatus(document=order.code, status=order.status)
            code, location = order.code, order.branch.location
            order.delete()
            cls.cancel_number(code, location)
            cls.log_destroyed(code, ctx)


# ══════════════════════════════════════════════════════════════
# GOODS RECEIPTS
# ══════════════════════════════════════════════════════════════


class GoodsReceipts(DocumentService):
    document_type = DocumentKind.GOODS_RECEIPT.value

    @classmethod
    def create(cls, ctx: ActingContext | None, code: str, date: date_type,
               location: Location, supplier: str, orders: list[ReceiptOrderInput],
               received_by: str = '') -> GoodsReceipt:
        """
        Receive goods against purchase orders.

        Every line with a positive quantity becomes one batch at the
        receipt location, costed at the unit price of its order line. Lines
        received at zero are kept on the receipt without touching the
        ledger. Touched orders get their status recomputed in the same
        transaction.

        Raises:
            DocumentError: If a line belongs to another purchase order
            InvalidQuantity: If a received quantity < 0
            NotFound: If the location does not exist
        """
        ctx = cls.context(ctx)
        for entry in orders:
            for index, line in enumerate(entry.lines):
                require_non_negative(line.received_quantity, line=index)
                if line.purchase_order_line.order_id != entry.purchase_order.pk:
                    raise DocumentError(
                        message="Item não pertence ao pedido de compra",
                        purchase_order=entry.purchase_order.code,
                        purchase_order_line=line.purchase_order_line.pk,
                    )

        with transaction.atomic():
            location.resolve()
            receipt = GoodsReceipt(
                code=code,
                date=date,
                user=ctx.user,
                supplier=supplier,
                received_by=received_by,
            )
            receipt.location = location
            receipt.save()

            count = 0
            for entry in orders:
                receipt.purchase_orders.add(entry.purchase_order)
                for line in entry.lines:
                    order_line = line.purchase_order_line
                    receipt_line = GoodsReceiptLine.objects.create(
                        receipt=receipt,
                        purchase_order_line=order_line,
                        received_quantity=line.received_quantity,
                        unit_cost=order_line.unit_price,
                    )
                    if line.received_quantity > 0:
                        receipt_line.batch = BatchAllocator.receive(
                            line.received_quantity,
                            order_line.item,
                            location,
                            order_line.unit_price,
                            Reference.of(receipt_line),
                        )
                        receipt_line.save(update_fields=['batch'])
                    count += 1

            for entry in orders:
                StatusResolver.recompute(entry.purchase_order.pk, DocumentKind.PURCHASE_ORDER)

            cls.confirm_number(receipt.code, location)
            cls.log_created(receipt, ctx, lines=count, location=str(location))
            return receipt


# ══════════════════════════════════════════════════════════════
# PURCHASE INVOICES
# ══════════════════════════════════════════════════════════════


class PurchaseInvoices(DocumentService):
    document_type = DocumentKind.PURCHASE_INVOICE.value

    @classmethod
    def create(cls, ctx: ActingContext | None, code: str, date: date_type,
               supplier: str, grand_total: Decimal, goods_receipts: list[GoodsReceipt],
               due_date: date_type | None = None) -> PurchaseInvoice:
        """
        Invoice goods receipts. The balance starts at grand_total.

        Raises:
            InvalidQuantity: If grand_total < 0
            DocumentError: If a receipt is already invoiced
        """
        ctx = cls.context(ctx)
        require_non_negative(grand_total, MONEY_PLACES)

        with transaction.atomic():
            invoice = PurchaseInvoice.objects.create(
                code=code,
                date=date,
                user=ctx.user,
                supplier=supplier,
                due_date=due_date,
                grand_total=grand_total,
                remaining_amount=grand_total,
            )
            cls._attach(invoice, goods_receipts)
            StatusResolver.purchase_invoice(invoice)
            cls.confirm_number(invoice.code)
            cls.log_created(invoice, ctx, receipts=len(goods_receipts))
            return invoice

    @classmethod
    def update(cls, ctx: ActingContext | None, invoice: PurchaseInvoice,
               goods_receipts: list[GoodsReceipt] | None = None,
               grand_total: Decimal | None = None,
               due_date: date_type | None = None) -> PurchaseInvoice:
        """
        Change linked receipts or totals.

        Receipts dropped from the invoice go back to not_invoiced. A new
        grand_total resets the balance to grand_total minus what was paid.
        """
        with transaction.atomic():
            invoice = cls.lock(invoice)

            if grand_total is not None:
                require_non_negative(grand_total, MONEY_PLACES)
                paid = sum((p.amount for p in invoice.payments.all()), Decimal('0'))
                invoice.grand_total = grand_total
                invoice.remaining_amount = grand_total - paid
            if due_date is not None:
                invoice.due_date = due_date
            invoice.save()

            if goods_receipts is not None:
                current = list(invoice.goods_receipts.all())
                wanted = {receipt.pk for receipt in goods_receipts}
                removed = [receipt for receipt in current if receipt.pk not in wanted]
                invoice.goods_receipts.remove(*removed)
                cls._refresh_receipts(removed)
                kept = {receipt.pk for receipt in current}
                cls._attach(invoice, [r for r in goods_receipts if r.pk not in kept])

            StatusResolver.purchase_invoice(invoice)
            return invoice

    @classmethod
    def destroy(cls, ctx: ActingContext | None, invoice: PurchaseInvoice) -> None:
        """
        Delete an unpaid invoice and release its receipts.

        Raises:
            InvalidStatus: If the invoice has payments
        """
        ctx = cls.context(ctx)
        with transaction.atomic():
            invoice = cls.lock(invoice)
            if invoice.payments.exists():
                raise InvalidStatus(document=invoice.code, status=invoice.status)
            receipts = list(invoice.goods_receipts.all())
            invoice.goods_receipts.clear()
            cls._refresh_receipts(receipts)
            code = invoice.code
            invoice.delete()
            cls.cancel_number(code)
            cls.log_destroyed(code, ctx)

    @classmethod
    def _attach(cls, invoice: PurchaseInvoice, receipts: list[GoodsReceipt]):
        for receipt in receipts:
            if receipt.purchase_invoices.exclude(pk=invoice.pk).exists():
                raise DocumentError(
                    message="Recebimento já faturado",
                    goods_receipt=receipt.code,
                )
        invoice.goods_receipts.add(*receipts)
        cls._refresh_receipts(receipts)

    @staticmethod
    def _refresh_receipts(receipts: list[GoodsReceipt]):
        for receipt in receipts:
            StatusResolver.recompute(receipt.pk, DocumentKind.GOODS_RECEIPT)


class PurchaseInvoicePayments(DocumentService):
    document_type = 'purchase_invoice_payment'

    @classmethod
    def create(cls, ctx: ActingContext | None, invoice: PurchaseInvoice, code: str,
               date: date_type, amount: Decimal, method: str = '') -> PurchaseInvoicePayment:
        """
        Record a payment and reduce the invoice balance.

        Raises:
            InvalidQuantity: If amount <= 0
        """
        ctx = cls.context(ctx)
        require_positive(amount, MONEY_PLACES)

        with transaction.atomic():
            invoice = cls.lock(invoice)
            payment = PurchaseInvoicePayment.objects.create(
                code=code,
                date=date,
                user=ctx.user,
                invoice=invoice,
                amount=amount,
                method=method,
            )
            invoice.remaining_amount -= amount
            invoice.save(update_fields=['remaining_amount', 'updated_at'])
            StatusResolver.purchase_invoice(invoice)
            cls.confirm_number(payment.code)
            cls.log_created(payment, ctx, invoice=invoice.code, amount=str(amount))
            return payment
