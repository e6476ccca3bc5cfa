"""
Sales document services.

    SalesOrders             create, cancel (only while pending)
    Waybills                create: issue every line from the ledger
    SalesInvoices           create, update, destroy: link waybills
    SalesInvoicePayments    create: move the balance into paid_amount
"""

from dataclasses import dataclass
from datetime import date as date_type
from decimal import Decimal

from django.db import transaction

from ledgerman.context import ActingContext
from ledgerman.documents.base import (
    COST_PLACES,
    MONEY_PLACES,
    DocumentService,
    line_errors,
    line_total,
    require_non_negative,
    require_positive,
)
from ledgerman.documents.procurement import OrderLineInput
from ledgerman.exceptions import DocumentError, InvalidStatus
from ledgerman.location import Location, Reference
from ledgerman.models.enums import DocumentKind, SalesOrderStatus
from ledgerman.models.sales import (
    SalesInvoice,
    SalesInvoicePayment,
    SalesOrder,
    SalesOrderLine,
    Waybill,
    WaybillLine,
)
from ledgerman.services.allocator import BatchAllocator
from ledgerman.services.resolver import StatusResolver


@dataclass(frozen=True)
class WaybillLineInput:
    sales_order_line: SalesOrderLine
    quantity: Decimal
    description: str = ''


# ══════════════════════════════════════════════════════════════
# SALES ORDERS
# ══════════════════════════════════════════════════════════════


class SalesOrders(DocumentService):
    document_type = DocumentKind.SALES_ORDER.value

    @classmethod
    def create(cls, ctx: ActingContext | None, code: str, date: date_type, branch,
               customer_name: str, lines: list[OrderLineInput]) -> SalesOrder:
        """
        Create a pending sales order.

        Raises:
            InvalidQuantity: If a line quantity <= 0 or unit_price < 0
        """
        ctx = cls.context(ctx)
        for index, line in enumerate(lines):
            require_positive(line.quantity, line=index)
            require_non_negative(line.unit_price, COST_PLACES, line=index)

        with transaction.atomic():
            order = SalesOrder.objects.create(
                code=code,
                date=date,
                user=ctx.user,
                branch=branch,
                customer_name=customer_name,
                grand_total=line_total(lines),
            )
            SalesOrderLine.objects.bulk_create([
                SalesOrderLine(
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
    def cancel(cls, ctx: ActingContext | None, order: SalesOrder) -> SalesOrder:
        """
        Cancel an order that shipped nothing yet.

        Raises:
            InvalidStatus: If the order is not pending
        """
        ctx = cls.context(ctx)
        with transaction.atomic():
            order = cls.lock(order)
            if order.status != SalesOrderStatus.PENDING:
                raise InvalidStatus(document=order.code, status=order.status)
            order.status = SalesOrderStatus.CANCELLED
            order.save(update_fields=['status', 'updated_at'])
            cls.log_destroyed(order.code, ctx, event="cancelled")
            return order


# ══════════════════════════════════════════════════════════════
# WAYBILLS
# ══════════════════════════════════════════════════════════════


class Waybills(DocumentService):
    document_type = DocumentKind.WAYBILL.value

    @classmethod
    def create(cls, ctx: ActingContext | None, code: str, date: date_type,
               sales_order: SalesOrder, location: Location | None,
               lines: list[WaybillLineInput]) -> Waybill:
        """
        Ship sales order lines.

        Every line with a positive quantity issues oldest-first from the
        waybill location, which defaults to the acting branch. Zero lines
        are kept without touching the ledger. The sales order status is
        recomputed in the same transaction.

        Raises:
            InvalidQuantity: If a quantity < 0
            InvalidStatus: If the sales order is cancelled
            DocumentError: If a line belongs to another order, or no location
            InsufficientStock: With data['line'] and data['item_code'] set
        """
        ctx = cls.context(ctx)
        location = location or ctx.location
        if location is None:
            raise DocumentError(message="Guia de remessa sem local de saída", document=code)
        for index, line in enumerate(lines):
            require_non_negative(line.quantity, line=index)
            if line.sales_order_line.order_id != sales_order.pk:
                raise DocumentError(
                    message="Item não pertence ao pedido de venda",
                    sales_order=sales_order.code,
                    sales_order_line=line.sales_order_line.pk,
                )

        with transaction.atomic():
            order = cls.lock(sales_order)
            if order.status == SalesOrderStatus.CANCELLED:
                raise InvalidStatus(document=order.code, status=order.status)
            location.resolve()

            waybill = Waybill(code=code, date=date, user=ctx.user, sales_order=order)
            waybill.location = location
            waybill.save()

            for index, line in enumerate(lines):
                item = line.sales_order_line.item
                waybill_line = WaybillLine.objects.create(
                    waybill=waybill,
                    sales_order_line=line.sales_order_line,
                    quantity=line.quantity,
                    description=line.description,
                )
                if line.quantity > 0:
                    with line_errors(index, item):
                        BatchAllocator.issue(line.quantity, item, location, Reference.of(waybill_line))

            StatusResolver.sales_order(order)
            cls.confirm_number(waybill.code, location)
            cls.log_created(waybill, ctx, lines=len(lines), location=str(location))
            return waybill


# ══════════════════════════════════════════════════════════════
# SALES INVOICES
# ══════════════════════════════════════════════════════════════


class SalesInvoices(DocumentService):
    document_type = DocumentKind.SALES_INVOICE.value

    @classmethod
    def create(cls, ctx: ActingContext | None, code: str, date: date_type,
               grand_total: Decimal, waybills: list[Waybill], customer_name: str = '',
               due_date: date_type | None = None) -> SalesInvoice:
        """
        Invoice waybills. The balance starts at grand_total.

        Raises:
            InvalidQuantity: If grand_total < 0
            DocumentError: If a waybill is already invoiced
        """
        ctx = cls.context(ctx)
        require_non_negative(grand_total, MONEY_PLACES)

        with transaction.atomic():
            invoice = SalesInvoice.objects.create(
                code=code,
                date=date,
                user=ctx.user,
                branch=ctx.branch,
                customer_name=customer_name,
                due_date=due_date,
                grand_total=grand_total,
                remaining_amount=grand_total,
            )
            cls._attach(invoice, waybills)
            StatusResolver.sales_invoice(invoice)
            location = ctx.branch.location if ctx.branch is not None else None
            cls.confirm_number(invoice.code, location)
            cls.log_created(invoice, ctx, waybills=len(waybills))
            return invoice

    @classmethod
    def update(cls, ctx: ActingContext | None, invoice: SalesInvoice,
               waybills: list[Waybill] | None = None,
               grand_total: Decimal | None = None,
               due_date: date_type | None = None) -> SalesInvoice:
        """Change linked waybills or totals. See PurchaseInvoices.update."""
        with transaction.atomic():
            invoice = cls.lock(invoice)

            if grand_total is not None:
                require_non_negative(grand_total, MONEY_PLACES)
                invoice.grand_total = grand_total
                invoice.remaining_amount = grand_total - invoice.paid_amount
            if due_date is not None:
                invoice.due_date = due_date
            invoice.save()

            if waybills is not None:
                current = list(invoice.waybills.all())
                wanted = {waybill.pk for waybill in waybills}
                removed = [waybill for waybill in current if waybill.pk not in wanted]
                invoice.waybills.remove(*removed)
                cls._refresh_waybills(removed)
                kept = {waybill.pk for waybill in current}
                cls._attach(invoice, [w for w in waybills if w.pk not in kept])

            StatusResolver.sales_invoice(invoice)
            return invoice

    @classmethod
    def destroy(cls, ctx: ActingContext | None, invoice: SalesInvoice) -> None:
        """
        Delete an unpaid invoice and release its waybills.

        Raises:
            InvalidStatus: If the invoice has payments
        """
        ctx = cls.context(ctx)
        with transaction.atomic():
            invoice = cls.lock(invoice)
            if invoice.payments.exists():
                raise InvalidStatus(document=invoice.code, status=invoice.paid_status)
            waybills = list(invoice.waybills.all())
            invoice.waybills.clear()
            cls._refresh_waybills(waybills)
            code = invoice.code
            invoice.delete()
            cls.cancel_number(code)
            cls.log_destroyed(code, ctx)

    @classmethod
    def _attach(cls, invoice: SalesInvoice, waybills: list[Waybill]):
        for waybill in waybills:
            if waybill.sales_invoices.exclude(pk=invoice.pk).exists():
                raise DocumentError(message="Guia de remessa já faturada", waybill=waybill.code)
        invoice.waybills.add(*waybills)
        cls._refresh_waybills(waybills)

    @staticmethod
    def _refresh_waybills(waybills: list[Waybill]):
        for waybill in waybills:
            StatusResolver.recompute(waybill.pk, DocumentKind.WAYBILL)


class SalesInvoicePayments(DocumentService):
    document_type = 'sales_invoice_payment'

    @classmethod
    def create(cls, ctx: ActingContext | None, invoice: SalesInvoice, code: str,
               date: date_type, amount: Decimal, method: str = '',
               note: str = '') -> SalesInvoicePayment:
        """
        Record a customer payment.

        paid_amount grows and remaining_amount shrinks by amount; the
        paid_status follows.

        Raises:
            InvalidQuantity: If amount <= 0
        """
        ctx = cls.context(ctx)
        require_positive(amount, MONEY_PLACES)

        with transaction.atomic():
            invoice = cls.lock(invoice)
            payment = SalesInvoicePayment.objects.create(
                code=code,
                date=date,
                user=ctx.user,
                invoice=invoice,
                amount=amount,
                method=method,
                note=note,
            )
            invoice.paid_amount += amount
            invoice.remaining_amount -= amount
            invoice.save(update_fields=['paid_amount', 'remaining_amount', 'updated_at'])
            StatusResolver.sales_invoice(invoice)
            cls.confirm_number(payment.code)
            cls.log_created(payment, ctx, invoice=invoice.code, amount=str(amount))
            return payment
