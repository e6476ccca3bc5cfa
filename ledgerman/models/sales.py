"""
Sales documents — sales orders, waybills, sales invoices.
"""

from decimal import Decimal

from django.db import models
from django.db.models import Sum
from django.db.models.functions import Coalesce
from django.utils.translation import gettext_lazy as _

from ledgerman.models.document import Document
from ledgerman.models.enums import InvoicingStatus, PaymentStatus, SalesOrderStatus
from ledgerman.models.holder import LocatedModel


class SalesOrder(Document):
    """Customer order. Status follows the quantities shipped by waybills."""

    branch = models.ForeignKey(
        'ledgerman.Branch',
        on_delete=models.PROTECT,
        related_name='sales_orders',
        verbose_name=_('Filial'),
    )
    customer_name = models.CharField(max_length=200, blank=True, default='', verbose_name=_('Cliente'))
    grand_total = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        default=Decimal('0'),
        verbose_name=_('Total geral'),
    )
    status = models.CharField(
        max_length=20,
        choices=SalesOrderStatus.choices,
        default=SalesOrderStatus.PENDING,
        db_index=True,
        verbose_name=_('Status'),
    )

    class Meta(Document.Meta):
        verbose_name = _('Pedido de venda')
        verbose_name_plural = _('Pedidos de venda')


class SalesOrderLine(models.Model):
    order = models.ForeignKey(
        SalesOrder,
        on_delete=models.CASCADE,
        related_name='lines',
        verbose_name=_('Pedido'),
    )
    item = models.ForeignKey('ledgerman.Item', on_delete=models.PROTECT, related_name='+', verbose_name=_('Item'))
    quantity = models.DecimalField(max_digits=12, decimal_places=3, verbose_name=_('Quantidade'))
    unit_price = models.DecimalField(max_digits=15, decimal_places=4, verbose_name=_('Preço unitário'))

    class Meta:
        verbose_name = _('Item do pedido de venda')
        verbose_name_plural = _('Itens do pedido de venda')
        ordering = ['id']

    @property
    def shipped_quantity(self) -> Decimal:
        """Sum of waybill quantities against this line."""
        return self.waybill_lines.aggregate(
            t=Coalesce(Sum('quantity'), Decimal('0'))
        )['t']

    def __str__(self) -> str:
        return f"{self.order.code} / {self.item.code} x {self.quantity}"


class Waybill(Document, LocatedModel):
    """Shipment of sales order lines out of a location."""

    sales_order = models.ForeignKey(
        SalesOrder,
        on_delete=models.PROTECT,
        related_name='waybills',
        verbose_name=_('Pedido de venda'),
    )
    status = models.CharField(
        max_length=20,
        choices=InvoicingStatus.choices,
        default=InvoicingStatus.NOT_INVOICED,
        db_index=True,
        verbose_name=_('Status'),
    )

    class Meta(Document.Meta):
        verbose_name = _('Guia de remessa')
        verbose_name_plural = _('Guias de remessa')


class WaybillLine(models.Model):
    waybill = models.ForeignKey(
        Waybill,
        on_delete=models.CASCADE,
        related_name='lines',
        verbose_name=_('Guia de remessa'),
    )
    sales_order_line = models.ForeignKey(
        SalesOrderLine,
        on_delete=models.PROTECT,
        related_name='waybill_lines',
        verbose_name=_('Item do pedido'),
    )
    quantity = models.DecimalField(max_digits=12, decimal_places=3, verbose_name=_('Quantidade'))
    description = models.CharField(max_length=255, blank=True, default='', verbose_name=_('Descrição'))

    class Meta:
        verbose_name = _('Item da guia de remessa')
        verbose_name_plural = _('Itens da guia de remessa')
        ordering = ['id']


class SalesInvoice(Document):
    """Customer invoice covering one or more waybills."""

    branch = models.ForeignKey(
        'ledgerman.Branch',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='sales_invoices',
        verbose_name=_('Filial'),
    )
    customer_name = models.CharField(max_length=200, blank=True, default='', verbose_name=_('Cliente'))
    due_date = models.DateField(null=True, blank=True, verbose_name=_('Vencimento'))
    waybills = models.ManyToManyField(
        Waybill,
        related_name='sales_invoices',
        blank=True,
        verbose_name=_('Guias de remessa'),
    )
    grand_total = models.DecimalField(max_digits=15, decimal_places=2, verbose_name=_('Total geral'))
    paid_amount = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        default=Decimal('0'),
        verbose_name=_('Valor pago'),
    )
    remaining_amount = models.DecimalField(max_digits=15, decimal_places=2, verbose_name=_('Saldo devedor'))
    paid_status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.UNPAID,
        db_index=True,
        verbose_name=_('Status de pagamento'),
    )

    class Meta(Document.Meta):
        verbose_name = _('Fatura de venda')
        verbose_name_plural = _('Faturas de venda')


class SalesInvoicePayment(Document):
    invoice = models.ForeignKey(
        SalesInvoice,
        on_delete=models.PROTECT,
        related_name='payments',
        verbose_name=_('Fatura'),
    )
    amount = models.DecimalField(max_digits=15, decimal_places=2, verbose_name=_('Valor'))
    method = models.CharField(max_length=50, blank=True, default='', verbose_name=_('Forma de pagamento'))
    note = models.TextField(blank=True, default='', verbose_name=_('Observação'))

    class Meta(Document.Meta):
        verbose_name = _('Pagamento de fatura de venda')
        verbose_name_plural = _('Pagamentos de faturas de venda')
