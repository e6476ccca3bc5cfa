"""
Procurement documents — purchase orders, goods receipts, purchase invoices.
"""

from decimal import Decimal

from django.db import models
from django.db.models import Sum
from django.db.models.functions import Coalesce
from django.utils.translation import gettext_lazy as _

from ledgerman.models.document import Document
from ledgerman.models.enums import InvoicingStatus, PaymentStatus, PurchaseOrderStatus
from ledgerman.models.holder import LocatedModel


class PurchaseOrder(Document):
    """Order placed with a supplier. Status follows the goods received."""

    branch = models.ForeignKey(
        'ledgerman.Branch',
        on_delete=models.PROTECT,
        related_name='purchase_orders',
        verbose_name=_('Filial'),
    )
    supplier = models.CharField(max_length=200, verbose_name=_('Fornecedor'))
    expected_delivery_date = models.DateField(null=True, blank=True, verbose_name=_('Entrega prevista'))
    grand_total = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        default=Decimal('0'),
        verbose_name=_('Total geral'),
    )
    status = models.CharField(
        max_length=20,
        choices=PurchaseOrderStatus.choices,
        default=PurchaseOrderStatus.PENDING,
        db_index=True,
        verbose_name=_('Status'),
    )

    class Meta(Document.Meta):
        verbose_name = _('Pedido de compra')
        verbose_name_plural = _('Pedidos de compra')


class PurchaseOrderLine(models.Model):
    order = models.ForeignKey(
        PurchaseOrder,
        on_delete=models.CASCADE,
        related_name='lines',
        verbose_name=_('Pedido'),
    )
    item = models.ForeignKey('ledgerman.Item', on_delete=models.PROTECT, related_name='+', verbose_name=_('Item'))
    quantity = models.DecimalField(max_digits=12, decimal_places=3, verbose_name=_('Quantidade'))
    unit_price = models.DecimalField(max_digits=15, decimal_places=4, verbose_name=_('Preço unitário'))

    class Meta:
        verbose_name = _('Item do pedido de compra')
        verbose_name_plural = _('Itens do pedido de compra')
        ordering = ['id']

    @property
    def received_quantity(self) -> Decimal:
        """Sum of goods receipt quantities against this line."""
        return self.receipt_lines.aggregate(
            t=Coalesce(Sum('received_quantity'), Decimal('0'))
        )['t']

    def __str__(self) -> str:
        return f"{self.order.code} / {self.item.code} x {self.quantity}"


class GoodsReceipt(Document, LocatedModel):
    """Goods received from a supplier into a location."""

    supplier = models.CharField(max_length=200, verbose_name=_('Fornecedor'))
    received_by = models.CharField(max_length=100, blank=True, default='', verbose_name=_('Recebido por'))
    purchase_orders = models.ManyToManyField(
        PurchaseOrder,
        related_name='goods_receipts',
        blank=True,
        verbose_name=_('Pedidos de compra'),
    )
    status = models.CharField(
        max_length=20,
        choices=InvoicingStatus.choices,
        default=InvoicingStatus.NOT_INVOICED,
        db_index=True,
        verbose_name=_('Status'),
    )

    class Meta(Document.Meta):
        verbose_name = _('Recebimento')
        verbose_name_plural = _('Recebimentos')


class GoodsReceiptLine(models.Model):
    receipt = models.ForeignKey(
        GoodsReceipt,
        on_delete=models.CASCADE,
        related_name='lines',
        verbose_name=_('Recebimento'),
    )
    purchase_order_line = models.ForeignKey(
        PurchaseOrderLine,
        on_delete=models.PROTECT,
        related_name='receipt_lines',
        verbose_name=_('Item do pedido'),
    )
    received_quantity = models.DecimalField(max_digits=12, decimal_places=3, verbose_name=_('Quantidade recebida'))
    unit_cost = models.DecimalField(max_digits=15, decimal_places=4, verbose_name=_('Custo unitário'))
    batch = models.ForeignKey(
        'ledgerman.StockBatch',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Lote'),
    )

    class Meta:
        verbose_name = _('Item do recebimento')
        verbose_name_plural = _('Itens do recebimento')
        ordering = ['id']

    @property
    def total_price(self) -> Decimal:
        return self.received_quantity * self.unit_cost


class PurchaseInvoice(Document):
    """Supplier invoice covering one or more goods receipts."""

    supplier = models.CharField(max_length=200, verbose_name=_('Fornecedor'))
    due_date = models.DateField(null=True, blank=True, verbose_name=_('Vencimento'))
    goods_receipts = models.ManyToManyField(
        GoodsReceipt,
        related_name='purchase_invoices',
        blank=True,
        verbose_name=_('Recebimentos'),
    )
    grand_total = models.DecimalField(max_digits=15, decimal_places=2, verbose_name=_('Total geral'))
    remaining_amount = models.DecimalField(max_digits=15, decimal_places=2, verbose_name=_('Saldo devedor'))
    status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.UNPAID,
        db_index=True,
        verbose_name=_('Status'),
    )

    class Meta(Document.Meta):
        verbose_name = _('Fatura de compra')
        verbose_name_plural = _('Faturas de compra')


class PurchaseInvoicePayment(Document):
    invoice = models.ForeignKey(
        PurchaseInvoice,
        on_delete=models.PROTECT,
        related_name='payments',
        verbose_name=_('Fatura'),
    )
    amount = models.DecimalField(max_digits=15, decimal_places=2, verbose_name=_('Valor'))
    method = models.CharField(max_length=50, blank=True, default='', verbose_name=_('Forma de pagamento'))

    class Meta(Document.Meta):
        verbose_name = _('Pagamento de fatura de compra')
        verbose_name_plural = _('Pagamentos de faturas de compra')
