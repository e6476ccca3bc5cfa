"""
Enums for Ledgerman models.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class HolderKind(models.TextChoices):
    """
    Kind of stock holder (the closed set of locations).

    Every place that owns stock is one of these. Adding a member requires
    registering its model in ledgerman.location.HOLDER_MODELS.
    """
    BRANCH = 'branch', _('Filial')
    WAREHOUSE = 'warehouse', _('Armazém')


class MovementKind(models.TextChoices):
    """Kind of ledger movement."""
    IN = 'in', _('Entrada')
    OUT = 'out', _('Saída')
    ADJUSTMENT_INCREASE = 'adjustment_increase', _('Ajuste (aumento)')
    ADJUSTMENT_DECREASE = 'adjustment_decrease', _('Ajuste (redução)')
    TRANSFER = 'transfer', _('Transferência')


class ReferenceKind(models.TextChoices):
    """Document line that caused a movement."""
    GOODS_RECEIPT_LINE = 'goods_receipt_line', _('Item de recebimento')
    WAYBILL_LINE = 'waybill_line', _('Item de guia de remessa')
    ADJUSTMENT_LINE = 'adjustment_line', _('Item de ajuste')
    AUDIT_LINE = 'audit_line', _('Item de inventário')
    TRANSFER_LINE = 'transfer_line', _('Item de transferência')


class PurchaseOrderStatus(models.TextChoices):
    """Purchase order fulfillment status."""
    PENDING = 'pending', _('Pendente')
    PARTIALLY_RECEIVED = 'partially_received', _('Recebido parcialmente')
    RECEIVED = 'received', _('Recebido')


class SalesOrderStatus(models.TextChoices):
    """Sales order fulfillment status."""
    PENDING = 'pending', _('Pendente')
    PROCESSED = 'processed', _('Em processamento')
    COMPLETED = 'completed', _('Concluído')
    CANCELLED = 'cancelled', _('Cancelado')


class InvoicingStatus(models.TextChoices):
    """Whether a receipt/waybill is attached to an invoice."""
    NOT_INVOICED = 'not_invoiced', _('Não faturado')
    INVOICED = 'invoiced', _('Faturado')


class PaymentStatus(models.TextChoices):
    """Invoice payment status."""
    UNPAID = 'unpaid', _('Em aberto')
    PARTIALLY_PAID = 'partially_paid', _('Pago parcialmente')
    PAID = 'paid', _('Pago')


class DocumentKind(models.TextChoices):
    """Parent documents whose status the resolver derives."""
    PURCHASE_ORDER = 'purchase_order', _('Pedido de compra')
    GOODS_RECEIPT = 'goods_receipt', _('Recebimento')
    PURCHASE_INVOICE = 'purchase_invoice', _('Fatura de compra')
    SALES_ORDER = 'sales_order', _('Pedido de venda')
    WAYBILL = 'waybill', _('Guia de remessa')
    SALES_INVOICE = 'sales_invoice', _('Fatura de venda')
