"""
Stock documents — adjustments, transfers and audits.
"""

from decimal import Decimal

from django.db import models
from django.utils.translation import gettext_lazy as _

from ledgerman.models.document import Document
from ledgerman.models.enums import HolderKind
from ledgerman.models.holder import LocatedModel


class StockAdjustment(Document, LocatedModel):
    """Manual correction of stock at one location."""

    class Meta(Document.Meta):
        verbose_name = _('Ajuste de estoque')
        verbose_name_plural = _('Ajustes de estoque')


class StockAdjustmentLine(models.Model):
    adjustment = models.ForeignKey(
        StockAdjustment,
        on_delete=models.CASCADE,
        related_name='lines',
        verbose_name=_('Ajuste'),
    )
    item = models.ForeignKey('ledgerman.Item', on_delete=models.PROTECT, related_name='+', verbose_name=_('Item'))
    before_quantity = models.DecimalField(max_digits=12, decimal_places=3, verbose_name=_('Antes do ajuste'))
    adjustment_quantity = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        verbose_name=_('Ajuste'),
        help_text=_('Positivo = aumento, negativo = redução'),
    )
    after_quantity = models.DecimalField(max_digits=12, decimal_places=3, verbose_name=_('Depois do ajuste'))
    unit_cost = models.DecimalField(
        max_digits=15,
        decimal_places=4,
        null=True,
        blank=True,
        verbose_name=_('Custo unitário'),
        help_text=_('Só para aumentos. Vazio = política configurada.'),
    )
    reason = models.TextField(blank=True, default='', verbose_name=_('Motivo'))

    class Meta:
        verbose_name = _('Item do ajuste')
        verbose_name_plural = _('Itens do ajuste')
        ordering = ['id']


class StockTransfer(Document):
    """Movement of stock between two locations."""

    source_type = models.CharField(max_length=20, choices=HolderKind.choices, verbose_name=_('Tipo de origem'))
    source_id = models.PositiveBigIntegerField(verbose_name=_('ID da origem'))
    destination_type = models.CharField(max_length=20, choices=HolderKind.choices, verbose_name=_('Tipo de destino'))
    destination_id = models.PositiveBigIntegerField(verbose_name=_('ID do destino'))

    class Meta(Document.Meta):
        verbose_name = _('Transferência de estoque')
        verbose_name_plural = _('Transferências de estoque')

    @property
    def source(self):
        from ledgerman.location import Location
        return Location(HolderKind(self.source_type), self.source_id)

    @source.setter
    def source(self, value):
        self.source_type = value.kind.value
        self.source_id = value.id

    @property
    def destination(self):
        from ledgerman.location import Location
        return Location(HolderKind(self.destination_type), self.destination_id)

    @destination.setter
    def destination(self, value):
        self.destination_type = value.kind.value
        self.destination_id = value.id


class StockTransferLine(models.Model):
    transfer = models.ForeignKey(
        StockTransfer,
        on_delete=models.CASCADE,
        related_name='lines',
        verbose_name=_('Transferência'),
    )
    item = models.ForeignKey('ledgerman.Item', on_delete=models.PROTECT, related_name='+', verbose_name=_('Item'))
    quantity = models.DecimalField(max_digits=12, decimal_places=3, verbose_name=_('Quantidade'))
    source_before_quantity = models.DecimalField(max_digits=12, decimal_places=3, default=Decimal('0'))
    source_after_quantity = models.DecimalField(max_digits=12, decimal_places=3, default=Decimal('0'))
    destination_before_quantity = models.DecimalField(max_digits=12, decimal_places=3, default=Decimal('0'))
    destination_after_quantity = models.DecimalField(max_digits=12, decimal_places=3, default=Decimal('0'))

    class Meta:
        verbose_name = _('Item da transferência')
        verbose_name_plural = _('Itens da transferência')
        ordering = ['id']


class StockAudit(Document, LocatedModel):
    """
    Physical count at one location.

    Editable until locked. Locking posts the discrepancies to the ledger.
    """

    is_locked = models.BooleanField(default=False, verbose_name=_('Fechado'))
    locked_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Fechado em'))

    class Meta(Document.Meta):
        verbose_name = _('Inventário')
        verbose_name_plural = _('Inventários')


class StockAuditLine(models.Model):
    audit = models.ForeignKey(
        StockAudit,
        on_delete=models.CASCADE,
        related_name='lines',
        verbose_name=_('Inventário'),
    )
    item = models.ForeignKey('ledgerman.Item', on_delete=models.PROTECT, related_name='+', verbose_name=_('Item'))
    system_quantity = models.DecimalField(max_digits=12, decimal_places=3, verbose_name=_('Quantidade no sistema'))
    physical_quantity = models.DecimalField(max_digits=12, decimal_places=3, verbose_name=_('Quantidade contada'))
    discrepancy_quantity = models.DecimalField(max_digits=12, decimal_places=3, verbose_name=_('Diferença'))
    reason = models.TextField(blank=True, default='', verbose_name=_('Motivo'))

    class Meta:
        verbose_name = _('Item do inventário')
        verbose_name_plural = _('Itens do inventário')
        ordering = ['id']
