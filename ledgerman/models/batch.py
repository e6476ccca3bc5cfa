"""
StockBatch model — a cost layer of on-hand stock at one location.

Batches are created by receiving, positive adjustments and the inbound
side of transfers. Their quantity only decreases afterwards. They are
never merged and never deleted, so the cost history stays intact.
"""

from decimal import Decimal

from django.db import models
from django.db.models import Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from ledgerman.models.holder import LocatedModel


# Stored precision of quantities and unit costs
QUANTITY_PLACES = Decimal('0.001')
COST_PLACES = Decimal('0.0001')


class StockBatchQuerySet(models.QuerySet):
    """Custom QuerySet for StockBatch with convenience filters."""

    def at(self, location):
        """Filter by location."""
        return self.filter(holder_type=location.kind.value, holder_id=location.id)

    def for_item(self, item):
        """Filter batches of a specific item."""
        return self.filter(item=item)

    def with_stock(self):
        """Batches with remaining quantity."""
        return self.filter(quantity__gt=0)

    def fifo(self):
        """Oldest first. Ties on created_at are broken by id."""
        return self.order_by('created_at', 'id')


class StockBatch(LocatedModel):
    """
    Quantity of one item at one location, received at one unit cost.

    The quantity is only ever changed by the allocator, which records a
    StockMovement for every change.
    """

    sku = models.CharField(
        max_length=100,
        db_index=True,
        verbose_name=_('SKU do lote'),
    )
    item = models.ForeignKey(
        'ledgerman.Item',
        on_delete=models.PROTECT,
        related_name='batches',
        verbose_name=_('Item'),
    )
    quantity = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        default=Decimal('0'),
        verbose_name=_('Quantidade'),
    )
    unit_cost = models.DecimalField(
        max_digits=15,
        decimal_places=4,
        default=Decimal('0'),
        verbose_name=_('Custo unitário'),
    )
    created_at = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Criado em'))
    updated_at = models.DateTimeField(auto_now=True)

    objects = StockBatchQuerySet.as_manager()

    class Meta:
        verbose_name = _('Lote')
        verbose_name_plural = _('Lotes')
        ordering = ['created_at', 'id']
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity__gte=0),
                name='stock_batch_quantity_non_negative',
            ),
            models.UniqueConstraint(
                fields=['holder_type', 'holder_id', 'sku'],
                name='stock_batch_sku_unique',
            ),
        ]
        indexes = [
            models.Index(fields=['item', 'holder_type', 'holder_id', 'created_at'], name='stock_batch_fifo_idx'),
        ]

    @property
    def value(self) -> Decimal:
        """Stock value of this layer at its recorded cost."""
        return self.quantity * self.unit_cost

    def __str__(self) -> str:
        return f"{self.sku} [{self.holder_type}:{self.holder_id}]: {self.quantity}"
