"""
StockMovement model — Immutable ledger of batch quantity changes.
"""

from decimal import Decimal

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from ledgerman.models.enums import MovementKind, ReferenceKind
from ledgerman.models.holder import LocatedModel


INBOUND_KINDS = frozenset({MovementKind.IN, MovementKind.ADJUSTMENT_INCREASE})
OUTBOUND_KINDS = frozenset({MovementKind.OUT, MovementKind.ADJUSTMENT_DECREASE})


class StockMovementQuerySet(models.QuerySet):

    def at(self, location):
        return self.filter(holder_type=location.kind.value, holder_id=location.id)

    def for_item(self, item):
        return self.filter(batch__item=item)

    def for_reference(self, reference):
        return self.filter(reference_type=reference.kind.value, reference_id=reference.id)


class StockMovement(LocatedModel):
    """
    Immutable record of one quantity change to one batch.

    Rules:
    - NEVER update() or delete()
    - Corrections are new movements from a compensating operation
    - Only created by ledgerman.services.recorder

    previous_quantity and after_quantity are the batch quantity before and
    after the change; movement_quantity is the magnitude of the change.
    """

    batch = models.ForeignKey(
        'ledgerman.StockBatch',
        on_delete=models.PROTECT,
        related_name='movements',
        verbose_name=_('Lote'),
    )
    kind = models.CharField(
        max_length=30,
        choices=MovementKind.choices,
        verbose_name=_('Tipo'),
    )
    previous_quantity = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        verbose_name=_('Quantidade anterior'),
    )
    movement_quantity = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        verbose_name=_('Quantidade movimentada'),
        help_text=_('Sempre positiva. O sentido vem do tipo ou do saldo.'),
    )
    after_quantity = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        verbose_name=_('Quantidade posterior'),
    )

    # Causing document line
    reference_type = models.CharField(
        max_length=30,
        choices=ReferenceKind.choices,
        verbose_name=_('Tipo de referência'),
    )
    reference_id = models.PositiveBigIntegerField(verbose_name=_('ID da referência'))

    created_at = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Data/Hora'))

    objects = StockMovementQuerySet.as_manager()

    class Meta:
        verbose_name = _('Movimento')
        verbose_name_plural = _('Movimentos')
        ordering = ['created_at', 'id']
        indexes = [
            models.Index(fields=['batch', 'created_at'], name='stock_move_batch_idx'),
            models.Index(fields=['holder_type', 'holder_id', 'created_at'], name='stock_move_location_idx'),
            models.Index(fields=['reference_type', 'reference_id'], name='stock_move_reference_idx'),
        ]

    @property
    def delta(self) -> Decimal:
        """Signed movement quantity."""
        if self.kind in INBOUND_KINDS:
            return self.movement_quantity
        if self.kind in OUTBOUND_KINDS:
            return -self.movement_quantity
        # Transfers go both ways; the balance tells which.
        if self.after_quantity < self.previous_quantity:
            return -self.movement_quantity
        return self.movement_quantity

    @property
    def reference(self):
        from ledgerman.location import Reference
        return Reference(ReferenceKind(self.reference_type), self.reference_id)

    def save(self, *args, **kwargs):
        """Insert only."""
        if self.pk:
            raise ValueError(
                "Movimentos são imutáveis. "
                "Para corrigir, registre uma operação compensatória."
            )
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        """Prevent deletion — movements are immutable."""
        raise ValueError(
            "Movimentos são imutáveis. "
            "Para estornar, registre uma operação compensatória."
        )

    def __str__(self) -> str:
        signal = '+' if self.delta > 0 else ''
        return f"{signal}{self.delta} | {self.get_kind_display()} | {self.reference_type}:{self.reference_id}"
