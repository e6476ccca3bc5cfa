"""
Item model — what is stocked.
"""

from decimal import Decimal

from django.db import models
from django.utils.translation import gettext_lazy as _


class Item(models.Model):
    """
    Stocked item.

    The ledger always works in the base unit. Callers holding wholesale
    quantities convert with to_base_quantity() before calling the core.
    """

    code = models.CharField(
        max_length=50,
        unique=True,
        verbose_name=_('Código'),
    )
    name = models.CharField(
        max_length=200,
        verbose_name=_('Nome'),
    )
    category = models.CharField(
        max_length=100,
        blank=True,
        default='',
        verbose_name=_('Categoria'),
    )
    unit = models.CharField(
        max_length=20,
        default='un',
        verbose_name=_('Unidade base'),
    )
    wholesale_unit = models.CharField(
        max_length=20,
        blank=True,
        default='',
        verbose_name=_('Unidade de atacado'),
    )
    wholesale_factor = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        null=True,
        blank=True,
        verbose_name=_('Fator de conversão'),
        help_text=_('Quantidade na unidade base por unidade de atacado'),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Item')
        verbose_name_plural = _('Itens')
        ordering = ['code']

    def to_base_quantity(self, quantity: Decimal, wholesale: bool = False) -> Decimal:
        """Convert a quantity to the base unit."""
        if not wholesale:
            return quantity
        if not self.wholesale_factor:
            from ledgerman.exceptions import InvalidQuantity
            raise InvalidQuantity(
                message='Item sem unidade de atacado',
                item=self.code,
            )
        return quantity * self.wholesale_factor

    def __str__(self) -> str:
        return f"{self.code} — {self.name}"
