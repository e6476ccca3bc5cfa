"""
Holder models — Branch and Warehouse, the places that own stock.

Master data is maintained elsewhere; Ledgerman only needs identity,
a display name and the short initial used in batch SKUs.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _

from ledgerman.models.enums import HolderKind


class Holder(models.Model):
    """Common fields for stock holders."""

    code = models.SlugField(
        unique=True,
        max_length=50,
        verbose_name=_('Código'),
    )
    name = models.CharField(
        max_length=100,
        verbose_name=_('Nome'),
    )
    initial = models.CharField(
        max_length=10,
        verbose_name=_('Sigla'),
        help_text=_('Usada no SKU dos lotes (ex: SP1)'),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ['code']

    @property
    def location(self):
        from ledgerman.location import Location
        return Location.of(self)

    def __str__(self) -> str:
        return self.name


class Branch(Holder):
    """Sales branch. Ships waybills and owns its own stock."""

    class Meta(Holder.Meta):
        verbose_name = _('Filial')
        verbose_name_plural = _('Filiais')


class Warehouse(Holder):
    """Storage location. Default destination of goods receipts."""

    class Meta(Holder.Meta):
        verbose_name = _('Armazém')
        verbose_name_plural = _('Armazéns')


class LocatedModel(models.Model):
    """
    Abstract model carrying a location as (holder_type, holder_id).

    Read and write through the ``location`` property, which speaks
    ledgerman.location.Location rather than raw strings.
    """

    holder_type = models.CharField(
        max_length=20,
        choices=HolderKind.choices,
        verbose_name=_('Tipo de local'),
    )
    holder_id = models.PositiveBigIntegerField(
        verbose_name=_('ID do local'),
    )

    class Meta:
        abstract = True

    @property
    def location(self):
        from ledgerman.location import Location
        return Location(HolderKind(self.holder_type), self.holder_id)

    @location.setter
    def location(self, value):
        self.holder_type = value.kind.value
        self.holder_id = value.id
