"""
Locations and references — closed tagged unions over holders and lines.

A Location names a stock holder (Branch or Warehouse) by kind and id.
A Reference names the document line that caused a movement. Both are
plain frozen values; the model behind each kind comes from an exhaustive
table checked at import, so no caller ever dispatches on free strings.

Usage:
    loja = Location.of(branch)
    loja == Location(HolderKind.BRANCH, branch.pk)   # True
    loja.resolve()                                   # Branch instance

    ref = Reference.of(waybill_line)
"""

from dataclasses import dataclass

from django.apps import apps
from django.core.exceptions import ImproperlyConfigured

from ledgerman.exceptions import NotFound
from ledgerman.models.enums import HolderKind, ReferenceKind


HOLDER_MODELS = {
    HolderKind.BRANCH: 'ledgerman.Branch',
    HolderKind.WAREHOUSE: 'ledgerman.Warehouse',
}

REFERENCE_MODELS = {
    ReferenceKind.GOODS_RECEIPT_LINE: 'ledgerman.GoodsReceiptLine',
    ReferenceKind.WAYBILL_LINE: 'ledgerman.WaybillLine',
    ReferenceKind.ADJUSTMENT_LINE: 'ledgerman.StockAdjustmentLine',
    ReferenceKind.AUDIT_LINE: 'ledgerman.StockAuditLine',
    ReferenceKind.TRANSFER_LINE: 'ledgerman.StockTransferLine',
}


def _check_exhaustive(table: dict, enum) -> dict[str, object]:
    """Every enum member must map to a model; return the reverse map."""
    missing = [member.value for member in enum if member not in table]
    if missing:
        raise ImproperlyConfigured(
            f"{enum.__name__} sem modelo registrado: {', '.join(missing)}"
        )
    return {label: kind for kind, label in table.items()}


_HOLDER_KINDS = _check_exhaustive(HOLDER_MODELS, HolderKind)
_REFERENCE_KINDS = _check_exhaustive(REFERENCE_MODELS, ReferenceKind)


@dataclass(frozen=True)
class Location:
    """Where stock is held."""

    kind: HolderKind
    id: int

    def __post_init__(self):
        # Raises ValueError on anything outside the closed set
        object.__setattr__(self, 'kind', HolderKind(self.kind))
        object.__setattr__(self, 'id', int(self.id))

    @classmethod
    def of(cls, holder) -> 'Location':
        """Build a Location from a Branch or Warehouse instance."""
        kind = _HOLDER_KINDS.get(holder._meta.label)
        if kind is None:
            raise TypeError(f"{holder!r} não é um local de estoque")
        return cls(kind, holder.pk)

    @property
    def model(self):
        return apps.get_model(HOLDER_MODELS[self.kind])

    def resolve(self):
        """
        Fetch the holder.

        Raises:
            NotFound: If no holder exists with this kind and id
        """
        try:
            return self.model.objects.get(pk=self.id)
        except self.model.DoesNotExist:
            raise NotFound(location=str(self))

    def filter_kwargs(self, prefix: str = 'holder') -> dict:
        """Lookup kwargs for LocatedModel-style (type, id) pairs."""
        return {f'{prefix}_type': self.kind.value, f'{prefix}_id': self.id}

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.id}"


@dataclass(frozen=True)
class Reference:
    """Document line that caused a movement."""

    kind: ReferenceKind
    id: int

    def __post_init__(self):
        object.__setattr__(self, 'kind', ReferenceKind(self.kind))
        object.__setattr__(self, 'id', int(self.id))

    @classmethod
    def of(cls, line) -> 'Reference':
        """Build a Reference from a document line instance."""
        kind = _REFERENCE_KINDS.get(line._meta.label)
        if kind is None:
            raise TypeError(f"{line!r} não é um item de documento")
        if line.pk is None:
            raise ValueError("Item de documento precisa estar salvo")
        return cls(kind, line.pk)

    def resolve(self):
        model = apps.get_model(REFERENCE_MODELS[self.kind])
        try:
            return model.objects.get(pk=self.id)
        except model.DoesNotExist:
            raise NotFound(reference=str(self))

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.id}"
