"""
Django Ledgerman — Multi-location batch stock ledger.

Tracks on-hand quantity per item and location as FIFO cost layers,
with an append-only movement trail and document status derivation.

Uso:
    from ledgerman import ledger, LedgerError, Location

    ledger.receive(Decimal('10'), item, Location.of(armazem), Decimal('2.50'), reference)
    ledger.issue(Decimal('4'), item, Location.of(loja), reference)
    ledger.current_stock(item, Location.of(loja))
"""


def __getattr__(name):
    """Lazy import to avoid circular imports during app loading."""
    if name == 'ledger':
        from ledgerman.service import Ledger
        return Ledger
    elif name == 'LedgerError':
        from ledgerman.exceptions import LedgerError
        return LedgerError
    elif name == 'Location':
        from ledgerman.location import Location
        return Location
    elif name == 'Reference':
        from ledgerman.location import Reference
        return Reference
    elif name == 'StockBatch':
        from ledgerman.models.batch import StockBatch
        return StockBatch
    elif name == 'StockMovement':
        from ledgerman.models.movement import StockMovement
        return StockMovement
    elif name == 'HolderKind':
        from ledgerman.models.enums import HolderKind
        return HolderKind
    elif name == 'MovementKind':
        from ledgerman.models.enums import MovementKind
        return MovementKind
    elif name == 'DocumentKind':
        from ledgerman.models.enums import DocumentKind
        return DocumentKind
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    'ledger',
    'LedgerError',
    'Location',
    'Reference',
    'StockBatch',
    'StockMovement',
    'HolderKind',
    'MovementKind',
    'DocumentKind',
]

__version__ = '0.1.0'
