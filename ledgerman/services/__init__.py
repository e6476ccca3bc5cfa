"""
Ledger services — modular organization of ledger operations.

    from ledgerman.services import BatchAllocator, LedgerQueries, StatusResolver
"""

from ledgerman.services.allocator import BatchAllocator, TransferResult
from ledgerman.services.queries import LedgerQueries
from ledgerman.services.resolver import FulfillmentState, StatusResolver

__all__ = [
    'BatchAllocator',
    'TransferResult',
    'LedgerQueries',
    'StatusResolver',
    'FulfillmentState',
]
