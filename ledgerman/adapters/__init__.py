"""
Ledgerman Adapters.

Implementations of protocols for external systems.
"""

from ledgerman.adapters.noop import NoopDocumentNumbering
from ledgerman.adapters.numbering import (
    get_document_numbering,
    reset_document_numbering,
)

__all__ = [
    "NoopDocumentNumbering",
    "get_document_numbering",
    "reset_document_numbering",
]
