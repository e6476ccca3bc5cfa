"""
Document Numbering Protocol — Interface for transaction code sequences.

Ledgerman defines this protocol; the host project implements it to keep
its own numbering series (e.g. "REC-2024-0001") in step with documents
that were actually committed.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ledgerman.location import Location


@runtime_checkable
class DocumentNumbering(Protocol):
    """
    Protocol for document numbering.

    Both methods are called after the document transaction commits, never
    inside it. A failure here cannot roll back stock.
    """

    def confirm(self, document_type: str, code: str, location: Location | None) -> None:
        """
        Mark a code as used.

        Args:
            document_type: DocumentKind value or stock document name
            code: The document code that was committed
            location: Where the document was issued, when it has one
        """
        ...

    def cancel(self, document_type: str, code: str, location: Location | None) -> None:
        """Release a code whose document was destroyed."""
        ...
