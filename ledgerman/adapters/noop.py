"""
Noop Document Numbering — Default adapter.

Implements the DocumentNumbering protocol by logging and doing nothing
else. Projects that keep numbering series configure their own backend:

    LEDGERMAN = {
        "DOCUMENT_NUMBERING": "myproject.numbering.SeriesNumbering",
    }
"""

from __future__ import annotations

import logging

from ledgerman.location import Location

logger = logging.getLogger(__name__)


class NoopDocumentNumbering:
    """No-operation numbering backend. Every code is accepted."""

    def confirm(self, document_type: str, code: str, location: Location | None) -> None:
        logger.debug("numbering.confirm %s %s %s", document_type, code, location)

    def cancel(self, document_type: str, code: str, location: Location | None) -> None:
        logger.debug("numbering.cancel %s %s %s", document_type, code, location)
