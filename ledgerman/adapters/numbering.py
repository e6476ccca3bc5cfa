"""
Ledgerman Numbering Adapter — loads the configured numbering backend.

Usage:
    from ledgerman.adapters import get_document_numbering

    numbering = get_document_numbering()
    numbering.confirm("goods_receipt", "REC-0001", location)

Settings:
    LEDGERMAN = {
        "DOCUMENT_NUMBERING": "ledgerman.adapters.noop.NoopDocumentNumbering",
    }
"""

from __future__ import annotations

import logging
import threading

from django.core.exceptions import ImproperlyConfigured
from django.utils.module_loading import import_string

from ledgerman.conf import ledgerman_settings
from ledgerman.protocols.numbering import DocumentNumbering

logger = logging.getLogger(__name__)


# Cached backend instance
_lock = threading.Lock()
_document_numbering: DocumentNumbering | None = None


def get_document_numbering() -> DocumentNumbering:
    """
    Return the configured numbering backend.

    Raises:
        ImproperlyConfigured: If DOCUMENT_NUMBERING is empty, fails to
            import, or does not implement DocumentNumbering
    """
    global _document_numbering

    if _document_numbering is None:
        with _lock:
            if _document_numbering is None:  # double-checked
                backend_path = ledgerman_settings.DOCUMENT_NUMBERING

                if not backend_path:
                    raise ImproperlyConfigured(
                        "LEDGERMAN['DOCUMENT_NUMBERING'] must be configured. "
                        "Example: 'ledgerman.adapters.noop.NoopDocumentNumbering'"
                    )

                try:
                    backend_class = import_string(backend_path)
                except ImportError as e:
                    raise ImproperlyConfigured(
                        f"Failed to import numbering backend '{backend_path}': {e}"
                    ) from e

                backend = backend_class()
                if not isinstance(backend, DocumentNumbering):
                    raise ImproperlyConfigured(
                        f"'{backend_path}' does not implement DocumentNumbering"
                    )
                _document_numbering = backend
                logger.debug("Loaded numbering backend: %s", backend_path)

    return _document_numbering


def reset_document_numbering() -> None:
    """Reset the cached backend. Useful for testing."""
    global _document_numbering
    _document_numbering = None
