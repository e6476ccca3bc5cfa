"""
Ledgerman configuration.

Usage in settings.py:
    LEDGERMAN = {
        "ADJUSTMENT_COST_POLICY": "last_known",
        "COST_DECIMAL_PLACES": 4,
        "VERIFY_AFTER_WRITE": False,
        "DOCUMENT_NUMBERING": "ledgerman.adapters.noop.NoopDocumentNumbering",
    }
"""

from dataclasses import dataclass
from typing import Any

from django.conf import settings


ADJUSTMENT_COST_POLICIES = ('last_known', 'zero')


@dataclass
class LedgermanSettings:
    """Ledgerman configuration settings."""

    # Unit cost of batches created by positive adjustments without explicit cost
    ADJUSTMENT_COST_POLICY: str = "last_known"

    # Quantization of derived unit costs (transfer weighted average)
    COST_DECIMAL_PLACES: int = 4

    # Replay movements against batches after every allocator write
    VERIFY_AFTER_WRITE: bool = False

    # Document numbering backend (dotted path)
    DOCUMENT_NUMBERING: str = "ledgerman.adapters.noop.NoopDocumentNumbering"


def get_ledgerman_settings() -> LedgermanSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "LEDGERMAN", {})
    return LedgermanSettings(**{
        k: v for k, v in user_settings.items()
        if k in LedgermanSettings.__dataclass_fields__
    })


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_ledgerman_settings(), name)


ledgerman_settings = _LazySettings()
