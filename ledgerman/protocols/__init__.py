"""
Ledgerman Protocols.

Defines interfaces for external system integration.
"""

from ledgerman.protocols.numbering import DocumentNumbering

__all__ = [
    "DocumentNumbering",
]
