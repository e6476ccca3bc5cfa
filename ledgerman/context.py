"""
Acting context — who performs a document operation, and from where.

Passed explicitly into document services instead of being read from a
request or thread-local.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ActingContext:
    """User and branch a document is attributed to."""

    user: Any = None
    branch: Any = None

    @property
    def location(self):
        """Location of the acting branch, or None."""
        if self.branch is None:
            return None
        return self.branch.location
