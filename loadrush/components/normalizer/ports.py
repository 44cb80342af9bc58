"""
Normalizer component port definitions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from loadrush.domain.entities import LoadRecord


class LoadWriterPort(Protocol):
    """Store capability used by bulk import."""

    def save(self, load: LoadRecord) -> LoadRecord:
        """Insert or replace a load."""
        ...


class TimePort(Protocol):
    """Server time source for createdAt."""

    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...
