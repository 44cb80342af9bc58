"""
Cache component port definitions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol


class KeyValueStorePort(Protocol):
    """String key/value backing store."""

    def get_item(self, key: str) -> str | None:
        """Return the stored value, or None if absent."""
        ...

    def set_item(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        ...

    def remove_item(self, key: str) -> None:
        """Remove key. Removing an absent key is not an error."""
        ...


class TimePort(Protocol):
    """Time source for entry timestamps."""

    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...
