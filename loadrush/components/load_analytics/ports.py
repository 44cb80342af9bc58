"""
Load analytics component port definitions.
"""

from __future__ import annotations

from typing import Any, Protocol

from loadrush.components.cache import CacheLookup
from loadrush.domain.entities import LoadRecord


class LoadReaderPort(Protocol):
    """Read capability of the load store."""

    def get_by_id(self, load_id: str) -> LoadRecord | None:
        """Get load by ID."""
        ...


class AnalyticsCachePort(Protocol):
    """Memoization store for computed results."""

    def get(self, key: str) -> CacheLookup:
        """Read a cached value."""
        ...

    def set(self, key: str, data: Any, ttl_ms: int) -> bool:
        """Write a cached value."""
        ...

    def clear(self, key: str) -> bool:
        """Remove a cached value."""
        ...
