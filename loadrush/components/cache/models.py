"""
Cache component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

# --- Stored Envelope ---


@dataclass(frozen=True)
class CacheEntry:
    """Envelope persisted under a cache key as {"data", "ts", "ttlMs"}."""

    data: Any
    ts: int
    ttl_ms: int

    def is_valid_at(self, now_ms: int) -> bool:
        return now_ms - self.ts <= self.ttl_ms

    def to_json_dict(self) -> dict[str, Any]:
        return {"data": self.data, "ts": self.ts, "ttlMs": self.ttl_ms}


# --- Input Models ---


@dataclass(frozen=True)
class SetCacheInput:
    """Input for writing a cache entry."""

    key: str
    data: Any
    ttl_ms: int


@dataclass(frozen=True)
class GetCacheInput:
    """Input for reading a cache entry."""

    key: str


@dataclass(frozen=True)
class ClearCacheInput:
    """Input for removing a cache entry."""

    key: str


# --- Output Models ---


@dataclass(frozen=True)
class CacheLookup:
    """Result of a cache read."""

    hit: bool
    data: Any = None


@dataclass(frozen=True)
class CacheWriteOutput:
    """Output for set/clear operations."""

    key: str
    success: bool = True
