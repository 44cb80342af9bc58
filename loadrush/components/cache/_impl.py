"""
TTLCache - Time-to-live cache over a key/value store.

Key behaviors:
- Entries are JSON envelopes {"data", "ts", "ttlMs"} with ts in epoch millis
- An entry is valid while now - ts <= ttlMs
- Expired or malformed entries are evicted on read and reported as misses
- Backing store failures never propagate; reads degrade to misses

The get-then-evict sequence is not atomic. Two readers of the same expired
entry may both remove it, which is harmless.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from loadrush.adapters.clock import SystemClock, to_epoch_ms

from .models import CacheEntry, CacheLookup
from .ports import KeyValueStorePort, TimePort

logger = logging.getLogger(__name__)

MISS = CacheLookup(hit=False, data=None)


# --- Envelope Parsing ---


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def parse_entry(raw: str) -> CacheEntry | None:
    """
    Parse a stored envelope.

    Returns None if the payload is not JSON or lacks numeric ts/ttlMs.
    """
    try:
        parsed = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        return None

    if not isinstance(parsed, dict):
        return None

    ts = parsed.get("ts")
    ttl_ms = parsed.get("ttlMs")
    if not _is_number(ts) or not _is_number(ttl_ms):
        return None

    return CacheEntry(data=parsed.get("data"), ts=ts, ttl_ms=ttl_ms)


# --- In-Memory Store ---


class InMemoryKeyValueStore:
    """In-memory key/value store for testing/dev."""

    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


# --- Cache ---


class TTLCache:
    """
    Time-to-live cache.

    The backing store is a collaborator; this class only owns the envelope
    format and the expiry arithmetic.
    """

    def __init__(
        self,
        store: KeyValueStorePort | None = None,
        time_port: TimePort | None = None,
    ) -> None:
        self._store = store if store is not None else InMemoryKeyValueStore()
        self._time = time_port or SystemClock()

    def _now_ms(self) -> int:
        return to_epoch_ms(self._time.now_utc())

    def set(self, key: str, data: Any, ttl_ms: int) -> bool:
        """Store data under key, overwriting any prior entry."""
        entry = CacheEntry(data=data, ts=self._now_ms(), ttl_ms=ttl_ms)
        try:
            payload = json.dumps(entry.to_json_dict())
        except (TypeError, ValueError):
            logger.warning("Cache value for %s is not JSON serializable", key)
            return False

        try:
            self._store.set_item(key, payload)
        except Exception:
            logger.warning("Cache set failed for %s", key, exc_info=True)
            return False

        logger.debug("Cache set %s (ttl %dms)", key, ttl_ms)
        return True

    def get(self, key: str) -> CacheLookup:
        """
        Read key.

        Evicts the entry when it is malformed or older than its TTL, so a
        stale read is followed by misses until the key is set again.
        """
        try:
            raw = self._store.get_item(key)
        except Exception:
            logger.warning("Cache get failed for %s", key, exc_info=True)
            return MISS

        if not raw:
            return MISS

        entry = parse_entry(raw)
        if entry is None:
            logger.info("Cache entry %s is malformed, evicting", key)
            self._evict(key)
            return MISS

        now_ms = self._now_ms()
        if not entry.is_valid_at(now_ms):
            logger.debug(
                "Cache expired %s (age %dms > %dms)", key, now_ms - entry.ts, entry.ttl_ms
            )
            self._evict(key)
            return MISS

        logger.debug("Cache hit %s (age %dms)", key, now_ms - entry.ts)
        return CacheLookup(hit=True, data=entry.data)

    def clear(self, key: str) -> bool:
        """Remove key."""
        return self._evict(key)

    def _evict(self, key: str) -> bool:
        try:
            self._store.remove_item(key)
        except Exception:
            logger.warning("Cache eviction failed for %s", key, exc_info=True)
            return False
        return True


# --- Factory ---


def create_ttl_cache(
    store: KeyValueStorePort | None = None,
    time_port: TimePort | None = None,
) -> TTLCache:
    """Create a TTLCache."""
    return TTLCache(store=store, time_port=time_port)
