"""
Cache component - TTL memoization of derived values.

Invariants:
- An entry is a hit only while now - ts <= ttlMs
- Expired and malformed entries are evicted by the read that finds them
- Store failures surface as misses, never as exceptions
"""

from __future__ import annotations

from ._impl import TTLCache
from .models import (
    CacheLookup,
    CacheWriteOutput,
    ClearCacheInput,
    GetCacheInput,
    SetCacheInput,
)
from .ports import KeyValueStorePort, TimePort


def _create_cache(
    store: KeyValueStorePort,
    time_port: TimePort | None,
) -> TTLCache:
    return TTLCache(store=store, time_port=time_port)


# --- Component Entry Points ---


def run_set(
    inp: SetCacheInput,
    *,
    store: KeyValueStorePort,
    time_port: TimePort | None = None,
) -> CacheWriteOutput:
    """Write data under a key with a TTL in milliseconds."""
    cache = _create_cache(store, time_port)
    success = cache.set(inp.key, inp.data, inp.ttl_ms)
    return CacheWriteOutput(key=inp.key, success=success)


def run_get(
    inp: GetCacheInput,
    *,
    store: KeyValueStorePort,
    time_port: TimePort | None = None,
) -> CacheLookup:
    """Read a key, evicting it if expired or malformed."""
    return _create_cache(store, time_port).get(inp.key)


def run_clear(
    inp: ClearCacheInput,
    *,
    store: KeyValueStorePort,
    time_port: TimePort | None = None,
) -> CacheWriteOutput:
    """Remove a key."""
    success = _create_cache(store, time_port).clear(inp.key)
    return CacheWriteOutput(key=inp.key, success=success)


def run(
    inp: SetCacheInput | GetCacheInput | ClearCacheInput,
    *,
    store: KeyValueStorePort,
    time_port: TimePort | None = None,
) -> CacheLookup | CacheWriteOutput:
    """
    Main entry point for the cache component.

    Dispatches to appropriate handler based on input type.
    """
    if isinstance(inp, SetCacheInput):
        return run_set(inp, store=store, time_port=time_port)
    elif isinstance(inp, GetCacheInput):
        return run_get(inp, store=store, time_port=time_port)
    elif isinstance(inp, ClearCacheInput):
        return run_clear(inp, store=store, time_port=time_port)
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
