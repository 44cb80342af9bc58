"""
Cache component - TTL memoization over a key/value store.
"""

from ._impl import InMemoryKeyValueStore, TTLCache, create_ttl_cache, parse_entry
from .component import run, run_clear, run_get, run_set
from .models import (
    CacheEntry,
    CacheLookup,
    CacheWriteOutput,
    ClearCacheInput,
    GetCacheInput,
    SetCacheInput,
)
from .ports import KeyValueStorePort, TimePort

__all__ = [
    # Entry points
    "run",
    "run_clear",
    "run_get",
    "run_set",
    # Input models
    "ClearCacheInput",
    "GetCacheInput",
    "SetCacheInput",
    # Output models
    "CacheEntry",
    "CacheLookup",
    "CacheWriteOutput",
    # Ports
    "KeyValueStorePort",
    "TimePort",
    # Implementation
    "InMemoryKeyValueStore",
    "TTLCache",
    "create_ttl_cache",
    "parse_entry",
]
