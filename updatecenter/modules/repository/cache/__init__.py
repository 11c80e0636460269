"""Content cache exports."""

from .base import CacheEntry, CacheState, CacheStore
from .content import CACHE_ENTRY_MAX_LENGTH, ContentCache, cache_key
from .filesystem import FileSystemCacheStore
from .memory import InMemoryCacheStore

__all__ = [
    "CacheEntry",
    "CacheState",
    "CacheStore",
    "CACHE_ENTRY_MAX_LENGTH",
    "ContentCache",
    "cache_key",
    "FileSystemCacheStore",
    "InMemoryCacheStore",
]
