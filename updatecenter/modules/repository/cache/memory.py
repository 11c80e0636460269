"""In-memory cache store, used by tests and short-lived embedders."""

from __future__ import annotations

import logging
from typing import Dict, Set

from .base import ABSENT, NEGATIVE, CacheEntry, CacheState, CacheStore

log = logging.getLogger(__name__)


class InMemoryCacheStore(CacheStore):
    """Same write-once rules as the filesystem store: present and negative entries never change."""

    def __init__(self) -> None:
        self.entries: Dict[str, bytes] = {}
        self.negatives: Set[str] = set()

    def lookup(self, key: str) -> CacheEntry:
        if key in self.negatives:
            return NEGATIVE
        if key in self.entries:
            return CacheEntry(CacheState.PRESENT, data=self.entries[key])
        return ABSENT

    def store(self, key: str, data: bytes) -> CacheEntry:
        if key in self.negatives:
            return NEGATIVE
        self.entries[key] = bytes(data)
        return CacheEntry(CacheState.PRESENT, data=self.entries[key])

    def mark_negative(self, key: str) -> None:
        if key in self.entries:
            log.warning("Failed to create cache 'not found' marker %s: content already cached", key)
            return
        self.negatives.add(key)
