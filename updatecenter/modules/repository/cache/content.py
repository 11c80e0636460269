"""Content cache keyed by request URL, with an in-memory text mirror."""

from __future__ import annotations

import base64
import logging
from typing import Dict, Optional
from urllib.parse import urlsplit

from updatecenter.modules.repository.domain import RepositoryError

from .base import CacheEntry, CacheStore

log = logging.getLogger(__name__)

CACHE_ENTRY_MAX_LENGTH = 1024 * 64


def cache_key(request_url: str) -> str:
    """Return the cache key of a request: base64 of its query string only.

    Requests whose content differs must differ in their query component,
    host and path do not take part in the key.
    """
    query = urlsplit(request_url).query
    if not query:
        raise RepositoryError.illegal_state(f"request URL has no query component: {request_url}")
    return base64.b64encode(query.encode("utf-8")).decode("ascii")


class ContentCache:
    """Write-once cache in front of a :class:`CacheStore`.

    Payloads up to ``memory_threshold`` bytes are also kept as decoded text,
    keyed by the request URL, both when stored and when read back from the
    store.
    """

    def __init__(self, store: CacheStore, memory_threshold: int = CACHE_ENTRY_MAX_LENGTH) -> None:
        self.store_backend = store
        self.memory_threshold = memory_threshold
        self._memory: Dict[str, str] = {}

    def lookup(self, request_url: str) -> CacheEntry:
        entry = self.store_backend.lookup(cache_key(request_url))
        if entry.present and request_url not in self._memory and entry.size <= self.memory_threshold:
            with entry.open() as fh:
                self._remember(request_url, fh.read())
        return entry

    def store(self, request_url: str, data: bytes) -> CacheEntry:
        entry = self.store_backend.store(cache_key(request_url), data)
        if entry.present and len(data) <= self.memory_threshold:
            self._remember(request_url, data)
        return entry

    def mark_negative(self, request_url: str) -> None:
        self._memory.pop(request_url, None)
        self.store_backend.mark_negative(cache_key(request_url))

    def cached_text(self, request_url: str) -> Optional[str]:
        return self._memory.get(request_url)

    def read_text(self, request_url: str) -> Optional[str]:
        """Return the cached content as text, or ``None`` if it is not present."""
        text = self._memory.get(request_url)
        if text is not None:
            return text
        entry = self.lookup(request_url)
        if not entry.present:
            return None
        text = self._memory.get(request_url)
        if text is None:
            with entry.open() as fh:
                text = fh.read().decode("utf-8", errors="replace")
        return text

    def _remember(self, request_url: str, data: bytes) -> None:
        value = data.decode("utf-8", errors="replace")
        log.debug("Caching in memory: %s (%d bytes)", request_url, len(data))
        self._memory[request_url] = value
