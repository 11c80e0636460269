"""Disk-backed cache store.

Each key maps to a path below the cache directory. A regular file holds
cached content; a directory at the same path records a fetch that failed
and must not be retried.
"""

from __future__ import annotations

import logging
import os
import uuid
from pathlib import Path
from typing import Union

from .base import ABSENT, NEGATIVE, CacheEntry, CacheState, CacheStore

log = logging.getLogger(__name__)


class FileSystemCacheStore(CacheStore):
    def __init__(self, directory: Union[str, Path]) -> None:
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        return self.directory / key

    def lookup(self, key: str) -> CacheEntry:
        path = self.path_for(key)
        if path.is_dir():
            return NEGATIVE
        if path.is_file():
            return CacheEntry(CacheState.PRESENT, path=path)
        return ABSENT

    def store(self, key: str, data: bytes) -> CacheEntry:
        target = self.path_for(key)
        if target.is_dir():
            return NEGATIVE
        target.parent.mkdir(parents=True, exist_ok=True)
        tmp = target.with_name(f".{target.name}.{uuid.uuid4().hex}.tmp")
        try:
            with open(tmp, "wb") as fh:
                fh.write(data)
            os.replace(tmp, target)
        finally:
            if tmp.exists():
                tmp.unlink()
        log.debug("Stored %d bytes in cache file %s", len(data), target)
        return CacheEntry(CacheState.PRESENT, path=target)

    def mark_negative(self, key: str) -> None:
        target = self.path_for(key)
        try:
            target.mkdir(parents=True)
        except OSError as exc:
            log.warning("Failed to create cache 'not found' directory %s: %s", target, exc)
