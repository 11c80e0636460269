"""Cache store contract shared by the filesystem and in-memory stores."""

from __future__ import annotations

import io
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Optional


class CacheState(str, Enum):
    ABSENT = "ABSENT"
    NEGATIVE = "NEGATIVE"
    PRESENT = "PRESENT"


@dataclass(frozen=True)
class CacheEntry:
    state: CacheState
    path: Optional[Path] = None
    data: Optional[bytes] = None

    @property
    def present(self) -> bool:
        return self.state is CacheState.PRESENT

    @property
    def negative(self) -> bool:
        return self.state is CacheState.NEGATIVE

    @property
    def size(self) -> int:
        if self.path is not None:
            return self.path.stat().st_size
        return len(self.data or b"")

    def open(self) -> BinaryIO:
        if not self.present:
            raise ValueError(f"cannot open a {self.state.value} cache entry")
        if self.path is not None:
            return open(self.path, "rb")
        return io.BytesIO(self.data or b"")


ABSENT = CacheEntry(CacheState.ABSENT)
NEGATIVE = CacheEntry(CacheState.NEGATIVE)


class CacheStore:
    """Persistent write-once store addressed by cache key."""

    def lookup(self, key: str) -> CacheEntry:
        raise NotImplementedError

    def store(self, key: str, data: bytes) -> CacheEntry:
        raise NotImplementedError

    def mark_negative(self, key: str) -> None:
        raise NotImplementedError
