"""One-time lookup of the remote index, partitioned into plugins and packages."""

from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Callable, Dict, FrozenSet, Iterable, Mapping, Optional

from updatecenter.modules.repository.domain import ArtifactCoordinates, IndexDocument, RepositoryError

log = logging.getLogger(__name__)

DocumentLoader = Callable[[], Iterable[IndexDocument]]


class IndexState(str, Enum):
    UNINITIALIZED = "UNINITIALIZED"
    BUILDING = "BUILDING"
    READY = "READY"


class RemoteIndex:
    """Latest-known document per ``group:artifact``, built once and then read-only."""

    def __init__(self, name: str = "remote-index") -> None:
        self.name = name
        self._state = IndexState.UNINITIALIZED
        self._lock = threading.Lock()
        self._documents: Dict[str, IndexDocument] = {}
        self._plugins: FrozenSet[ArtifactCoordinates] = frozenset()
        self._packages: FrozenSet[ArtifactCoordinates] = frozenset()

    @property
    def state(self) -> IndexState:
        return self._state

    @property
    def ready(self) -> bool:
        return self._state is IndexState.READY

    def ensure_built(self, loader: DocumentLoader) -> None:
        if self._state is IndexState.READY:
            return
        with self._lock:
            if self._state is IndexState.READY:
                return
            self._build_locked(loader)

    def build(self, loader: DocumentLoader) -> None:
        """Build the index; calling it a second time is an error."""
        with self._lock:
            self._build_locked(loader)

    def _build_locked(self, loader: DocumentLoader) -> None:
        if self._state is not IndexState.UNINITIALIZED:
            raise RepositoryError.illegal_state(f"{self.name} re-initialized (state={self._state.value})")
        self._state = IndexState.BUILDING
        log.info("Initializing %s", self.name)
        try:
            documents: Dict[str, IndexDocument] = {}
            for document in loader():
                documents[document.key] = document
        except Exception:
            self._state = IndexState.UNINITIALIZED
            raise
        self._documents = documents
        self._plugins = frozenset(doc.to_coordinates() for doc in documents.values() if doc.is_plugin)
        self._packages = frozenset(doc.to_coordinates() for doc in documents.values() if doc.is_package)
        self._state = IndexState.READY
        log.info(
            "Initialized %s with %d documents (%d plugins, %d packages)",
            self.name,
            len(documents),
            len(self._plugins),
            len(self._packages),
        )

    def _require_ready(self) -> None:
        if self._state is not IndexState.READY:
            raise RepositoryError.illegal_state(f"{self.name} is not built yet (state={self._state.value})")

    @property
    def plugins(self) -> FrozenSet[ArtifactCoordinates]:
        self._require_ready()
        return self._plugins

    @property
    def packages(self) -> FrozenSet[ArtifactCoordinates]:
        self._require_ready()
        return self._packages

    @property
    def documents(self) -> Mapping[str, IndexDocument]:
        self._require_ready()
        return dict(self._documents)

    def get(self, group_id: str, artifact_id: str) -> Optional[IndexDocument]:
        self._require_ready()
        return self._documents.get(f"{group_id}:{artifact_id}")
