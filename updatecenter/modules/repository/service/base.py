"""Repository facade shared by the public search and repository manager backends."""

from __future__ import annotations

import hashlib
import logging
import zipfile
from pathlib import Path
from typing import BinaryIO, Iterable, Optional, Set, Union

import httpx

from updatecenter.modules.repository.cache import CacheEntry, ContentCache
from updatecenter.modules.repository.domain import (
    ArtifactCoordinates,
    ArtifactMetadata,
    IndexDocument,
    Manifest,
    MavenArtifact,
    RepositoryError,
)
from updatecenter.modules.repository.fileget import ARCHIVE_MEMBER_SEPARATOR, Downloader, hex_to_base64
from updatecenter.modules.repository.index import RemoteIndex

MANIFEST_PATH = "META-INF/MANIFEST.MF"


class BaseMavenRepository:
    """Query-and-fetch interface over a remote Maven index.

    Subclasses provide the remote index query (:meth:`_load_documents`) and
    the download URL of an artifact (:meth:`_download_url`); caching, the
    local mirror and archive access live here.
    """

    def __init__(
        self,
        cache: ContentCache,
        *,
        client: httpx.Client,
        local_repository: Union[str, Path, None] = None,
        auth=None,
    ) -> None:
        self.cache = cache
        self.client = client
        self.local_repository = Path(local_repository).expanduser() if local_repository else None
        self.downloader = Downloader(cache, client=client, auth=auth)
        self.index = RemoteIndex(self.__class__.__name__)
        self.log = logging.getLogger(self.__class__.__name__)

    # ------------------------------------------------------------------ backend hooks
    @property
    def repository_base_url(self) -> str:
        raise NotImplementedError

    def _load_documents(self) -> Iterable[IndexDocument]:
        raise NotImplementedError

    def _download_url(self, artifact: MavenArtifact) -> str:
        raise NotImplementedError

    # ------------------------------------------------------------------ index
    def ensure_index(self) -> None:
        self.index.ensure_built(self._load_documents)

    def list_all_plugins(self) -> Set[ArtifactCoordinates]:
        self.ensure_index()
        return set(self.index.plugins)

    def list_all_packages(self, group_id: Optional[str] = None) -> Set[ArtifactCoordinates]:
        self.ensure_index()
        if group_id is None:
            return set(self.index.packages)
        return {coords for coords in self.index.packages if coords.group_id == group_id}

    def get_metadata(self, artifact: MavenArtifact) -> ArtifactMetadata:
        self.ensure_index()
        coords = artifact.artifact
        document = self.index.get(coords.group_id, coords.artifact_id)
        if document is None:
            raise RepositoryError.not_found(f"no index document for {coords.key}")
        metadata = ArtifactMetadata(timestamp=document.timestamp)

        # only decorate with size and digests when the content is already cached
        entry = self.cache.lookup(self._download_url(artifact))
        if entry.present:
            metadata.size = entry.size
            metadata.sha256 = hex_to_base64(self._digest(entry, "sha256"))
            metadata.sha1 = hex_to_base64(self._digest(entry, "sha1"))
        return metadata

    @staticmethod
    def _digest(entry: CacheEntry, algorithm: str) -> str:
        digest = hashlib.new(algorithm)
        with entry.open() as fh:
            for chunk in iter(lambda: fh.read(65536), b""):
                digest.update(chunk)
        return digest.hexdigest()

    # ------------------------------------------------------------------ content
    def get_manifest(self, artifact: MavenArtifact) -> Manifest:
        stream = self.get_archive_entry(artifact, MANIFEST_PATH)
        if stream is None:
            raise RepositoryError.not_found(f"{artifact.artifact} has no {MANIFEST_PATH}")
        with stream:
            return Manifest.parse(stream.read())

    def get_archive_entry(self, artifact: MavenArtifact, path: str) -> Optional[BinaryIO]:
        """Return a decompressing stream over the first archive entry named ``path``.

        The caller owns the stream and must close it. ``None`` means the
        archive has no such entry.
        """
        entry = self.downloader.fetch(self._download_url(artifact))
        try:
            zf = zipfile.ZipFile(entry.path if entry.path is not None else entry.open())
        except zipfile.BadZipFile as exc:
            raise RepositoryError.decode_failure(f"{artifact.artifact} is not a zip archive: {exc}") from exc
        for info in zf.infolist():
            if info.filename == path:
                stream = zf.open(info)
                # the open member keeps the underlying file alive until it is closed
                zf.close()
                return stream
        zf.close()
        return None

    def fetch_archive_member(self, artifact: MavenArtifact, path: str) -> CacheEntry:
        """Download a single member of the remote archive instead of the whole file."""
        return self.downloader.fetch(f"{self._download_url(artifact)}{ARCHIVE_MEMBER_SEPARATOR}{path}")

    def resolve(self, artifact: Union[ArtifactCoordinates, MavenArtifact]) -> Path:
        if isinstance(artifact, ArtifactCoordinates):
            artifact = MavenArtifact(artifact)
        if self.local_repository is not None:
            local_file = self.local_repository / artifact.artifact.uri
            if local_file.exists():
                self.log.debug("Resolved %s from local repository %s", artifact.artifact, local_file)
                return local_file
        entry = self.downloader.fetch(self._download_url(artifact))
        if entry.path is None:
            raise RepositoryError.illegal_state(f"cache store keeps {artifact.artifact} outside the filesystem")
        return entry.path
