"""Backend reading an authenticated Nexus 3 repository manager."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union
from urllib.parse import urlencode

import httpx

from updatecenter.modules.repository.cache import ContentCache
from updatecenter.modules.repository.domain import IndexDocument, MavenArtifact, RepositoryError

from .base import BaseMavenRepository

_PACKAGING_PREFERENCE = ("hpi", "war", "jar")


def _parse_timestamp(value: Optional[str]) -> int:
    if not value:
        return 0
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return 0
    return int(parsed.timestamp() * 1000)


def _asset_extension(asset: Mapping[str, Any]) -> Optional[str]:
    maven = asset.get("maven2") or {}
    extension = maven.get("extension")
    if not extension:
        return None
    classifier = maven.get("classifier")
    if classifier:
        return f"-{classifier}.{extension}"
    return f".{extension}"


class NexusRepository(BaseMavenRepository):
    """Index from ``/service/rest/v1/search``, content from its asset download endpoint."""

    def __init__(
        self,
        cache: ContentCache,
        *,
        client: httpx.Client,
        base_url: str,
        repository: str,
        username: str,
        password: str,
        group_filter: Optional[str] = None,
        local_repository: Union[str, Path, None] = None,
    ) -> None:
        super().__init__(cache, client=client, local_repository=local_repository, auth=(username, password))
        self.base_url = base_url.rstrip("/")
        self.repository = repository
        self.group_filter = group_filter
        self._auth: Tuple[str, str] = (username, password)

    @property
    def repository_base_url(self) -> str:
        return f"{self.base_url}/repository/{self.repository}"

    def _download_url(self, artifact: MavenArtifact) -> str:
        coords = artifact.artifact
        params = {
            "repository": artifact.repository_id or self.repository,
            "group": coords.group_id,
            "name": coords.artifact_id,
            "version": coords.version,
            "maven.extension": coords.packaging,
        }
        return f"{self.base_url}/service/rest/v1/search/assets/download?{urlencode(params)}"

    def _load_documents(self) -> List[IndexDocument]:
        search_url = f"{self.base_url}/service/rest/v1/search"
        params: Dict[str, str] = {
            "repository": self.repository,
            "format": "maven2",
            "sort": "version",
            "direction": "desc",
        }
        if self.group_filter:
            params["group"] = self.group_filter
        try:
            resp = self.client.get(search_url, params=params, auth=self._auth)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            raise RepositoryError.network_failure(f"search request {search_url} failed: {exc}") from exc
        try:
            data = resp.json()
            items = data.get("items") or []
        except (ValueError, AttributeError) as exc:
            raise RepositoryError.decode_failure(f"unexpected search response from {search_url}: {exc}") from exc

        documents: Dict[str, IndexDocument] = {}
        for item in items:
            document = self._to_document(item)
            # items arrive newest version first
            documents.setdefault(document.key, document)
        if data.get("continuationToken"):
            self.log.warning(
                "Search of repository %s returned more than one page; only %d items were read",
                self.repository,
                len(items),
            )
        return list(documents.values())

    def _to_document(self, item: Mapping[str, Any]) -> IndexDocument:
        try:
            group_id = item["group"]
            artifact_id = item["name"]
            version = item["version"]
            assets = item.get("assets") or []
        except (KeyError, TypeError) as exc:
            raise RepositoryError.decode_failure(f"malformed search item {item!r}: {exc}") from exc
        extensions = {ext for ext in (_asset_extension(asset) for asset in assets) if ext}
        plain = [ext[1:] for ext in extensions if ext.startswith(".")]
        packaging = next((p for p in _PACKAGING_PREFERENCE if p in plain), None)
        if packaging is None:
            packaging = next((p for p in sorted(plain) if p != "pom"), "pom" if plain else "jar")
        timestamp = max((_parse_timestamp(asset.get("lastModified")) for asset in assets), default=0)
        return IndexDocument(
            id=item.get("id") or f"{group_id}:{artifact_id}:{version}",
            group_id=group_id,
            artifact_id=artifact_id,
            latest_version=version,
            packaging=packaging,
            timestamp=timestamp,
            extensions=frozenset(extensions),
        )
