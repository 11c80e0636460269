"""Backend reading the public Maven Central search service."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Union

import httpx

from updatecenter.modules.repository.cache import ContentCache
from updatecenter.modules.repository.domain import IndexDocument, MavenArtifact, RepositoryError

from .base import BaseMavenRepository

REPO_MAVEN_URL = "https://repo1.maven.org/maven2"
SEARCH_MAVEN_URL = "https://search.maven.org"


class MavenCentralRepository(BaseMavenRepository):
    """Index from ``solrsearch/select``, content from ``remotecontent?filepath=``."""

    def __init__(
        self,
        cache: ContentCache,
        *,
        client: httpx.Client,
        group_filter: str,
        search_url: str = SEARCH_MAVEN_URL,
        repository_url: str = REPO_MAVEN_URL,
        rows: int = 200,
        local_repository: Union[str, Path, None] = None,
    ) -> None:
        super().__init__(cache, client=client, local_repository=local_repository)
        self.group_filter = group_filter
        self.search_url = search_url.rstrip("/")
        self.repository_url = repository_url.rstrip("/")
        self.rows = rows

    @property
    def repository_base_url(self) -> str:
        return self.repository_url

    def _download_url(self, artifact: MavenArtifact) -> str:
        return f"{self.search_url}/remotecontent?filepath={artifact.artifact.uri}"

    def _load_documents(self) -> List[IndexDocument]:
        url = f"{self.search_url}/solrsearch/select"
        params = {"q": f"g:{self.group_filter}", "rows": self.rows, "wt": "json"}
        try:
            resp = self.client.get(url, params=params)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            raise RepositoryError.network_failure(f"search request {url} failed: {exc}") from exc
        try:
            payload = resp.json()
            response = payload["response"]
            docs = response["docs"]
        except (ValueError, KeyError, TypeError) as exc:
            raise RepositoryError.decode_failure(f"unexpected search response from {url}: {exc}") from exc

        documents = [IndexDocument.from_search_doc(doc) for doc in docs]
        num_found: Optional[int] = response.get("numFound")
        if num_found is not None and num_found > len(documents):
            # single page only, the rest of the result set is not retrieved
            self.log.warning(
                "Search for g:%s returned %d of %d documents; the index is truncated",
                self.group_filter,
                len(documents),
                num_found,
            )
        return documents
