"""Backend selection and the process-wide service container."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

import httpx

from updatecenter.modules.repository.cache import ContentCache, FileSystemCacheStore
from updatecenter.modules.repository.service import (
    BaseMavenRepository,
    MavenCentralRepository,
    NexusRepository,
)

from .settings import Settings

log = logging.getLogger(__name__)


def build_http_client(settings: Settings) -> httpx.Client:
    return httpx.Client(timeout=settings.http_timeout, follow_redirects=True)


def select_backend(
    settings: Settings,
    client: Optional[httpx.Client] = None,
    cache: Optional[ContentCache] = None,
) -> BaseMavenRepository:
    """Build the repository backend: Nexus when credentials are configured, Maven Central otherwise."""
    client = client or build_http_client(settings)
    cache = cache or ContentCache(FileSystemCacheStore(settings.cache_dir))
    if settings.credentials_present:
        log.info(
            "Using Nexus repository %s at %s as user %s",
            settings.nexus_repository,
            settings.nexus_base_url,
            settings.nexus_username,
        )
        return NexusRepository(
            cache,
            client=client,
            base_url=settings.nexus_base_url,
            repository=settings.nexus_repository,
            username=settings.nexus_username,
            password=settings.nexus_password,
            group_filter=settings.search_group_filter,
            local_repository=settings.local_repository_dir,
        )
    log.info("Using Maven Central search at %s (group %s)", settings.search_base_url, settings.search_group_filter)
    return MavenCentralRepository(
        cache,
        client=client,
        group_filter=settings.search_group_filter,
        search_url=settings.search_base_url,
        repository_url=settings.search_repository_url,
        rows=settings.search_rows,
        local_repository=settings.local_repository_dir,
    )


@dataclass
class ServiceContainer:
    """Holds the single repository instance shared by every consumer."""

    settings: Settings
    client: Optional[httpx.Client] = None
    repository: BaseMavenRepository = field(init=False)

    def __post_init__(self) -> None:
        self.repository = select_backend(self.settings, client=self.client)

    def close(self) -> None:
        self.repository.client.close()
