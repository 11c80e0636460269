"""Runtime configuration for the update center repository service."""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration values mapped from environment variables (``CACHE_DIR``, ``NEXUS_USERNAME``, ...)."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Update Center Repository API"
    app_version: str = "0.1.0"

    # Public search backend
    search_base_url: str = "https://search.maven.org"
    search_repository_url: str = "https://repo1.maven.org/maven2"
    search_group_filter: str = Field("com.github.nfalco79", description="groupId queried to build the index")
    search_rows: int = Field(200, description="Size of the single result page requested from the index")

    # Authenticated repository manager backend, selected when both credentials are set
    nexus_base_url: str = "http://localhost:8081"
    nexus_repository: str = "releases"
    nexus_username: Optional[str] = None
    nexus_password: Optional[str] = None

    # Local storage
    cache_dir: str = Field("caches/artifactory", description="Directory of the download cache")
    local_repository_dir: str = Field("~/.m2/repository", description="Local Maven mirror checked before any download")

    http_timeout: float = 30.0

    log_level: str = "INFO"
    log_file: Optional[str] = None

    @property
    def credentials_present(self) -> bool:
        return bool(self.nexus_username) and bool(self.nexus_password)


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance for dependency injection."""
    return Settings()
