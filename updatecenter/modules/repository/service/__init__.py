"""Repository backends."""

from .base import MANIFEST_PATH, BaseMavenRepository
from .maven_central import REPO_MAVEN_URL, SEARCH_MAVEN_URL, MavenCentralRepository
from .nexus import NexusRepository

__all__ = [
    "MANIFEST_PATH",
    "BaseMavenRepository",
    "REPO_MAVEN_URL",
    "SEARCH_MAVEN_URL",
    "MavenCentralRepository",
    "NexusRepository",
]
