"""Artifact identity objects."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class ArtifactCoordinates:
    """Represents a Maven artifact coordinate (GAV plus packaging)."""

    group_id: str
    artifact_id: str
    version: str
    packaging: str = "jar"

    @property
    def key(self) -> str:
        return f"{self.group_id}:{self.artifact_id}"

    @property
    def path_segments(self) -> List[str]:
        group_path = self.group_id.replace(".", "/")
        filename = f"{self.artifact_id}-{self.version}.{self.packaging}"
        return [group_path, self.artifact_id, self.version, filename]

    @property
    def uri(self) -> str:
        return "/".join(self.path_segments)

    def __str__(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version}:{self.packaging}"


@dataclass(frozen=True)
class MavenArtifact:
    """Coordinates plus the caller context used to build request paths.

    ``repository_id`` lets a caller point a single request at another
    hosted repository than the configured one; backends without a notion
    of repositories ignore it.
    """

    artifact: ArtifactCoordinates
    repository_id: Optional[str] = None

    @property
    def key(self) -> str:
        return self.artifact.key
