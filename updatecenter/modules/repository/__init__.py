"""Artifact repository module exports."""

from .domain import ArtifactCoordinates, ArtifactMetadata, ErrorKind, IndexDocument, Manifest, MavenArtifact, RepositoryError
from .service import BaseMavenRepository, MavenCentralRepository, NexusRepository

__all__ = [
    "ArtifactCoordinates",
    "ArtifactMetadata",
    "ErrorKind",
    "IndexDocument",
    "Manifest",
    "MavenArtifact",
    "RepositoryError",
    "BaseMavenRepository",
    "MavenCentralRepository",
    "NexusRepository",
]
