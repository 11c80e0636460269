from .artifact import ArtifactCoordinates, MavenArtifact
from .errors import ErrorKind, RepositoryError
from .models import (
    PACKAGE_EXTENSION,
    PLUGIN_EXTENSION,
    ArtifactMetadata,
    IndexDocument,
    Manifest,
)

__all__ = [
    "ArtifactCoordinates",
    "MavenArtifact",
    "ErrorKind",
    "RepositoryError",
    "PACKAGE_EXTENSION",
    "PLUGIN_EXTENSION",
    "ArtifactMetadata",
    "IndexDocument",
    "Manifest",
]
