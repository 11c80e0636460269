"""Dataclasses describing remote index documents and artifact metadata."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Mapping, Optional

from .artifact import ArtifactCoordinates
from .errors import RepositoryError

PLUGIN_EXTENSION = ".hpi"
PACKAGE_EXTENSION = ".war"


def _extensions(value: Any) -> FrozenSet[str]:
    if value is None:
        return frozenset()
    if not isinstance(value, (list, tuple)) or not all(isinstance(ext, str) for ext in value):
        raise ValueError(f"ec must be a list of extensions, got {value!r}")
    return frozenset(value)


@dataclass(frozen=True)
class IndexDocument:
    """Latest-known descriptor of an artifact as published by the remote index."""

    id: str
    group_id: str
    artifact_id: str
    latest_version: str
    packaging: str
    timestamp: int = 0
    extensions: FrozenSet[str] = frozenset()

    @property
    def key(self) -> str:
        return f"{self.group_id}:{self.artifact_id}"

    @property
    def is_plugin(self) -> bool:
        return PLUGIN_EXTENSION in self.extensions

    @property
    def is_package(self) -> bool:
        return PACKAGE_EXTENSION in self.extensions

    def to_coordinates(self) -> ArtifactCoordinates:
        return ArtifactCoordinates(
            group_id=self.group_id,
            artifact_id=self.artifact_id,
            version=self.latest_version,
            packaging=self.packaging,
        )

    @classmethod
    def from_search_doc(cls, doc: Mapping[str, Any]) -> "IndexDocument":
        """Build a document from one entry of a search ``response.docs`` list."""
        try:
            group_id = doc["g"]
            artifact_id = doc["a"]
            return cls(
                id=doc.get("id") or f"{group_id}:{artifact_id}",
                group_id=group_id,
                artifact_id=artifact_id,
                latest_version=doc["latestVersion"],
                packaging=doc.get("p") or "jar",
                timestamp=int(doc.get("timestamp") or 0),
                extensions=_extensions(doc.get("ec")),
            )
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise RepositoryError.decode_failure(f"malformed search document {doc!r}: {exc}") from exc


@dataclass
class ArtifactMetadata:
    timestamp: int = 0
    size: int = 0
    sha1: Optional[str] = None
    sha256: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "size": self.size,
            "sha1": self.sha1,
            "sha256": self.sha256,
        }


@dataclass
class Manifest:
    """Main section of a ``META-INF/MANIFEST.MF`` file."""

    main_attributes: Dict[str, str] = field(default_factory=dict)

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.main_attributes.get(name, default)

    @classmethod
    def parse(cls, raw: bytes) -> "Manifest":
        text = raw.decode("utf-8", errors="replace")
        attributes: Dict[str, str] = {}
        last_key: Optional[str] = None
        for line in text.splitlines():
            if not line.strip():
                # blank line closes the main section
                if attributes:
                    break
                continue
            if line.startswith(" ") and last_key is not None:
                attributes[last_key] += line[1:]
                continue
            if ":" not in line:
                raise RepositoryError.decode_failure(f"invalid manifest header line {line!r}")
            key, value = line.split(":", 1)
            last_key = key.strip()
            attributes[last_key] = value[1:] if value.startswith(" ") else value
        return cls(main_attributes=attributes)
