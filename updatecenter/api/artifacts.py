"""Read-only HTTP surface over the artifact repository."""

from __future__ import annotations

from typing import Any, Dict, List, NoReturn, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import FileResponse

from updatecenter.modules.repository import (
    ArtifactCoordinates,
    BaseMavenRepository,
    ErrorKind,
    MavenArtifact,
    RepositoryError,
)

router = APIRouter(tags=["artifacts"])

_STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.NETWORK_FAILURE: 502,
    ErrorKind.DECODE_FAILURE: 502,
    ErrorKind.ILLEGAL_STATE: 500,
}


def get_repository(request: Request) -> BaseMavenRepository:
    container = getattr(request.app.state, "container", None)
    if not container or not getattr(container, "repository", None):
        raise HTTPException(status_code=500, detail="Artifact repository not initialized.")
    return container.repository


def _raise_http(exc: RepositoryError) -> NoReturn:
    raise HTTPException(status_code=_STATUS_BY_KIND[exc.kind], detail=str(exc)) from exc


def _as_dict(coords: ArtifactCoordinates) -> Dict[str, str]:
    return {
        "groupId": coords.group_id,
        "artifactId": coords.artifact_id,
        "version": coords.version,
        "packaging": coords.packaging,
    }


def _sorted(items) -> List[Dict[str, str]]:
    return [_as_dict(c) for c in sorted(items, key=lambda c: (c.group_id, c.artifact_id, c.version))]


@router.get("/plugins")
def list_plugins(repo: BaseMavenRepository = Depends(get_repository)) -> List[Dict[str, str]]:
    try:
        return _sorted(repo.list_all_plugins())
    except RepositoryError as exc:
        _raise_http(exc)


@router.get("/packages")
def list_packages(
    group_id: Optional[str] = None,
    repo: BaseMavenRepository = Depends(get_repository),
) -> List[Dict[str, str]]:
    try:
        return _sorted(repo.list_all_packages(group_id))
    except RepositoryError as exc:
        _raise_http(exc)


@router.get("/artifacts/{group_id}/{artifact_id}/{version}/{packaging}/metadata")
def artifact_metadata(
    group_id: str,
    artifact_id: str,
    version: str,
    packaging: str,
    repo: BaseMavenRepository = Depends(get_repository),
) -> Dict[str, Any]:
    artifact = MavenArtifact(ArtifactCoordinates(group_id, artifact_id, version, packaging))
    try:
        return repo.get_metadata(artifact).as_dict()
    except RepositoryError as exc:
        _raise_http(exc)


@router.get("/artifacts/{group_id}/{artifact_id}/{version}/{packaging}/manifest")
def artifact_manifest(
    group_id: str,
    artifact_id: str,
    version: str,
    packaging: str,
    repo: BaseMavenRepository = Depends(get_repository),
) -> Dict[str, str]:
    artifact = MavenArtifact(ArtifactCoordinates(group_id, artifact_id, version, packaging))
    try:
        return repo.get_manifest(artifact).main_attributes
    except RepositoryError as exc:
        _raise_http(exc)


@router.get("/artifacts/{group_id}/{artifact_id}/{version}/{packaging}/download")
def artifact_download(
    group_id: str,
    artifact_id: str,
    version: str,
    packaging: str,
    repo: BaseMavenRepository = Depends(get_repository),
):
    coords = ArtifactCoordinates(group_id, artifact_id, version, packaging)
    try:
        path = repo.resolve(coords)
    except RepositoryError as exc:
        _raise_http(exc)
    return FileResponse(
        path,
        media_type="application/octet-stream",
        filename=coords.path_segments[-1],
    )
