"""Health probe route."""

from __future__ import annotations

from typing import Dict

from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/health", summary="Health probe")
def health(request: Request) -> Dict[str, str]:
    payload = {"status": "ok"}
    container = getattr(request.app.state, "container", None)
    if container is not None:
        payload["backend"] = type(container.repository).__name__
        payload["repository"] = container.repository.repository_base_url
    return payload
