"""FastAPI application factory."""

from __future__ import annotations

from typing import Optional

from fastapi import FastAPI

from .api import artifacts_router, health_router
from .bootstrap import ServiceContainer
from .logging_config import configure_logging
from .settings import Settings, get_settings


def create_app(settings: Optional[Settings] = None, container: Optional[ServiceContainer] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)

    services = container or ServiceContainer(settings)

    app = FastAPI(title=settings.app_name, version=settings.app_version)
    app.include_router(health_router)
    app.include_router(artifacts_router)
    app.state.container = services

    @app.on_event("shutdown")
    def _shutdown() -> None:  # pragma: no cover - invoked by FastAPI
        services.close()

    return app
