"""Central logging configuration driven by LOG_LEVEL and LOG_FILE."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .settings import Settings, get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_CONFIGURED = False


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Configure root logging once; later calls are ignored."""
    global _CONFIGURED
    if _CONFIGURED:
        return

    settings = settings or get_settings()
    level = _map_level(settings.log_level)
    if settings.log_file:
        log_file = Path(settings.log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logging.basicConfig(level=level, filename=log_file, filemode="a", format=LOG_FORMAT)
    else:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
    _CONFIGURED = True


def _map_level(raw: str) -> int:
    value = logging.getLevelName(str(raw).strip().upper())
    if isinstance(value, int):
        return value
    return logging.INFO
