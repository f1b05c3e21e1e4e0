"""Process-wide logging configuration."""

from __future__ import annotations

import logging
from typing import Optional

from .config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Apply ``level`` (or ``settings.log_level``) to the root logger.

    httpx logs every request at INFO, so it is held at WARNING unless the
    engine itself runs at DEBUG.
    """

    resolved = (level or settings.log_level).upper()
    logging.basicConfig(level=resolved, format=LOG_FORMAT, force=True)
    logging.getLogger("httpx").setLevel(logging.DEBUG if resolved == "DEBUG" else logging.WARNING)
