"""Logging configuration helpers."""

import logging

from app.core.config import settings


def configure_logging(level: str = settings.LOG_LEVEL) -> None:
    """Configure application logging with a single stream handler."""
    logger = logging.getLogger("app")
    logger.setLevel(level.upper())
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s: %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
