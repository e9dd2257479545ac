"""Logging setup shared by the API and the dashboard client."""

import logging
import sys

from src.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
ROOT_LOGGER = "src"


def configure_logging(level: str | None = None) -> logging.Logger:
    """
    Install a single stream handler on the ``src`` logger.

    In production DEBUG output is never emitted, whatever ``LOG_LEVEL`` says.
    Calling this more than once replaces the handler instead of stacking them.
    """
    level_name = (level or settings.log_level).upper()
    if settings.is_production and level_name == "DEBUG":
        level_name = "INFO"

    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        if getattr(handler, "_studio_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._studio_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level_name, logging.INFO))
    return logger
