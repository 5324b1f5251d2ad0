"""Logging configuration for fleetcache.

Modules log through logging.getLogger(__name__), so everything lands under
the "fleetcache" logger. The package never touches the root logger; hosts
that want fleetcache output on stdout call setup_logging() once.
"""

import logging
import sys

from fleetcache.core.config import get_settings

PACKAGE_LOGGER = "fleetcache"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: int | None = None) -> logging.Logger:
    """Attach a stdout handler to the fleetcache logger.

    Level is DEBUG when settings.debug is True, otherwise INFO, unless
    level is given. Calling it again only updates the level.

    Returns:
        The configured package logger.
    """
    if level is None:
        level = logging.DEBUG if get_settings().debug else logging.INFO
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    if not any(getattr(h, "_fleetcache", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._fleetcache = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return a logger for the given module name (usually __name__)."""
    return logging.getLogger(name)
