"""Logging helpers shared by every propchat module."""

import logging
import os

LOG_LEVEL_ENV = "PROPCHAT_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def _configure_root() -> None:
    global _configured
    if _configured:
        return
    level_name = os.getenv(LOG_LEVEL_ENV, "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    root = logging.getLogger("propchat")
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(level)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """
    Get a module logger under the ``propchat`` hierarchy.

    The first call attaches a single stream handler to the ``propchat``
    logger; level comes from PROPCHAT_LOG_LEVEL (default INFO).
    """
    _configure_root()
    return logging.getLogger(name)
