"""Logging setup for the billed service.

Usage:
    from billed.core.logging import get_logger
    logger = get_logger(__name__)

Environment variables:
    BILLED_LOG_LEVEL: DEBUG, INFO, WARNING or ERROR. Default: INFO
"""
from __future__ import annotations

import logging
import os
import sys

LOGGER_NAMESPACE = "billed"
DEFAULT_LOG_LEVEL = logging.INFO

LOG_FORMAT = "%(levelname)s [%(name)s] %(message)s"
LOG_FORMAT_DEBUG = "%(levelname)s [%(name)s:%(lineno)d] %(message)s"

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
}

_handler: logging.Handler | None = None


def level_from_env() -> int:
    env_level = os.environ.get("BILLED_LOG_LEVEL", "").strip().upper()
    return _LEVELS.get(env_level, DEFAULT_LOG_LEVEL)


def configure_logging(level: int | None = None) -> None:
    """Attach a stderr handler to the ``billed`` logger namespace.

    Calling it again only adjusts the level.
    """

    global _handler

    if level is None:
        level = level_from_env()

    logger = logging.getLogger(LOGGER_NAMESPACE)
    logger.setLevel(level)

    if _handler is None:
        _handler = logging.StreamHandler(sys.stderr)
        logger.addHandler(_handler)
    _handler.setFormatter(logging.Formatter(LOG_FORMAT_DEBUG if level == logging.DEBUG else LOG_FORMAT))


def get_logger(name: str) -> logging.Logger:
    """Return a logger for ``name`` under the ``billed`` namespace."""

    if name == LOGGER_NAMESPACE or name.startswith(f"{LOGGER_NAMESPACE}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")
