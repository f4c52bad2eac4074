"""Centralized logging configuration for ecoreceipt.

Usage:
    from ecoreceipt.runtime import get_logger
    logger = get_logger(__name__)

    logger.debug("Detailed debug info")
    logger.info("Parsed receipt from %s", store_name)

Environment variables:
    ECORECEIPT_LOG_LEVEL: Set log level (DEBUG, INFO, WARNING, ERROR). Default: INFO
"""

import logging
import os
import sys

LOGGER_NAMESPACE = "ecoreceipt"
LOG_LEVEL_ENV_VAR = "ECORECEIPT_LOG_LEVEL"

DEFAULT_LOG_LEVEL = logging.INFO

LOG_FORMAT = "%(levelname)s [%(name)s] %(message)s"
LOG_FORMAT_DEBUG = "%(levelname)s [%(name)s:%(lineno)d] %(message)s"

_LEVELS_BY_NAME = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
}

# Track if logging has been configured
_logging_configured = False


def level_from_env() -> int:
    """Read ECORECEIPT_LOG_LEVEL; unknown or missing values give DEFAULT_LOG_LEVEL."""
    env_level = os.environ.get(LOG_LEVEL_ENV_VAR, "").strip().upper()
    return _LEVELS_BY_NAME.get(env_level, DEFAULT_LOG_LEVEL)


def _formatter_for(level: int) -> logging.Formatter:
    return logging.Formatter(LOG_FORMAT_DEBUG if level == logging.DEBUG else LOG_FORMAT)


def configure_logging(level: int | None = None) -> None:
    """Attach a stderr handler to the ecoreceipt logger namespace (once).

    Args:
        level: Log level to use. If None, reads ECORECEIPT_LOG_LEVEL.
    """
    global _logging_configured

    if _logging_configured:
        return

    if level is None:
        level = level_from_env()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_formatter_for(level))

    namespace_logger = logging.getLogger(LOGGER_NAMESPACE)
    namespace_logger.setLevel(level)
    namespace_logger.addHandler(handler)
    namespace_logger.propagate = False

    _logging_configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the ecoreceipt namespace.

    Args:
        name: Module name, typically __name__
    """
    configure_logging()

    if name == LOGGER_NAMESPACE or name.startswith(f"{LOGGER_NAMESPACE}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")


def set_log_level(level: int) -> None:
    """Change the log level at runtime (e.g. for a --verbose flag)."""
    logger = logging.getLogger(LOGGER_NAMESPACE)
    logger.setLevel(level)

    for handler in logger.handlers:
        handler.setFormatter(_formatter_for(level))
