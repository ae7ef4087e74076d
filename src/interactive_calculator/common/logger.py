"""Shared logger for the calculator package."""
import logging
import os


LOG_FORMAT: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _build_logger(name: str = "interactive_calculator") -> logging.Logger:
    """
    Build the package logger once.

    The level is read from the ``LOG_LEVEL`` environment variable and falls back to INFO
    when the variable is unset or not a known level name.

    :param str name: Logger name

    :return: Configured logger
    :rtype: logging.Logger
    """
    level_name: str = os.getenv("LOG_LEVEL", "INFO").upper()
    level: int = getattr(logging, level_name, logging.INFO)

    _logger = logging.getLogger(name)
    _logger.setLevel(level)

    # Already configured (module reloaded in tests)
    if _logger.handlers:
        return _logger

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    _logger.addHandler(handler)
    return _logger


logger: logging.Logger = _build_logger()
