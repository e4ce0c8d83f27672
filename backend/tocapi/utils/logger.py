"""Logging configuration for tocapi."""
import logging
import sys

from tocapi.config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logger(name: str, development: bool) -> logging.Logger:
    """
    Configure a stdout logger once and return it.

    Args:
        name: Logger name
        development: Log DEBUG and above when True, INFO and above otherwise

    Returns:
        The configured logger
    """
    level = logging.DEBUG if development else logging.INFO
    configured = logging.getLogger(name)
    configured.setLevel(level)

    if not configured.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        configured.addHandler(handler)

    # Worker and web servers install their own root handlers
    configured.propagate = False
    return configured


logger = setup_logger("tocapi", get_settings().is_development)

__all__ = ["logger", "setup_logger"]
