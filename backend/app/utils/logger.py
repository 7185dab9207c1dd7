"""Logging configuration for the application."""
import logging
import sys
from app.config import settings


def _resolve_level() -> int:
    if settings.log_level:
        return getattr(logging, settings.log_level.upper(), logging.INFO)
    return logging.DEBUG if settings.environment == "development" else logging.INFO


level = _resolve_level()

# Configure the "app" logger; module loggers are its children
logger = logging.getLogger("app")
logger.setLevel(level)

handler = logging.StreamHandler(sys.stdout)
handler.setLevel(level)
handler.setFormatter(
    logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
)

if not logger.handlers:
    logger.addHandler(handler)

# Uvicorn installs its own root handlers
logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """
    Get a child of the application logger.

    Args:
        name: Dotted suffix, e.g. "auth" for "app.auth"

    Returns:
        Logger that shares the application handler
    """
    return logger.getChild(name)


__all__ = ["logger", "get_logger"]
