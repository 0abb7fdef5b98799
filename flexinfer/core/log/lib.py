"""Core logging implementation for flexinfer."""

import logging
import sys
from typing import Optional

__all__ = ["get_logger", "setup_logging"]

DEFAULT_LOGGER_NAME = "flexinfer"


def setup_logging(level: int | str = logging.INFO, stream=sys.stderr) -> None:
    """Configure basic logging.

    Args:
        level: Logging level, as a number or a level name ("DEBUG").
        stream: Output stream.
    """
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=stream,
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger instance.

    Names are nested under the package logger so one level setting
    controls every flexinfer module.

    Args:
        name: Name of the logger.

    Returns:
        Logger instance.
    """
    if not name or name == DEFAULT_LOGGER_NAME:
        return logging.getLogger(DEFAULT_LOGGER_NAME)
    if name.startswith(f"{DEFAULT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{DEFAULT_LOGGER_NAME}.{name}")
