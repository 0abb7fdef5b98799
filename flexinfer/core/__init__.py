"""Core utilities shared across flexinfer packages."""

from .log import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
