"""Tests for core logging module."""

import logging
from io import StringIO

import pytest

from .lib import get_logger, setup_logging


class TestLogging:
    """Test core logging API."""

    @pytest.mark.unit
    def test_get_logger(self) -> None:
        """Verify logger instance creation under the package namespace."""
        logger = get_logger("test")
        assert logger.name == "flexinfer.test"
        assert isinstance(logger, logging.Logger)

    @pytest.mark.unit
    def test_get_logger_default_name(self) -> None:
        """Verify default logger name."""
        logger = get_logger()
        assert logger.name == "flexinfer"

    @pytest.mark.unit
    def test_get_logger_keeps_qualified_name(self) -> None:
        """Module names already under the package are not re-prefixed."""
        logger = get_logger("flexinfer.layout.lib")
        assert logger.name == "flexinfer.layout.lib"

    @pytest.mark.unit
    def test_child_logger_propagates_to_package(self) -> None:
        """Child loggers share the package logger as parent."""
        logger = get_logger("layout")
        assert logger.parent is get_logger()

    @pytest.mark.unit
    def test_setup_logging(self) -> None:
        """Verify logging setup."""
        stream = StringIO()
        setup_logging(level=logging.DEBUG, stream=stream)
        logger = get_logger("test_setup")
        logger.debug("test message")

        # basicConfig is a no-op when logging was already configured,
        # so only the API contract is checked here.
        assert logger.level == logging.NOTSET
