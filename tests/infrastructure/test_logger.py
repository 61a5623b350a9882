#!/usr/bin/env python3
"""Tests for the structured Logger."""

import io
import logging

import pytest

from assetembed.infrastructure.logger import LogLevel, Logger, get_logger, set_global_logger


def make_logger(level=LogLevel.DEBUG):
    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter("%(levelname)s %(message)s"))
    return Logger("assetembed.test", level=level, handlers=[handler]), stream


class TestLogLevel:
    """Tests for LogLevel enum."""

    def test_log_levels(self):
        """Test log level values match Python logging."""
        assert LogLevel.DEBUG == logging.DEBUG
        assert LogLevel.INFO == logging.INFO
        assert LogLevel.WARNING == logging.WARNING
        assert LogLevel.ERROR == logging.ERROR


class TestLogger:
    """Tests for Logger class."""

    def test_logger_creation(self):
        """Test creating a logger."""
        logger = Logger(name="test", level=LogLevel.DEBUG)

        assert logger.name == "test"
        assert logger.get_level() == LogLevel.DEBUG

    def test_level_from_string(self):
        """Levels can be given by name."""
        logger, _ = make_logger(level="WARNING")

        assert logger.get_level() == LogLevel.WARNING

    def test_structured_context(self):
        """Keyword context is appended as key=value pairs."""
        logger, stream = make_logger()

        logger.info("Rendered pipeline", records=3, kind="web")

        assert stream.getvalue() == "INFO Rendered pipeline | records=3 kind=web\n"

    def test_add_context(self):
        """add_context applies to every message inside the block."""
        logger, stream = make_logger()

        with logger.add_context(pipeline="WEB"):
            logger.debug("Accepted file", path="index.html")
        logger.debug("After")

        lines = stream.getvalue().splitlines()
        assert lines[0] == "DEBUG Accepted file | pipeline=WEB path=index.html"
        assert lines[1] == "DEBUG After"

    def test_level_filtering(self):
        """Messages below the level are dropped."""
        logger, stream = make_logger(level=LogLevel.WARNING)

        logger.info("hidden")
        logger.warning("shown")

        assert stream.getvalue() == "WARNING shown\n"

    def test_unknown_level(self):
        """Unknown level names raise ValueError naming the valid ones."""
        with pytest.raises(ValueError, match="expected one of DEBUG, INFO"):
            make_logger(level="verbose")

    def test_error(self):
        """error() logs at ERROR with context."""
        logger, stream = make_logger()

        logger.error("Generation failed", error_code="NOT_FOUND")

        assert stream.getvalue() == "ERROR Generation failed | error_code=NOT_FOUND\n"

    def test_file_handler(self, temp_dir):
        """log_to_file adds a rotating file handler."""
        logger, _ = make_logger()
        log_path = temp_dir / "assetembed.log"

        handler = logger.log_to_file(log_path)
        logger.info("to file")
        handler.close()

        assert "to file" in log_path.read_text()


class TestGlobalLogger:
    """Tests for the global logger."""

    def test_get_logger_reuses_instance(self):
        """get_logger returns the same instance for the same name."""
        assert get_logger() is get_logger()

    def test_set_global_logger(self):
        """set_global_logger installs a logger."""
        logger, _ = make_logger()
        logger.name = "assetembed"

        set_global_logger(logger)

        assert get_logger() is logger

    def test_reset(self):
        """Passing None resets the global logger."""
        first = get_logger()

        set_global_logger(None)

        assert get_logger() is not first
