"""Tests for markdown_enclave logging module."""

import logging

from markdown_enclave import logging as enclave_logging


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_returns_logger(self):
        """setup_logging should return the package logger."""
        logger = enclave_logging.setup_logging()
        assert isinstance(logger, logging.Logger)
        assert logger.name == "markdown_enclave"

    def test_verbose_sets_debug_level(self):
        """verbose=True should set logger to DEBUG level."""
        logger = enclave_logging.setup_logging(verbose=True)
        assert logger.level == logging.DEBUG

    def test_non_verbose_sets_info_level(self):
        """verbose=False should set logger to INFO level."""
        logger = enclave_logging.setup_logging(verbose=False)
        assert logger.level == logging.INFO

    def test_clears_existing_handlers(self):
        """Should clear existing handlers on repeated calls."""
        enclave_logging.setup_logging()
        logger = enclave_logging.setup_logging()
        assert len(logger.handlers) == 2

    def test_does_not_propagate(self):
        """Messages should not reach the root logger."""
        logger = enclave_logging.setup_logging()
        assert logger.propagate is False


class TestGetLogger:
    """Tests for get_logger function."""

    def test_initializes_if_needed(self):
        """get_logger should initialize the logger if not already done."""
        assert enclave_logging._logger is None
        logger = enclave_logging.get_logger()
        assert enclave_logging._logger is logger

    def test_returns_same_logger(self):
        """get_logger should return the same logger on repeated calls."""
        assert enclave_logging.get_logger() is enclave_logging.get_logger()


class TestLoggingOutput:
    """Tests for logging output formatting and routing."""

    def test_info_goes_to_stdout_without_prefix(self, capsys):
        """Info messages should go to stdout unprefixed."""
        enclave_logging.setup_logging()
        enclave_logging.info("plain message")
        captured = capsys.readouterr()
        assert captured.out.strip() == "plain message"
        assert captured.err == ""

    def test_warning_goes_to_stderr_with_prefix(self, capsys):
        """Warning messages should go to stderr with a prefix."""
        enclave_logging.setup_logging()
        enclave_logging.warning("something")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err.strip() == "Warning: something"

    def test_error_goes_to_stderr_with_prefix(self, capsys):
        """Error messages should go to stderr with a prefix."""
        enclave_logging.setup_logging()
        enclave_logging.error("something")
        captured = capsys.readouterr()
        assert captured.err.strip() == "Error: something"

    def test_debug_hidden_without_verbose(self, capsys):
        """Debug messages should not appear without verbose flag."""
        enclave_logging.setup_logging(verbose=False)
        enclave_logging.debug("debug message")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""

    def test_debug_shown_with_verbose(self, capsys):
        """Debug messages should appear with verbose flag."""
        enclave_logging.setup_logging(verbose=True)
        enclave_logging.debug("debug message")
        captured = capsys.readouterr()
        assert "debug message" in captured.out
