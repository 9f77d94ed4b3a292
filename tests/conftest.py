"""Shared fixtures for markdown-enclave tests."""

import logging

import pytest

from markdown_enclave import logging as enclave_logging


@pytest.fixture(autouse=True)
def reset_logger():
    """Reset the logger so handlers bind to the current capture streams."""
    enclave_logging._logger = None
    logging.getLogger(enclave_logging.LOGGER_NAME).handlers.clear()
    yield
    enclave_logging._logger = None
