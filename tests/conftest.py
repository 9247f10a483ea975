"""Shared test fixtures for restarter tests."""

import io
import logging

import pytest
from structlog.typing import FilteringBoundLogger

from restarter.utils._logging import _create_logger


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def log_output() -> io.StringIO:
    """Capture buffer for the test logger."""
    return io.StringIO()


@pytest.fixture
def logger(log_output: io.StringIO) -> FilteringBoundLogger:
    """Create a debug-level text logger writing to ``log_output``."""
    return _create_logger(log_output, log_level=logging.DEBUG)
