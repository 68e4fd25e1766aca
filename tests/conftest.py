"""
Pytest configuration and fixtures for PyMemSpec tests.

Provides:
- A fresh harness context per test
- A quiet global logger so builders do not write to stderr
- The path of the bundled example harnesses
"""

import io
from pathlib import Path

import pytest

from pymemspec.core.context import HarnessContext
from pymemspec.logging import LogLevel, MemSpecLogger, set_logger


@pytest.fixture(autouse=True)
def quiet_logger():
    """Replace the global logger with a silent one that keeps its entries."""
    logger = MemSpecLogger(level=LogLevel.QUIET, color=False, stream=io.StringIO())
    set_logger(logger)
    yield logger
    logger.close()


@pytest.fixture
def ctx():
    """A harness context backed by a fresh Z3Backend."""
    return HarnessContext(name="test")


@pytest.fixture
def examples_file():
    """Path to examples/example_harnesses.py."""
    return Path(__file__).parent.parent / "examples" / "example_harnesses.py"
