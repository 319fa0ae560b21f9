"""Pytest configuration and fixtures for splicekit tests."""

import sys
import tempfile
from pathlib import Path

import pytest

from splicekit.core.log import ConsoleSink, setup_logger


@pytest.fixture(autouse=True, scope="session")
def configure_logging():
    """Configure console-only logging for the test session.

    Shows debug output during test runs without sending anything to
    logfire.dev.
    """
    setup_logger(
        log_root=Path(tempfile.gettempdir()) / "splicekit-tests",
        run_name="test",
        console=ConsoleSink(level="debug"),
    )


@pytest.fixture
def mock_argv():
    """Give settings classes a clean argv, restored afterwards.

    State parses the command line, which would otherwise see pytest's
    own arguments.
    """
    original = sys.argv
    sys.argv = ["splicekit"]
    yield
    sys.argv = original
