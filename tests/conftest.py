"""Pytest fixtures for cmdrunner tests."""

import pytest

from cmdrunner.logging import Logger

from helpers.logging import LoggerStub


@pytest.fixture
def logger() -> Logger:
    """Provide a logger that discards all output."""
    return LoggerStub()
