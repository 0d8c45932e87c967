"""Shared test fixtures."""

import pytest
from loguru import logger


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop sinks added by a test and silence the library again."""
    yield
    logger.remove()
    logger.disable("netstr")
