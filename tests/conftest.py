"""Shared fixtures."""

import pytest
from loguru import logger


@pytest.fixture(autouse=True)
def reset_loguru():
    """Drop sinks added by a test so they never outlive its captured streams."""
    yield
    logger.remove()
