"""Shared pytest fixtures."""

import logging
from pathlib import Path

import pytest

from src.utils import logging_config


@pytest.fixture(scope="session")
def project_root():
    """Project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers and context installed by setup_logging() during a test."""
    yield
    root = logging.getLogger()
    for handler in logging_config._installed:
        root.removeHandler(handler)
        handler.close()
    logging_config._installed.clear()
    logging_config.pop_context()
