"""Shared fixtures."""

import logging

import pytest


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers and levels installed by configure_logging."""
    yield
    logger = logging.getLogger("roadrouter_core")
    for handler in list(logger.handlers):
        if getattr(handler, "_roadrouter", False):
            logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
