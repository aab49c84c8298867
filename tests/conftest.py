"""Shared fixtures for techlist tests."""

import logging

import pytest


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers the CLI attaches so later tests do not log to closed streams."""
    yield
    logger = logging.getLogger("techlist")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
