"""Pytest configuration and fixtures."""

import logging

import pytest

from xmlassert.assertions.pool import ValidatorPool
from xmlassert.config import XmlAssertionConfig


@pytest.fixture(autouse=True)
def cleanup_loggers():
    """Clean up xmlassert loggers after each test to prevent name collisions."""
    yield

    loggers_to_remove = [
        name
        for name in logging.Logger.manager.loggerDict.keys()
        if name.startswith("xmlassert")
    ]

    for name in loggers_to_remove:
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()
        del logging.Logger.manager.loggerDict[name]


@pytest.fixture
def pool():
    """Fresh validator pool so tests never share reader handles."""
    return ValidatorPool()


@pytest.fixture
def make_config():
    def _make(path: str = "r.code", expected: str | None = "200", **kwargs) -> XmlAssertionConfig:
        return XmlAssertionConfig(path=path, expected=expected, **kwargs)

    return _make
