"""
Shared pytest fixtures for test suite.
"""

import logging

import pytest

from topostfix import config, logging_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep TOPOSTFIX_* variables from the developer's shell out of the tests."""
    for name in (config.CONFIG_ENV, config.MAX_DEPTH_ENV, config.STRICT_ENV):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def write_config(tmp_path):
    """Returns a factory that writes a JSON (or raw text) config file."""
    def _write(content, name="topostfix.json"):
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path
    return _write


@pytest.fixture(autouse=True)
def reset_logger():
    """Drop handlers installed by setup_logging so they never outlive a captured stderr."""
    yield
    logger = logging.getLogger(logging_config.LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
