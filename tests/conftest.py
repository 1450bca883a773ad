"""Shared test fixtures for ParseBox."""

import logging

import pytest

from parsebox.formats import ConversionOptions
from parsebox.values import from_host


@pytest.fixture
def options():
    return ConversionOptions()


@pytest.fixture
def sample_value():
    """A mapping exercising every scalar kind plus nesting."""
    return from_host(
        {
            "name": "widget-api",
            "version": 3,
            "ratio": 0.5,
            "enabled": True,
            "owner": None,
            "tags": ["api", "rest"],
            "server": {"host": "localhost", "port": 8080},
        }
    )


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Run with no parsebox.yaml in cwd and an empty home directory."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path / "fakehome")
    return tmp_path


@pytest.fixture(autouse=True)
def _reset_parsebox_logger():
    """configure_logging() detaches the package logger from the root; undo that."""
    yield
    logger = logging.getLogger("parsebox")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
