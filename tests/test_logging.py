"""Tests for parsebox.logging_config."""

import json
import logging

import pytest
from rich.logging import RichHandler

from parsebox.logging_config import JSONLineFormatter, configure_logging


class TestConfigureLogging:
    def test_text_uses_rich_handler(self):
        logger = configure_logging("info", "text")
        assert logger.name == "parsebox"
        assert logger.level == logging.INFO
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], RichHandler)

    def test_json_uses_json_formatter(self):
        logger = configure_logging("debug", "json")
        assert logger.level == logging.DEBUG
        assert isinstance(logger.handlers[0].formatter, JSONLineFormatter)

    def test_warn_maps_to_warning(self):
        assert configure_logging("warn").level == logging.WARNING

    def test_reconfigure_replaces_handler(self):
        configure_logging("info", "text")
        logger = configure_logging("error", "json")
        assert len(logger.handlers) == 1

    def test_invalid_level(self):
        with pytest.raises(ValueError, match="log level"):
            configure_logging("verbose")

    def test_invalid_format(self):
        with pytest.raises(ValueError, match="log format"):
            configure_logging("info", "xml")


class TestJSONLineFormatter:
    def test_record_is_one_json_object(self):
        record = logging.LogRecord(
            "parsebox.converter.engine", logging.WARNING, __file__, 1,
            "json %s failed", ("parse",), None,
        )
        payload = json.loads(JSONLineFormatter().format(record))
        assert payload["level"] == "warning"
        assert payload["logger"] == "parsebox.converter.engine"
        assert payload["message"] == "json parse failed"
        assert "time" in payload
