"""Tests for ConversionSession pinning, swap and JSON views."""

import logging

import pytest

from parsebox.converter import ConversionSession
from parsebox.formats import ConversionOptions, FormatTag
from parsebox.values import from_host


class TestFormatSelection:
    def test_defaults(self):
        session = ConversionSession()
        assert session.source_format == "auto"
        assert session.target_format == "text"
        assert session.target_pinned is False

    def test_setting_target_pins(self):
        session = ConversionSession()
        session.set_target_format("YAML")
        assert session.target_format == "yaml"
        assert session.target_pinned is True

    def test_source_auto_unpins(self):
        session = ConversionSession()
        session.set_target_format(FormatTag.XML)
        session.set_source_format("auto")
        assert session.target_pinned is False

    def test_explicit_source_keeps_pin(self):
        session = ConversionSession()
        session.set_target_format("xml")
        session.set_source_format("json")
        assert session.target_pinned is True

    def test_unknown_tags_rejected(self):
        session = ConversionSession()
        with pytest.raises(ValueError):
            session.set_target_format("auto")
        with pytest.raises(ValueError):
            session.set_source_format("docx")


class TestConvert:
    def test_unpinned_target_follows_detection(self):
        session = ConversionSession()
        result = session.convert('{"a": 1}')
        assert result.source_format == "json"
        assert session.target_format == "json"
        assert session.detected_label == "JSON"
        assert session.value == from_host({"a": 1})

    def test_pinned_target_stays(self):
        session = ConversionSession()
        session.set_target_format("yaml")
        result = session.convert('{"a": 1}')
        assert result.output_text == "a: 1\n"
        assert session.target_format == "yaml"
        assert session.output_text == "a: 1\n"

    def test_explicit_source_unpinned_follows_it(self):
        session = ConversionSession(source_format="yaml")
        session.convert("a: 1\n")
        assert session.target_format == "yaml"
        assert session.detected_label is None

    def test_parse_failure_keeps_sentinel_value(self):
        session = ConversionSession(source_format="json")
        result = session.convert("{invalid")
        assert not result.ok
        assert session.value == from_host("Error: Could not parse json")

    def test_parse_failure_logged_once(self, caplog):
        session = ConversionSession(source_format="json")
        with caplog.at_level(logging.WARNING, logger="parsebox"):
            session.convert("{invalid")
        failures = [r for r in caplog.records if "json parse failed" in r.getMessage()]
        assert len(failures) == 1


class TestSwap:
    def test_swap_trades_text_and_formats(self):
        session = ConversionSession()
        session.set_target_format("yaml")
        session.convert('{"a": 1}')
        session.swap()
        assert session.input_text == "a: 1\n"
        assert session.output_text == '{"a": 1}'
        assert session.source_format == "yaml"
        assert session.target_format == "json"
        assert session.target_pinned is True

    def test_swap_then_convert(self):
        session = ConversionSession()
        session.set_target_format("yaml")
        session.convert('{"a": 1}')
        session.swap()
        result = session.convert(session.input_text)
        assert result.output_text == '{\n  "a": 1\n}'

    def test_swap_clears_value(self):
        session = ConversionSession()
        session.convert('{"a": 1}')
        session.swap()
        assert session.minify() is None


class TestJSONViews:
    def test_none_before_conversion(self):
        session = ConversionSession()
        assert session.minify() is None
        assert session.beautify() is None

    def test_minify_and_beautify(self):
        session = ConversionSession()
        session.convert('{"a": [1, 2]}')
        assert session.minify() == '{"a":[1,2]}'
        assert session.beautify() == '{\n  "a": [\n    1,\n    2\n  ]\n}'
        assert session.output_text == session.beautify()

    def test_beautify_honours_indent(self):
        session = ConversionSession(options=ConversionOptions(indent=4))
        session.convert('{"a": 1}')
        assert session.beautify() == '{\n    "a": 1\n}'
