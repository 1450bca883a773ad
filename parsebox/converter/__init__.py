"""Conversion engine: parse, intermediate value, serialize."""

from parsebox.converter.engine import (
    beautify,
    convert,
    convert_with_value,
    minify,
    parse,
    parse_result,
    serialize,
    serialize_result,
)
from parsebox.converter.models import (
    ConversionError,
    ConversionResult,
    ParseError,
    Result,
    SerializeError,
)
from parsebox.converter.session import ConversionSession

__all__ = [
    "ConversionError",
    "ConversionResult",
    "ConversionSession",
    "ParseError",
    "Result",
    "SerializeError",
    "beautify",
    "convert",
    "convert_with_value",
    "minify",
    "parse",
    "parse_result",
    "serialize",
    "serialize_result",
]
