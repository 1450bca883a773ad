"""ParseBox - convert structured text between data formats through one value model."""

from parsebox.config import ParseBoxConfig, load_config
from parsebox.converter import (
    ConversionError,
    ConversionResult,
    ConversionSession,
    ParseError,
    SerializeError,
    beautify,
    convert,
    minify,
    parse,
    serialize,
)
from parsebox.detector import Detection, detect
from parsebox.formats import FORMATS, ConversionOptions, FormatTag
from parsebox.values import IntermediateValue, Mapping, Primitive, Sequence, from_host

__version__ = "0.1.0"

__all__ = [
    "ConversionError",
    "ConversionOptions",
    "ConversionResult",
    "ConversionSession",
    "Detection",
    "FORMATS",
    "FormatTag",
    "IntermediateValue",
    "Mapping",
    "ParseBoxConfig",
    "ParseError",
    "Primitive",
    "SerializeError",
    "Sequence",
    "beautify",
    "convert",
    "detect",
    "from_host",
    "load_config",
    "minify",
    "parse",
    "serialize",
]
