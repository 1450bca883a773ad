"""Codec descriptor and shared helpers for format adapters."""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from parsebox.formats.tags import LABELS, FormatTag
from parsebox.values import IntermediateValue, Primitive, from_host


class ConversionOptions(BaseModel):
    """Knobs the codecs honour; defaults reproduce the stock output."""

    model_config = ConfigDict(frozen=True)

    indent: int = Field(default=2, ge=1, le=8)
    xml_attribute_prefix: str = Field(default="@_", min_length=1)
    xml_text_key: str = Field(default="#text", min_length=1)
    csv_line_terminator: Literal["\n", "\r\n"] = "\n"


DEFAULT_OPTIONS = ConversionOptions()

ParseFn = Callable[[str, ConversionOptions], IntermediateValue]
SerializeFn = Callable[[IntermediateValue, ConversionOptions], str]


@dataclass(frozen=True)
class FormatCodec:
    """Capability table entry: how one format is read and written."""

    tag: FormatTag
    parse: ParseFn
    serialize: SerializeFn

    @property
    def label(self) -> str:
        return LABELS[self.tag]


# ---------------------------------------------------------------------------
# Helpers shared by several codecs
# ---------------------------------------------------------------------------


def compact_json(host: object) -> str:
    """JSON with no whitespace, the way JSON.stringify writes it."""
    return json.dumps(host, ensure_ascii=False, separators=(",", ":"))


def scalar_text(value: object) -> str:
    """Render a scalar as text: strings verbatim, everything else in JSON spelling."""
    if isinstance(value, str):
        return value
    return compact_json(value)


def flatten_to_text(value: IntermediateValue) -> str:
    """The string an encoding-only format should encode.

    Primitives contribute their own text; structured values are flattened
    through compact JSON first.
    """
    if isinstance(value, Primitive):
        return scalar_text(value.value)
    return compact_json(value.to_host())


def decoded_text_value(text: str) -> IntermediateValue:
    """Second decode phase: structured if the text is JSON, else the string itself."""
    try:
        return from_host(json.loads(text))
    except ValueError:
        return Primitive(text)
