"""Codecs for the tree-shaped document formats: JSON, JSON5, YAML, TOML, TOON, XML."""

from __future__ import annotations

import json
import tomllib
from typing import Any

import json5
import tomli_w
import xmltodict
import yaml
from toon_format import decode as toon_decode
from toon_format import encode as toon_encode

from parsebox.formats.base import ConversionOptions, FormatCodec, scalar_text
from parsebox.formats.tags import FormatTag
from parsebox.values import IntermediateValue, Mapping, Primitive, Sequence, from_host


# ── JSON ─────────────────────────────────────────────────────────────


def parse_json(text: str, options: ConversionOptions) -> IntermediateValue:
    return from_host(json.loads(text))


def serialize_json(value: IntermediateValue, options: ConversionOptions) -> str:
    return json.dumps(value.to_host(), indent=options.indent, ensure_ascii=False)


# ── JSON5 ────────────────────────────────────────────────────────────


def parse_json5(text: str, options: ConversionOptions) -> IntermediateValue:
    return from_host(json5.loads(text))


def serialize_json5(value: IntermediateValue, options: ConversionOptions) -> str:
    return json5.dumps(value.to_host(), indent=options.indent, ensure_ascii=False)


# ── YAML ─────────────────────────────────────────────────────────────


def parse_yaml(text: str, options: ConversionOptions) -> IntermediateValue:
    return from_host(yaml.safe_load(text))


def serialize_yaml(value: IntermediateValue, options: ConversionOptions) -> str:
    return yaml.safe_dump(
        value.to_host(),
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )


# ── TOML ─────────────────────────────────────────────────────────────


def _drop_nulls(host: Any) -> Any:
    """TOML has no null: omit null table entries and array items."""
    if isinstance(host, dict):
        return {k: _drop_nulls(v) for k, v in host.items() if v is not None}
    if isinstance(host, list):
        return [_drop_nulls(v) for v in host if v is not None]
    return host


def parse_toml(text: str, options: ConversionOptions) -> IntermediateValue:
    return from_host(tomllib.loads(text))


def serialize_toml(value: IntermediateValue, options: ConversionOptions) -> str:
    if not isinstance(value, Mapping):
        raise TypeError(f"TOML documents must be a table, got {value.shape.value}")
    return tomli_w.dumps(_drop_nulls(value.to_host()))


# ── TOON ─────────────────────────────────────────────────────────────


def parse_toon(text: str, options: ConversionOptions) -> IntermediateValue:
    return from_host(toon_decode(text))


def serialize_toon(value: IntermediateValue, options: ConversionOptions) -> str:
    return toon_encode(value.to_host(), indent_size=options.indent)


# ── XML ──────────────────────────────────────────────────────────────


def _xml_ready(host: Any) -> Any:
    """Render leaf scalars as element text; null stays an empty element."""
    if isinstance(host, dict):
        return {k: _xml_ready(v) for k, v in host.items()}
    if isinstance(host, list):
        return [_xml_ready(v) for v in host]
    if host is None:
        return None
    return scalar_text(host)


def parse_xml(text: str, options: ConversionOptions) -> IntermediateValue:
    return from_host(
        xmltodict.parse(
            text,
            attr_prefix=options.xml_attribute_prefix,
            cdata_key=options.xml_text_key,
        )
    )


def serialize_xml(value: IntermediateValue, options: ConversionOptions) -> str:
    # XML needs element names around anything that is not already a mapping
    if isinstance(value, Sequence):
        document = {"root": {"item": value.to_host()}}
    elif isinstance(value, Primitive):
        document = {"root": value.to_host()}
    else:
        document = value.to_host()
    return xmltodict.unparse(
        _xml_ready(document),
        full_document=False,
        pretty=True,
        indent=" " * options.indent,
        attr_prefix=options.xml_attribute_prefix,
        cdata_key=options.xml_text_key,
    )


CODECS: tuple[FormatCodec, ...] = (
    FormatCodec(FormatTag.JSON, parse_json, serialize_json),
    FormatCodec(FormatTag.JSON5, parse_json5, serialize_json5),
    FormatCodec(FormatTag.YAML, parse_yaml, serialize_yaml),
    FormatCodec(FormatTag.TOML, parse_toml, serialize_toml),
    FormatCodec(FormatTag.TOON, parse_toon, serialize_toon),
    FormatCodec(FormatTag.XML, parse_xml, serialize_xml),
)
