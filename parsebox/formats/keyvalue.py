"""Flat-ish key/value codecs: INI, dotenv and query strings."""

from __future__ import annotations

import configparser
import io
import json
import re
from typing import Any
from urllib.parse import parse_qsl, quote, urlencode

from dotenv import dotenv_values

from parsebox.formats.base import (
    ConversionOptions,
    FormatCodec,
    compact_json,
    flatten_to_text,
)
from parsebox.formats.tags import FormatTag
from parsebox.values import IntermediateValue, Mapping, from_host

# ── INI ──────────────────────────────────────────────────────────────

# Keys above the first [section] are read into this synthetic section.
_ROOT_SECTION = "parsebox:root"
_DEFAULT_SECTION = "parsebox:defaults"

_INI_LITERALS: dict[str, Any] = {"true": True, "false": False, "null": None}


def _ini_parser() -> configparser.ConfigParser:
    parser = configparser.ConfigParser(
        delimiters=("=",),
        comment_prefixes=("#", ";"),
        allow_no_value=True,
        strict=False,
        interpolation=None,
        default_section=_DEFAULT_SECTION,
    )
    parser.optionxform = str  # type: ignore[assignment,method-assign]
    return parser


def _ini_scalar(raw: str | None) -> Any:
    # a bare key with no "=" is a flag
    if raw is None:
        return True
    raw = raw.strip()
    if len(raw) >= 2 and raw[0] == raw[-1] and raw[0] in "\"'":
        if raw[0] == '"':
            try:
                return json.loads(raw)
            except ValueError:
                pass
        return raw[1:-1]
    if raw in _INI_LITERALS:
        return _INI_LITERALS[raw]
    return raw


def parse_ini(text: str, options: ConversionOptions) -> IntermediateValue:
    parser = _ini_parser()
    parser.read_string(f"[{_ROOT_SECTION}]\n{text}")

    result: dict[str, Any] = {}
    for name in parser.sections():
        target = result
        if name != _ROOT_SECTION:
            for part in name.split("."):
                child = target.get(part)
                if not isinstance(child, dict):
                    child = target[part] = {}
                target = child
        for key, raw in parser.items(name, raw=True):
            target[key] = _ini_scalar(raw)
    return from_host(result)


def _ini_value(host: Any) -> str:
    if isinstance(host, str):
        needs_quotes = (
            host != host.strip()
            or host in _INI_LITERALS
            or host[:1] in ("\"", "'")
        )
        return json.dumps(host, ensure_ascii=False) if needs_quotes else host
    return compact_json(host)


def _add_sections(parser: configparser.ConfigParser, table: dict[str, Any], prefix: str) -> None:
    for key, value in table.items():
        if not isinstance(value, dict):
            continue
        name = f"{prefix}{key}"
        parser.add_section(name)
        for option, item in value.items():
            if not isinstance(item, dict):
                parser.set(name, option, _ini_value(item))
        _add_sections(parser, value, f"{name}.")


def serialize_ini(value: IntermediateValue, options: ConversionOptions) -> str:
    if not isinstance(value, Mapping):
        raise TypeError(f"INI output needs a mapping at the top level, got {value.shape.value}")
    host = value.to_host()

    buf = io.StringIO()
    for key, item in host.items():
        if not isinstance(item, dict):
            buf.write(f"{key}={_ini_value(item)}\n")

    parser = _ini_parser()
    _add_sections(parser, host, "")
    if parser.sections():
        if buf.tell():
            buf.write("\n")
        parser.write(buf, space_around_delimiters=False)
    return buf.getvalue().rstrip("\n") + "\n" if buf.tell() else ""


# ── dotenv ───────────────────────────────────────────────────────────

_BARE_DOTENV_VALUE = re.compile(r"[^\s#'\"\\]*")


def parse_dotenv(text: str, options: ConversionOptions) -> IntermediateValue:
    values = dotenv_values(stream=io.StringIO(text), interpolate=False)
    return from_host({key: "" if item is None else item for key, item in values.items()})


def _dotenv_value(host: Any) -> str:
    text = host if isinstance(host, str) else ("" if host is None else compact_json(host))
    if _BARE_DOTENV_VALUE.fullmatch(text):
        return text
    escaped = text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{escaped}"'


def serialize_dotenv(value: IntermediateValue, options: ConversionOptions) -> str:
    if not isinstance(value, Mapping):
        return flatten_to_text(value)
    return "\n".join(f"{key}={_dotenv_value(item)}" for key, item in value.to_host().items())


# ── Query string ─────────────────────────────────────────────────────

_BRACKET_SEGMENT = re.compile(r"\[([^\[\]]*)\]")


def _key_path(key: str) -> list[str]:
    """Split "a[b][]" into ["a", "b", ""]; unbracketed keys are one segment."""
    head, bracket, rest = key.partition("[")
    if not bracket or not head:
        return [key]
    segments = _BRACKET_SEGMENT.findall("[" + rest)
    if "[" + rest != "".join(f"[{s}]" for s in segments):
        return [key]
    return [head, *segments]


def _assign(container: dict[str, Any], path: list[str], value: str) -> None:
    key, rest = path[0], path[1:]
    if not rest:
        if key in container:
            existing = container[key]
            container[key] = existing + [value] if isinstance(existing, list) else [existing, value]
        else:
            container[key] = value
        return
    if rest[0] == "":
        # a[]=x appends; a[][b]=x is not supported and is stored flat
        bucket = container.get(key)
        if not isinstance(bucket, list):
            bucket = container[key] = [] if bucket is None else [bucket]
        if len(rest) == 1:
            bucket.append(value)
        else:
            bucket.append({"".join(f"[{s}]" for s in rest[1:]): value})
        return
    child = container.get(key)
    if not isinstance(child, dict):
        child = container[key] = {}
    _assign(child, rest, value)


def _compact_indices(node: Any) -> Any:
    """Turn {"0": x, "1": y} produced by a[0]=x&a[1]=y into [x, y]."""
    if isinstance(node, list):
        return [_compact_indices(item) for item in node]
    if not isinstance(node, dict):
        return node
    node = {k: _compact_indices(v) for k, v in node.items()}
    if node and all(k.isdigit() for k in node):
        indices = sorted(int(k) for k in node)
        if indices == list(range(len(indices))):
            return [node[str(i)] for i in indices]
    return node


def parse_query(text: str) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in parse_qsl(text, keep_blank_values=True):
        _assign(result, _key_path(key), value)
    return {k: _compact_indices(v) for k, v in result.items()}


def _flatten_query(prefix: str, host: Any, pairs: list[tuple[str, str]]) -> None:
    if isinstance(host, dict):
        for key, item in host.items():
            _flatten_query(f"{prefix}[{key}]" if prefix else str(key), item, pairs)
    elif isinstance(host, list):
        for index, item in enumerate(host):
            _flatten_query(f"{prefix}[{index}]" if prefix else str(index), item, pairs)
    elif host is None:
        pairs.append((prefix, ""))
    else:
        pairs.append((prefix, host if isinstance(host, str) else compact_json(host)))


def parse_querystring(text: str, options: ConversionOptions) -> IntermediateValue:
    return from_host(parse_query(text))


def serialize_querystring(value: IntermediateValue, options: ConversionOptions) -> str:
    pairs: list[tuple[str, str]] = []
    host = value.to_host()
    if isinstance(host, (dict, list)):
        _flatten_query("", host, pairs)
    return urlencode(pairs, quote_via=quote)


CODECS: tuple[FormatCodec, ...] = (
    FormatCodec(FormatTag.INI, parse_ini, serialize_ini),
    FormatCodec(FormatTag.DOTENV, parse_dotenv, serialize_dotenv),
    FormatCodec(FormatTag.QUERYSTRING, parse_querystring, serialize_querystring),
)
