"""Ordered probe table for format auto-detection.

Each probe pairs a parse attempt with a shape heuristic. Several grammars are
textual supersets of others (almost anything is YAML, every JSON document is
JSON5), so the table runs from the most constrained grammar to the most
permissive one and the first probe that accepts the text wins.
"""

from __future__ import annotations

import base64
import json
import re
from collections.abc import Callable
from dataclasses import dataclass

import msgpack

from parsebox.formats import DEFAULT_OPTIONS, LABELS, FormatTag
from parsebox.formats.encoded import (
    b64_to_bytes,
    parse_base64,
    parse_binary,
    parse_hex,
    uri_decode,
)
from parsebox.formats.keyvalue import parse_dotenv, parse_ini, parse_query
from parsebox.formats.structured import (
    parse_json,
    parse_json5,
    parse_toml,
    parse_toon,
    parse_xml,
    parse_yaml,
)
from parsebox.formats.tabular import read_table

_JSON5_FEATURE = re.compile(r"//|/\*|,\s*[}\]]")
_TOML_HEADER = re.compile(r"^\[[\w.]+\]", re.MULTILINE)
_TOML_ASSIGNMENT = re.compile(r"^\w+[ \t]*=", re.MULTILINE)
_TOON_ARRAY_LENGTH = re.compile(r"\[\d+\]:")
_TOON_TABLE_HEADER = re.compile(r"\{[\w,]+\}:")
_INDENTED_LINE = re.compile(r"^[ \t]+\S", re.MULTILINE)
_INI_HEADER = re.compile(r"^\[[\w\s.]+\]", re.MULTILINE)
_INI_ASSIGNMENT = re.compile(r"^\w+=", re.MULTILINE)
_DOTENV_LINE = re.compile(r"^(?:export\s+)?(?P<key>[A-Za-z_]\w*)=(?P<value>.*)$")
_UPPER_SNAKE = re.compile(r"[A-Z_][A-Z0-9_]*")
_QUERY_CONTINUATION = re.compile(r"&[^&=\s]+=")
_BASE64_ALPHABET = re.compile(r"^[A-Za-z0-9+/]+=*$")
_HEX_TEXT = re.compile(r"^[0-9A-Fa-f\s]+$")
_BINARY_TEXT = re.compile(r"^[01\s]+$")


@dataclass(frozen=True)
class Probe:
    """One detector rule: does the text look like (and parse as) this format?"""

    tag: FormatTag
    check: Callable[[str], bool]

    @property
    def label(self) -> str:
        return LABELS[self.tag]


# ---------------------------------------------------------------------------
# Probe checks; parse failures propagate and count as a rejection
# ---------------------------------------------------------------------------


def looks_like_json(text: str) -> bool:
    parse_json(text, DEFAULT_OPTIONS)
    return True


def looks_like_json5(text: str) -> bool:
    parse_json5(text, DEFAULT_OPTIONS)
    return bool(_JSON5_FEATURE.search(text))


def looks_like_xml(text: str) -> bool:
    parse_xml(text, DEFAULT_OPTIONS)
    trimmed = text.strip()
    return trimmed.startswith("<") and trimmed.endswith(">")


def looks_like_toml(text: str) -> bool:
    parse_toml(text, DEFAULT_OPTIONS)
    return bool(_TOML_HEADER.search(text) or _TOML_ASSIGNMENT.search(text))


def looks_like_yaml(text: str) -> bool:
    parse_yaml(text, DEFAULT_OPTIONS)
    return ":" in text and "{" not in text and "[" not in text


def looks_like_toon(text: str) -> bool:
    has_toon_syntax = bool(_TOON_ARRAY_LENGTH.search(text) or _TOON_TABLE_HEADER.search(text))
    has_nesting = bool(_INDENTED_LINE.search(text)) or ":\n" in text or ":\r\n" in text
    if not (has_toon_syntax and has_nesting):
        return False
    parse_toon(text, DEFAULT_OPTIONS)
    return True


def looks_like_ini(text: str) -> bool:
    parse_ini(text, DEFAULT_OPTIONS)
    return bool(_INI_HEADER.search(text) and _INI_ASSIGNMENT.search(text))


def _is_dotenv_assignment(line: str) -> bool:
    match = _DOTENV_LINE.match(line.strip())
    if match is None:
        return False
    value = match.group("value")
    # "aGVsbG8=" and "QQ==" are base64 padding, not assignments
    if value.startswith("="):
        return False
    if _UPPER_SNAKE.fullmatch(match.group("key")):
        return True
    # "a=1&b=2" is a query string
    if _QUERY_CONTINUATION.search(value):
        return False
    return bool(value.strip())


def _has_upper_snake_key(line: str) -> bool:
    match = _DOTENV_LINE.match(line.strip())
    return match is not None and bool(_UPPER_SNAKE.fullmatch(match.group("key")))


def looks_like_dotenv(text: str) -> bool:
    lines = [
        line for line in text.splitlines()
        if line.strip() and not line.lstrip().startswith("#")
    ]
    if not lines or not _is_dotenv_assignment(lines[0]):
        return False
    # line shape first: python-dotenv warns about every line it cannot parse
    if not _has_upper_snake_key(lines[0]) and not all(
        _is_dotenv_assignment(line) for line in lines
    ):
        return False
    return bool(parse_dotenv(text, DEFAULT_OPTIONS))


def looks_like_jsonl(text: str) -> bool:
    lines = text.strip().split("\n")
    if len(lines) < 2:
        return False
    for line in lines:
        json.loads(line.strip())
    return True


def looks_like_csv(text: str) -> bool:
    rows = read_table(text, ",")
    return bool(rows) and len(rows[0]) > 1


def looks_like_tsv(text: str) -> bool:
    rows = read_table(text, "\t")
    return bool(rows) and len(rows[0]) > 1 and "\t" in text


def looks_like_msgpack(text: str) -> bool:
    if not _BASE64_ALPHABET.match(text.strip()):
        return False
    msgpack.unpackb(b64_to_bytes(text), raw=False, strict_map_key=False)
    return True


def looks_like_base64(text: str) -> bool:
    trimmed = text.strip()
    decoded = base64.b64decode(trimmed, validate=True)
    if base64.b64encode(decoded).decode("ascii") != trimmed:
        return False
    # "test" is valid base64 whose bytes are not UTF-8 text
    parse_base64(text, DEFAULT_OPTIONS)
    return True


def looks_like_hex(text: str) -> bool:
    if not _HEX_TEXT.match(text):
        return False
    parse_hex(text, DEFAULT_OPTIONS)
    return True


def looks_like_binary(text: str) -> bool:
    if not _BINARY_TEXT.match(text):
        return False
    parse_binary(text, DEFAULT_OPTIONS)
    return True


def looks_like_uri(text: str) -> bool:
    return "%" in text and uri_decode(text) != text


def looks_like_querystring(text: str) -> bool:
    if not parse_query(text):
        return False
    return "=" in text and ("&" in text or " " not in text)


PROBES: tuple[Probe, ...] = (
    Probe(FormatTag.JSON, looks_like_json),
    Probe(FormatTag.JSON5, looks_like_json5),
    Probe(FormatTag.XML, looks_like_xml),
    Probe(FormatTag.TOML, looks_like_toml),
    Probe(FormatTag.YAML, looks_like_yaml),
    Probe(FormatTag.TOON, looks_like_toon),
    Probe(FormatTag.INI, looks_like_ini),
    Probe(FormatTag.DOTENV, looks_like_dotenv),
    Probe(FormatTag.JSONL, looks_like_jsonl),
    Probe(FormatTag.CSV, looks_like_csv),
    Probe(FormatTag.TSV, looks_like_tsv),
    Probe(FormatTag.MSGPACK, looks_like_msgpack),
    Probe(FormatTag.BASE64, looks_like_base64),
    Probe(FormatTag.HEX, looks_like_hex),
    Probe(FormatTag.BINARY, looks_like_binary),
    Probe(FormatTag.URI, looks_like_uri),
    Probe(FormatTag.QUERYSTRING, looks_like_querystring),
)
