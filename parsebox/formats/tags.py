"""Closed set of format tags and their display labels."""

from __future__ import annotations

from enum import Enum

AUTO = "auto"


class FormatTag(str, Enum):
    TEXT = "text"
    JSON = "json"
    JSON5 = "json5"
    XML = "xml"
    YAML = "yaml"
    TOML = "toml"
    TOON = "toon"
    INI = "ini"
    DOTENV = "dotenv"
    CSV = "csv"
    TSV = "tsv"
    JSONL = "jsonl"
    MSGPACK = "msgpack"
    BASE64 = "base64"
    HEX = "hex"
    BINARY = "binary"
    URI = "uri"
    QUERYSTRING = "querystring"

    def __str__(self) -> str:
        return self.value


LABELS: dict[FormatTag, str] = {
    FormatTag.TEXT: "Plain Text",
    FormatTag.JSON: "JSON",
    FormatTag.JSON5: "JSON5",
    FormatTag.XML: "XML",
    FormatTag.YAML: "YAML",
    FormatTag.TOML: "TOML",
    FormatTag.TOON: "TOON",
    FormatTag.INI: "INI",
    FormatTag.DOTENV: "dotenv",
    FormatTag.CSV: "CSV",
    FormatTag.TSV: "TSV",
    FormatTag.JSONL: "JSONL",
    FormatTag.MSGPACK: "MessagePack",
    FormatTag.BASE64: "Base64",
    FormatTag.HEX: "Hexadecimal",
    FormatTag.BINARY: "Binary",
    FormatTag.URI: "URI Encoded",
    FormatTag.QUERYSTRING: "Query String",
}


def resolve_tag(name: str | FormatTag) -> FormatTag:
    """Look up a format tag by value, case-insensitively.

    Raises ValueError for unknown names (including "auto", which is not a format).
    """
    if isinstance(name, FormatTag):
        return name
    try:
        return FormatTag(name.strip().lower())
    except ValueError:
        raise ValueError(
            f"Unsupported format: {name!r}. "
            f"Supported: {', '.join(tag.value for tag in FormatTag)}"
        ) from None
