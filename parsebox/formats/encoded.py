"""Encoding-only codecs: MessagePack, Base64, hex, binary, URI and plain text.

None of these carry structure of their own. On the way in they decode to a
string and then try that string as JSON; on the way out structure is
flattened through JSON before encoding. MessagePack is the exception: it is
structural, but lives in a text box as base64.
"""

from __future__ import annotations

import base64
import binascii
import re
from urllib.parse import quote, unquote

import msgpack

from parsebox.formats.base import (
    ConversionOptions,
    FormatCodec,
    decoded_text_value,
    flatten_to_text,
)
from parsebox.formats.tags import FormatTag
from parsebox.values import IntermediateValue, Primitive, from_host

# Characters encodeURIComponent leaves alone besides alphanumerics and "-_.~"
_URI_SAFE = "!*'()"

_WHITESPACE = re.compile(r"\s+")


def b64_to_bytes(text: str) -> bytes:
    """Strict standard-alphabet base64 decode; whitespace is ignored like atob does."""
    return base64.b64decode(_WHITESPACE.sub("", text), validate=True)


# ── MessagePack ──────────────────────────────────────────────────────


def parse_msgpack(text: str, options: ConversionOptions) -> IntermediateValue:
    return from_host(msgpack.unpackb(b64_to_bytes(text), raw=False, strict_map_key=False))


def serialize_msgpack(value: IntermediateValue, options: ConversionOptions) -> str:
    packed = msgpack.packb(value.to_host(), use_bin_type=True)
    return base64.b64encode(packed).decode("ascii")


# ── Base64 ───────────────────────────────────────────────────────────


def parse_base64(text: str, options: ConversionOptions) -> IntermediateValue:
    return decoded_text_value(b64_to_bytes(text).decode("utf-8"))


def serialize_base64(value: IntermediateValue, options: ConversionOptions) -> str:
    return base64.b64encode(flatten_to_text(value).encode("utf-8")).decode("ascii")


# ── Hexadecimal ──────────────────────────────────────────────────────


def parse_hex(text: str, options: ConversionOptions) -> IntermediateValue:
    digits = _WHITESPACE.sub("", text)
    return decoded_text_value(binascii.unhexlify(digits).decode("utf-8"))


def serialize_hex(value: IntermediateValue, options: ConversionOptions) -> str:
    return flatten_to_text(value).encode("utf-8").hex()


# ── Binary ───────────────────────────────────────────────────────────


def parse_binary(text: str, options: ConversionOptions) -> IntermediateValue:
    bits = _WHITESPACE.sub("", text)
    if not bits or len(bits) % 8 or set(bits) - {"0", "1"}:
        raise ValueError("binary input must be whole 8-bit groups of 0 and 1")
    data = bytes(int(bits[i:i + 8], 2) for i in range(0, len(bits), 8))
    return decoded_text_value(data.decode("utf-8"))


def serialize_binary(value: IntermediateValue, options: ConversionOptions) -> str:
    return " ".join(f"{byte:08b}" for byte in flatten_to_text(value).encode("utf-8"))


# ── URI ──────────────────────────────────────────────────────────────


def uri_decode(text: str) -> str:
    """decodeURIComponent: invalid UTF-8 after unescaping is an error, "+" stays "+"."""
    return unquote(text, errors="strict")


def parse_uri(text: str, options: ConversionOptions) -> IntermediateValue:
    return decoded_text_value(uri_decode(text))


def serialize_uri(value: IntermediateValue, options: ConversionOptions) -> str:
    return quote(flatten_to_text(value), safe=_URI_SAFE)


# ── Plain text ───────────────────────────────────────────────────────


def parse_text(text: str, options: ConversionOptions) -> IntermediateValue:
    return Primitive(text)


def serialize_text(value: IntermediateValue, options: ConversionOptions) -> str:
    return flatten_to_text(value)


CODECS: tuple[FormatCodec, ...] = (
    FormatCodec(FormatTag.MSGPACK, parse_msgpack, serialize_msgpack),
    FormatCodec(FormatTag.BASE64, parse_base64, serialize_base64),
    FormatCodec(FormatTag.HEX, parse_hex, serialize_hex),
    FormatCodec(FormatTag.BINARY, parse_binary, serialize_binary),
    FormatCodec(FormatTag.URI, parse_uri, serialize_uri),
    FormatCodec(FormatTag.TEXT, parse_text, serialize_text),
)
