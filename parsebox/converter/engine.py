"""Parse → intermediate value → serialize, with fail-soft boundaries."""

from __future__ import annotations

import json
import logging

from parsebox.converter.models import (
    ConversionResult,
    ParseError,
    Result,
    SerializeError,
)
from parsebox.detector import detect
from parsebox.formats import AUTO, DEFAULT_OPTIONS, ConversionOptions, FormatTag, get_codec
from parsebox.values import IntermediateValue, Primitive

logger = logging.getLogger(__name__)


def _tag_name(tag: str | FormatTag) -> str:
    return tag.value if isinstance(tag, FormatTag) else str(tag).strip().lower()


# ------------------------------------------------------------------
# Result-returning API
# ------------------------------------------------------------------


def parse_result(
    text: str,
    tag: str | FormatTag,
    options: ConversionOptions | None = None,
) -> Result[IntermediateValue]:
    """Parse text under an already-resolved format tag."""
    try:
        codec = get_codec(tag)
        return Result(value=codec.parse(text, options or DEFAULT_OPTIONS))
    except Exception as exc:
        return Result(error=ParseError(_tag_name(tag), exc))


def serialize_result(
    value: IntermediateValue,
    tag: str | FormatTag,
    options: ConversionOptions | None = None,
) -> Result[str]:
    """Render an intermediate value in the target format."""
    try:
        codec = get_codec(tag)
        return Result(value=codec.serialize(value, options or DEFAULT_OPTIONS))
    except Exception as exc:
        return Result(error=SerializeError(_tag_name(tag), exc))


# ------------------------------------------------------------------
# Fail-soft API: errors become sentinel text
# ------------------------------------------------------------------


def parse(
    text: str,
    tag: str | FormatTag,
    options: ConversionOptions | None = None,
) -> IntermediateValue:
    """Parse text; on failure return Primitive("Error: Could not parse <format>")."""
    result = parse_result(text, tag, options)
    if result.error is not None:
        logger.warning("%s", result.error)
        return Primitive(result.error.sentinel)
    return result.unwrap()


def serialize(
    value: IntermediateValue,
    tag: str | FormatTag,
    options: ConversionOptions | None = None,
) -> str:
    """Serialize; on failure return "Error: Could not convert to <format>"."""
    result = serialize_result(value, tag, options)
    if result.error is not None:
        logger.warning("%s", result.error)
        return result.error.sentinel
    return result.unwrap()


def convert(
    input_text: str,
    source_format: str | FormatTag = AUTO,
    target_format: str | FormatTag | None = None,
    options: ConversionOptions | None = None,
) -> ConversionResult:
    """Detect (when the source is "auto"), parse and re-serialize.

    A target of None or "auto" follows the resolved source format.
    """
    result, _ = convert_with_value(input_text, source_format, target_format, options)
    return result


def convert_with_value(
    input_text: str,
    source_format: str | FormatTag = AUTO,
    target_format: str | FormatTag | None = None,
    options: ConversionOptions | None = None,
) -> tuple[ConversionResult, IntermediateValue]:
    """Like convert(), also returning the parsed value (the sentinel on parse failure)."""
    detected_label: str | None = None
    if _tag_name(source_format) == AUTO:
        detection = detect(input_text)
        source = detection.tag.value
        detected_label = detection.label
    else:
        source = _tag_name(source_format)

    if target_format is None or _tag_name(target_format) == AUTO:
        target = source
    else:
        target = _tag_name(target_format)

    parsed = parse_result(input_text, source, options)
    if parsed.error is not None:
        logger.warning("%s", parsed.error)
        sentinel = Primitive(parsed.error.sentinel)
        failed = ConversionResult(
            output_text=serialize(sentinel, target, options),
            source_format=source,
            target_format=target,
            detected_label=detected_label,
            ok=False,
        )
        return failed, sentinel

    value = parsed.unwrap()
    rendered = serialize_result(value, target, options)
    if rendered.error is not None:
        logger.warning("%s", rendered.error)
    result = ConversionResult(
        output_text=rendered.value if rendered.ok else rendered.error.sentinel,
        source_format=source,
        target_format=target,
        detected_label=detected_label,
        ok=rendered.ok,
    )
    return result, value


# ------------------------------------------------------------------
# JSON views of an intermediate value
# ------------------------------------------------------------------


def minify(value: IntermediateValue) -> str:
    return json.dumps(value.to_host(), ensure_ascii=False, separators=(",", ":"))


def beautify(value: IntermediateValue, indent: int = 2) -> str:
    return json.dumps(value.to_host(), ensure_ascii=False, indent=indent)
