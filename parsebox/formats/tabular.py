"""Record-oriented codecs: CSV, TSV and JSONL.

All three always parse to a Sequence, one item per record or line, and accept
any value on the way out by treating a non-Sequence as a one-record table.
"""

from __future__ import annotations

import csv
import io
import json
from typing import Any

from parsebox.formats.base import ConversionOptions, FormatCodec, compact_json
from parsebox.formats.tags import FormatTag
from parsebox.values import IntermediateValue, Mapping, Sequence, from_host

# Cells beyond the header width are collected under this key.
EXTRA_FIELDS_KEY = "__parsed_extra"

# Column used for records that are not mappings.
VALUE_COLUMN = "value"


def _as_records(value: IntermediateValue) -> list[IntermediateValue]:
    if isinstance(value, Sequence):
        return list(value.items)
    return [value]


# ── CSV / TSV ────────────────────────────────────────────────────────


def read_table(text: str, delimiter: str) -> list[dict[str, Any]]:
    """Header-mode parse: one dict per non-blank data row, every cell a string."""
    reader = csv.DictReader(
        io.StringIO(text, newline=""),
        delimiter=delimiter,
        restkey=EXTRA_FIELDS_KEY,
        restval="",
    )
    return list(reader)


def _cell(host: Any) -> str:
    if host is None:
        return ""
    if isinstance(host, str):
        return host
    return compact_json(host)


def _split_extra(row: dict[str, Any]) -> tuple[dict[str, Any], list[Any]]:
    """Separate overflow cells so they are written back as unheaded trailing cells."""
    extra = row.get(EXTRA_FIELDS_KEY)
    if not isinstance(extra, list):
        return row, []
    return {key: cell for key, cell in row.items() if key != EXTRA_FIELDS_KEY}, extra


def write_table(value: IntermediateValue, delimiter: str, options: ConversionOptions) -> str:
    rows: list[tuple[dict[str, Any], list[Any]]] = []
    for record in _as_records(value):
        if isinstance(record, Mapping):
            rows.append(_split_extra(record.to_host()))
        else:
            rows.append(({VALUE_COLUMN: record.to_host()}, []))

    fieldnames: list[str] = []
    for row, _ in rows:
        for key in row:
            if key not in fieldnames:
                fieldnames.append(key)
    if not fieldnames:
        return ""

    buf = io.StringIO()
    writer = csv.writer(buf, delimiter=delimiter, lineterminator=options.csv_line_terminator)
    writer.writerow(fieldnames)
    for row, extra in rows:
        writer.writerow([_cell(row.get(key)) for key in fieldnames] + [_cell(cell) for cell in extra])
    return buf.getvalue()


def parse_csv(text: str, options: ConversionOptions) -> IntermediateValue:
    return from_host(read_table(text, ","))


def serialize_csv(value: IntermediateValue, options: ConversionOptions) -> str:
    return write_table(value, ",", options)


def parse_tsv(text: str, options: ConversionOptions) -> IntermediateValue:
    return from_host(read_table(text, "\t"))


def serialize_tsv(value: IntermediateValue, options: ConversionOptions) -> str:
    return write_table(value, "\t", options)


# ── JSONL ────────────────────────────────────────────────────────────


def parse_jsonl(text: str, options: ConversionOptions) -> IntermediateValue:
    lines = [line for line in text.strip().splitlines() if line.strip()]
    return from_host([json.loads(line) for line in lines])


def serialize_jsonl(value: IntermediateValue, options: ConversionOptions) -> str:
    return "\n".join(compact_json(record.to_host()) for record in _as_records(value))


CODECS: tuple[FormatCodec, ...] = (
    FormatCodec(FormatTag.CSV, parse_csv, serialize_csv),
    FormatCodec(FormatTag.TSV, parse_tsv, serialize_tsv),
    FormatCodec(FormatTag.JSONL, parse_jsonl, serialize_jsonl),
)
