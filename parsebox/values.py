"""Intermediate value: the canonical shape every format parses into and serializes from."""

from __future__ import annotations

import base64
import datetime as dt
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

Scalar = Union[str, int, float, bool, None]


class Shape(str, Enum):
    """Structural category of an intermediate value."""

    PRIMITIVE = "primitive"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


def _scalar_kind(value: Scalar) -> str:
    # bool is an int subclass, so it must be checked first
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, (int, float)):
        return "number"
    return "string"


@dataclass(frozen=True, eq=False)
class Primitive:
    """A single scalar: string, number, boolean or null."""

    value: Scalar = None

    def __post_init__(self) -> None:
        if self.value is not None and not isinstance(self.value, (str, int, float, bool)):
            raise TypeError(f"Primitive value must be a scalar, got {type(self.value).__name__}")

    @property
    def shape(self) -> Shape:
        return Shape.PRIMITIVE

    def to_host(self) -> Scalar:
        return self.value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Primitive):
            return NotImplemented
        return _scalar_kind(self.value) == _scalar_kind(other.value) and self.value == other.value

    def __hash__(self) -> int:
        return hash((_scalar_kind(self.value), self.value))


@dataclass(frozen=True)
class Sequence:
    """An ordered list of intermediate values."""

    items: tuple[IntermediateValue, ...] = ()

    @property
    def shape(self) -> Shape:
        return Shape.SEQUENCE

    def to_host(self) -> list[Any]:
        return [item.to_host() for item in self.items]

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index: int) -> IntermediateValue:
        return self.items[index]


@dataclass(frozen=True, eq=False)
class Mapping:
    """String-keyed entries in insertion order.

    Order is kept for deterministic output only; equality ignores it.
    """

    entries: tuple[tuple[str, IntermediateValue], ...] = ()

    def __post_init__(self) -> None:
        seen: set[str] = set()
        for key, _ in self.entries:
            if not isinstance(key, str):
                raise TypeError(f"Mapping keys must be str, got {type(key).__name__}")
            if key in seen:
                raise ValueError(f"Duplicate mapping key: {key!r}")
            seen.add(key)

    @property
    def shape(self) -> Shape:
        return Shape.MAPPING

    def keys(self) -> list[str]:
        return [key for key, _ in self.entries]

    def get(self, key: str, default: IntermediateValue | None = None) -> IntermediateValue | None:
        for k, v in self.entries:
            if k == key:
                return v
        return default

    def __getitem__(self, key: str) -> IntermediateValue:
        value = self.get(key)
        if value is None:
            raise KeyError(key)
        return value

    def __len__(self) -> int:
        return len(self.entries)

    def to_host(self) -> dict[str, Any]:
        return {key: value.to_host() for key, value in self.entries}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Mapping):
            return NotImplemented
        return dict(self.entries) == dict(other.entries)

    def __hash__(self) -> int:
        return hash(frozenset(self.entries))


IntermediateValue = Union[Primitive, Sequence, Mapping]


# ---------------------------------------------------------------------------
# Host value normalization
# ---------------------------------------------------------------------------


def _normalize_key(key: object) -> str:
    if isinstance(key, str):
        return key
    if isinstance(key, bool):
        return "true" if key else "false"
    if key is None:
        return "null"
    return str(key)


def _normalize_scalar(value: object) -> Scalar:
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, (bytes, bytearray)):
        try:
            return bytes(value).decode("utf-8")
        except UnicodeDecodeError:
            return base64.b64encode(bytes(value)).decode("ascii")
    if isinstance(value, (dt.date, dt.time)):
        return value.isoformat()
    return str(value)


def from_host(value: object) -> IntermediateValue:
    """Classify a parser's host value: list → Sequence, dict → Mapping, else → Primitive."""
    if isinstance(value, (Primitive, Sequence, Mapping)):
        return value
    if isinstance(value, (list, tuple)):
        return Sequence(tuple(from_host(item) for item in value))
    if isinstance(value, dict):
        entries: dict[str, IntermediateValue] = {}
        for key, item in value.items():
            entries[_normalize_key(key)] = from_host(item)
        return Mapping(tuple(entries.items()))
    return Primitive(_normalize_scalar(value))


