"""Errors, result type and conversion outcome for the engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ConversionError(Exception):
    """Wraps a codec exception with the format and operation that failed."""

    operation = "convert"

    def __init__(self, format: str, cause: Exception | None = None) -> None:
        self.format = format
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"{format} {self.operation} failed{detail}")
        self.__cause__ = cause

    @property
    def sentinel(self) -> str:
        return f"Error: Could not convert to {self.format}"


class ParseError(ConversionError):
    """Source text does not conform to the declared or detected format."""

    operation = "parse"

    @property
    def sentinel(self) -> str:
        return f"Error: Could not parse {self.format}"


class SerializeError(ConversionError):
    """An intermediate value cannot be rendered in the target format."""

    operation = "serialize"


@dataclass(frozen=True)
class Result(Generic[T]):
    """Success value or captured conversion error."""

    value: T | None = None
    error: ConversionError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


class ConversionResult(BaseModel):
    """Outcome of one convert() call."""

    output_text: str
    source_format: str
    target_format: str
    detected_label: str | None = None
    ok: bool = True
