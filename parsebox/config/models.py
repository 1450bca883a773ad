from typing import Literal

from pydantic import BaseModel, Field, field_validator

from parsebox.formats import AUTO, ConversionOptions, resolve_tag


class ConversionConfig(ConversionOptions):
    """Codec options plus the default source and target formats."""

    default_source: str = AUTO
    default_target: str | None = None

    @field_validator("default_source")
    @classmethod
    def _check_source(cls, value: str) -> str:
        value = value.strip().lower()
        if value == AUTO:
            return value
        return resolve_tag(value).value

    @field_validator("default_target")
    @classmethod
    def _check_target(cls, value: str | None) -> str | None:
        if value is None or value.strip().lower() == AUTO:
            return None
        return resolve_tag(value).value

    def options(self) -> ConversionOptions:
        return ConversionOptions(**self.model_dump(include=set(ConversionOptions.model_fields)))


class ParseBoxConfig(BaseModel):
    conversion: ConversionConfig = Field(default_factory=ConversionConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "warn"
    log_format: Literal["text", "json"] = "text"
