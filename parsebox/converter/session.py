"""Conversion session: source/target format state across repeated conversions."""

from __future__ import annotations

from parsebox.converter import engine
from parsebox.converter.models import ConversionResult
from parsebox.formats import AUTO, DEFAULT_OPTIONS, ConversionOptions, FormatTag, resolve_tag
from parsebox.values import IntermediateValue


def _normalize(tag: str | FormatTag, allow_auto: bool) -> str:
    name = tag.value if isinstance(tag, FormatTag) else tag.strip().lower()
    if allow_auto and name == AUTO:
        return AUTO
    return resolve_tag(name).value


class ConversionSession:
    """Tracks whether the target format was picked by hand.

    While the target is not pinned, every conversion moves the target to the
    resolved (possibly auto-detected) source format. Picking a target pins it;
    switching the source back to "auto" unpins it.
    """

    def __init__(
        self,
        source_format: str | FormatTag = AUTO,
        target_format: str | FormatTag = FormatTag.TEXT,
        options: ConversionOptions | None = None,
    ) -> None:
        self.source_format = _normalize(source_format, allow_auto=True)
        self.target_format = _normalize(target_format, allow_auto=False)
        self.target_pinned = False
        self.options = options or DEFAULT_OPTIONS
        self.input_text = ""
        self.output_text = ""
        self.detected_label: str | None = None
        self.resolved_source: str | None = None
        self.value: IntermediateValue | None = None

    # ------------------------------------------------------------------
    # Format selection
    # ------------------------------------------------------------------

    def set_source_format(self, tag: str | FormatTag) -> None:
        self.source_format = _normalize(tag, allow_auto=True)
        if self.source_format == AUTO:
            self.target_pinned = False

    def set_target_format(self, tag: str | FormatTag) -> None:
        self.target_format = _normalize(tag, allow_auto=False)
        self.target_pinned = True

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    def convert(self, text: str) -> ConversionResult:
        self.input_text = text
        target = None if self._follows_source else self.target_format
        result, value = engine.convert_with_value(text, self.source_format, target, self.options)
        if self._follows_source:
            self.target_format = result.target_format
        self.detected_label = result.detected_label
        self.resolved_source = result.source_format
        self.value = value
        self.output_text = result.output_text
        return result

    @property
    def _follows_source(self) -> bool:
        return not self.target_pinned

    def swap(self) -> None:
        """Output becomes input and the two formats trade places."""
        self.input_text, self.output_text = self.output_text, self.input_text
        new_source = self.target_format
        new_target = self.source_format
        if new_target == AUTO:
            new_target = self.resolved_source or self.target_format
        self.source_format = new_source
        self.target_format = new_target
        self.target_pinned = new_source != AUTO
        self.value = None
        self.detected_label = None
        self.resolved_source = None

    # ------------------------------------------------------------------
    # JSON views of the last conversion
    # ------------------------------------------------------------------

    def minify(self) -> str | None:
        if self.value is None:
            return None
        self.output_text = engine.minify(self.value)
        return self.output_text

    def beautify(self) -> str | None:
        if self.value is None:
            return None
        self.output_text = engine.beautify(self.value, self.options.indent)
        return self.output_text
