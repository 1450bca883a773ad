"""Format codecs and the capability table that binds every tag to one."""

from parsebox.formats import encoded, keyvalue, structured, tabular
from parsebox.formats.base import DEFAULT_OPTIONS, ConversionOptions, FormatCodec
from parsebox.formats.tags import AUTO, LABELS, FormatTag, resolve_tag

FORMATS: dict[FormatTag, FormatCodec] = {
    codec.tag: codec
    for codec in (
        *structured.CODECS,
        *tabular.CODECS,
        *keyvalue.CODECS,
        *encoded.CODECS,
    )
}


def get_codec(tag: str | FormatTag) -> FormatCodec:
    """Look up the codec for a format tag.

    Raises ValueError for unknown tags.
    """
    return FORMATS[resolve_tag(tag)]


__all__ = [
    "AUTO",
    "DEFAULT_OPTIONS",
    "FORMATS",
    "LABELS",
    "ConversionOptions",
    "FormatCodec",
    "FormatTag",
    "get_codec",
    "resolve_tag",
]
