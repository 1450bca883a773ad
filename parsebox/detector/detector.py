"""Best-guess format detection over the ordered probe table."""

from __future__ import annotations

import logging
from typing import NamedTuple

from parsebox.detector.probes import PROBES, Probe
from parsebox.formats import LABELS, FormatTag

logger = logging.getLogger(__name__)


class Detection(NamedTuple):
    """Winning format tag and its display label."""

    tag: FormatTag
    label: str


FALLBACK = Detection(FormatTag.TEXT, LABELS[FormatTag.TEXT])


def _accepts(probe: Probe, text: str) -> bool:
    try:
        return probe.check(text)
    except Exception as exc:
        logger.debug("Probe %s rejected input: %s", probe.tag.value, exc)
        return False


def detect(text: str, probes: tuple[Probe, ...] = PROBES) -> Detection:
    """Return the first probe that accepts the text, or Plain Text.

    Probes run in table order; earlier entries win ties.
    """
    if not text.strip():
        return FALLBACK
    for probe in probes:
        if _accepts(probe, text):
            logger.debug("Detected %s", probe.label)
            return Detection(probe.tag, probe.label)
    return FALLBACK
