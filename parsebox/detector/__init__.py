"""Format auto-detection."""

from parsebox.detector.detector import FALLBACK, Detection, detect
from parsebox.detector.probes import PROBES, Probe

__all__ = [
    "Detection",
    "FALLBACK",
    "PROBES",
    "Probe",
    "detect",
]
