"""Portion estimation models."""

from dataclasses import dataclass
from enum import StrEnum


class PortionSource(StrEnum):
    """Signal that produced a portion estimate."""

    OCR = "ocr"
    USER_PREF = "user_pref"
    NUTRITION_RATIO = "nutrition_ratio"
    CATEGORY = "category"
    FALLBACK = "fallback"


class PortionConfidence(StrEnum):
    """Coarse confidence tier for a portion estimate."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


_PROVENANCE_TAGS = {
    PortionSource.OCR: "OCR",
    PortionSource.USER_PREF: "yours",
    PortionSource.NUTRITION_RATIO: "calc",
    PortionSource.CATEGORY: "est.",
    PortionSource.FALLBACK: "est.",
}


@dataclass(frozen=True)
class PortionSignals:
    """Optional gram signals, in order of trust."""

    ocr_portion: float | None = None
    user_preference: float | None = None
    nutrition_ratio: float | None = None


@dataclass(frozen=True)
class PortionEstimate:
    """Inferred portion for a single resolution."""

    grams: int
    unit: str
    source: PortionSource
    confidence: PortionConfidence

    @property
    def display(self) -> str:
        return f"{self.grams}g • {_PROVENANCE_TAGS[self.source]}"
