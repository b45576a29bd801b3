"""Catalog search candidates."""

from dataclasses import dataclass
from enum import StrEnum


class CandidateKind(StrEnum):
    """Closed set of catalog result kinds."""

    BRAND = "brand"
    GENERIC = "generic"
    RESTAURANT = "restaurant"


@dataclass(frozen=True)
class CatalogHit:
    """Raw result row from the catalog search collaborator."""

    id: str
    name: str
    calories_per_100g: float
    confidence: float
    kind: CandidateKind = CandidateKind.BRAND
    image_url: str | None = None


@dataclass(frozen=True)
class Candidate:
    """Re-ranked catalog result eligible for selection."""

    id: str
    name: str
    kind: CandidateKind
    calories_per_100g: float
    confidence: float
    score: float
    class_id: str | None = None
    image_url: str | None = None


@dataclass(frozen=True)
class CandidateOptions:
    """Per-request knobs for candidate search."""

    prefer_generic: bool = False
    require_core_token: bool = True
    max_per_family: int | None = None
    max_results: int | None = None
    disable_brand_interleave: bool = False
    allow_more_brands: bool = False


@dataclass(frozen=True)
class CandidatePolicy:
    """Thresholds for promotion and the disambiguation gate."""

    promotion_score_delta: float = 0.15
    picker_min_confidence: float = 0.65
    picker_min_gap: float = 0.15
    max_results: int = 8
    fetch_limit: int = 15
