"""Nutrition domain models."""

from dataclasses import dataclass, fields
from enum import StrEnum

from food_resolver.domain.candidates import Candidate

_OPTIONAL_NUTRIENTS = ("fiber", "sugar", "sodium")


class DataSource(StrEnum):
    """Where a hydrated per-gram profile came from."""

    STORE = "store"
    CANONICAL = "canonical"
    LEGACY = "legacy"
    ESTIMATED = "Estimated"


@dataclass(frozen=True)
class MacroProfile:
    """Macronutrient totals for a portion."""

    calories: float
    protein_g: float
    fat_g: float
    carbs_g: float


@dataclass(frozen=True)
class PerGramProfile:
    """Macronutrients normalized to a single gram."""

    kcal: float
    protein: float
    carbs: float
    fat: float
    fiber: float | None = None
    sugar: float | None = None
    sodium: float | None = None

    def __post_init__(self) -> None:
        for item in fields(self):
            value = getattr(self, item.name)
            if value is not None and value < 0:
                object.__setattr__(self, item.name, 0.0)

    @classmethod
    def from_per_100g(  # noqa: PLR0913
        cls,
        *,
        calories: float,
        protein: float,
        carbs: float,
        fat: float,
        fiber: float | None = None,
        sugar: float | None = None,
        sodium: float | None = None,
    ) -> "PerGramProfile":
        """Build a per-gram profile from per-100g values."""
        return cls(
            kcal=calories / 100,
            protein=protein / 100,
            carbs=carbs / 100,
            fat=fat / 100,
            fiber=None if fiber is None else fiber / 100,
            sugar=None if sugar is None else sugar / 100,
            sodium=None if sodium is None else sodium / 100,
        )

    def keys(self) -> tuple[str, ...]:
        """Return the nutrient names that carry a value."""
        return tuple(
            item.name
            for item in fields(self)
            if item.name not in _OPTIONAL_NUTRIENTS
            or getattr(self, item.name) is not None
        )

    def scaled(self, grams: float) -> MacroProfile:
        """Scale the profile to a portion in grams."""
        return MacroProfile(
            calories=round(self.kcal * grams, 1),
            protein_g=round(self.protein * grams, 1),
            fat_g=round(self.fat * grams, 1),
            carbs_g=round(self.carbs * grams, 1),
        )


@dataclass(frozen=True)
class HydrationResult:
    """Final per-gram nutrition for a chosen item."""

    per_gram: PerGramProfile
    data_source: DataSource
    from_store: bool = False

    @property
    def per_gram_keys(self) -> tuple[str, ...]:
        return self.per_gram.keys()

    @property
    def is_estimated(self) -> bool:
        return self.data_source is DataSource.ESTIMATED


@dataclass(frozen=True)
class HydrationItem:
    """Item handed to the hydration pipeline."""

    name: str
    title: str | None = None
    has_store_data: bool = False
    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    fiber: float | None = None
    sugar: float | None = None
    sodium: float | None = None
    canonical_key: str | None = None
    class_id: str | None = None
    item_id: str | None = None

    @property
    def display_name(self) -> str:
        return (self.title or self.name or "").strip()

    @classmethod
    def from_candidate(cls, candidate: Candidate) -> "HydrationItem":
        """Build a hydration item from a selected search candidate."""
        return cls(
            name=candidate.name,
            calories=candidate.calories_per_100g,
            class_id=candidate.class_id,
            item_id=candidate.id,
        )
