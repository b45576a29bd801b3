"""Portion inference through an ordered chain of rules."""

import math
import re
from dataclasses import dataclass
from typing import Protocol

from food_resolver.domain.facets import Facets
from food_resolver.domain.portions import (
    PortionConfidence,
    PortionEstimate,
    PortionSignals,
    PortionSource,
)
from food_resolver.services.canonical import infer_class_id
from food_resolver.services.normalizer import normalize

FALLBACK_GRAMS = 30
MAX_PORTION_GRAMS = 1000
DEFAULT_UNIT = "serving"

# Normalized food name -> (grams, unit).
SPECIFIC_FOODS: dict[str, tuple[int, str]] = {
    "banana": (118, "medium"),
    "apple": (182, "medium"),
    "egg": (50, "large"),
    "chicken breast": (150, "piece"),
    "oatmeal": (40, "cup dry"),
    "white rice": (150, "cup"),
    "avocado": (150, "whole"),
    "bagel": (105, "bagel"),
    "protein bar": (60, "bar"),
    "granola bar": (40, "bar"),
    "peanut butter": (32, "tbsp"),
    "milk": (240, "cup"),
    "coffee": (240, "cup"),
    "croissant": (57, "croissant"),
}

CATEGORY_DEFAULTS: dict[str, int] = {
    "cereals": 55,
    "breakfast-cereals": 55,
    "granola": 55,
    "nuts": 30,
    "snacks": 25,
    "candy": 40,
    "chocolate": 40,
    "beverages": 240,
    "dairy": 150,
    "yogurt": 170,
    "protein-bars": 60,
    "cookies": 30,
    "crackers": 30,
    "chips": 28,
}
_CATEGORY_UNITS = {"beverages": "cup", "yogurt": "cup", "protein-bars": "bar"}

# Food class -> (grams per unit, unit, confidence).
CLASS_PORTIONS: dict[str, tuple[int, str, PortionConfidence]] = {
    "hot_dog_link": (50, "link", PortionConfidence.HIGH),
    "pizza_slice": (125, "slice", PortionConfidence.HIGH),
    "teriyaki_bowl": (350, "bowl", PortionConfidence.MEDIUM),
    "california_roll": (180, "roll", PortionConfidence.MEDIUM),
    "burger": (220, "burger", PortionConfidence.MEDIUM),
    "burrito": (300, "burrito", PortionConfidence.MEDIUM),
    "taco": (100, "taco", PortionConfidence.MEDIUM),
    "sandwich": (200, "sandwich", PortionConfidence.MEDIUM),
    "soup_bowl": (350, "bowl", PortionConfidence.MEDIUM),
    "salad_side": (150, "bowl", PortionConfidence.MEDIUM),
    "mac_and_cheese": (200, "cup", PortionConfidence.MEDIUM),
    "fries_medium": (117, "serving", PortionConfidence.MEDIUM),
    "oatmeal_cooked": (234, "cup", PortionConfidence.MEDIUM),
    "pasta_cooked": (140, "cup", PortionConfidence.MEDIUM),
    "rice_cooked": (158, "cup", PortionConfidence.MEDIUM),
    "egg_large": (50, "egg", PortionConfidence.HIGH),
    "chicken_breast": (150, "piece", PortionConfidence.MEDIUM),
    "steak": (225, "steak", PortionConfidence.MEDIUM),
    "salmon_fillet": (150, "fillet", PortionConfidence.MEDIUM),
    "bread_slice": (30, "slice", PortionConfidence.HIGH),
    "bagel": (105, "bagel", PortionConfidence.HIGH),
    "pancake": (77, "pancake", PortionConfidence.MEDIUM),
    "waffle": (75, "waffle", PortionConfidence.MEDIUM),
    "donut": (60, "donut", PortionConfidence.HIGH),
    "muffin": (113, "muffin", PortionConfidence.MEDIUM),
    "cookie": (30, "cookie", PortionConfidence.MEDIUM),
    "banana_medium": (118, "banana", PortionConfidence.HIGH),
    "apple_medium": (182, "apple", PortionConfidence.HIGH),
    "avocado": (150, "avocado", PortionConfidence.MEDIUM),
    "yogurt_cup": (170, "cup", PortionConfidence.HIGH),
    "ice_cream_scoop": (66, "scoop", PortionConfidence.MEDIUM),
}

# Canonical unit -> grams for one unit when the food class is unknown.
UNIT_GRAMS: dict[str, float] = {
    "slice": 30,
    "piece": 50,
    "link": 50,
    "cup": 240,
    "bowl": 300,
    "plate": 350,
    "serving": 100,
    "scoop": 66,
    "tbsp": 15,
    "tsp": 5,
    "oz": 28.35,
    "g": 1,
    "ml": 1,
    "bar": 40,
    "can": 355,
    "bottle": 500,
    "strip": 10,
    "patty": 113,
    "fillet": 150,
}
# Units that count whole class portions whatever the class unit is.
_COUNTING_UNITS = frozenset({"piece", "serving"})
_WEIGHT_UNITS = frozenset({"g", "oz", "ml"})

# Grams per cup and per millilitre by label category.
CUP_DENSITIES: dict[str, float] = {
    "cereals": 55,
    "grains": 45,
    "nuts": 120,
    "dairy": 240,
    "beverages": 240,
}
DEFAULT_CUP_DENSITY = 60.0
ML_DENSITIES: dict[str, float] = {"oils": 0.92, "beverages": 1.0, "dairy": 1.03}
OCR_MIN_GRAMS = 5
OCR_MAX_GRAMS = 250

_OCR_GRAMS = re.compile(r"(\d+(?:\.\d+)?)\s*g(?:\s|$|[^a-z])")
_OCR_SERVING_SIZE = re.compile(r"serving\s+size.*?\((\d+(?:\.\d+)?)\s*g\)")
_OCR_FRACTION_CUP = re.compile(r"(\d+)/(\d+)\s*cups?")
_OCR_DECIMAL_CUP = re.compile(r"(\d+(?:\.\d+)?)\s*cups?")
_OCR_ML = re.compile(r"(\d+(?:\.\d+)?)\s*ml")


class PortionRule(Protocol):
    """A single step of the portion priority chain."""

    def apply(
        self, food_name: str, category: str, signals: PortionSignals
    ) -> PortionEstimate | None:
        """Return an estimate, or None to defer to the next rule."""


@dataclass(frozen=True)
class SignalRule(PortionRule):
    """Use a caller-supplied gram signal when it is in bounds."""

    attribute: str
    source: PortionSource
    confidence: PortionConfidence

    def apply(
        self, food_name: str, category: str, signals: PortionSignals
    ) -> PortionEstimate | None:
        value = getattr(signals, self.attribute)
        if not _in_bounds(value):
            return None
        return _estimate(value, DEFAULT_UNIT, self.source, self.confidence)


@dataclass(frozen=True)
class SpecificFoodRule(PortionRule):
    """Exact name match against well-known single foods."""

    table: dict[str, tuple[int, str]]

    def apply(
        self, food_name: str, category: str, signals: PortionSignals
    ) -> PortionEstimate | None:
        entry = self.table.get(normalize(food_name))
        if entry is None:
            return None
        grams, unit = entry
        return _estimate(grams, unit, PortionSource.CATEGORY, PortionConfidence.MEDIUM)


@dataclass(frozen=True)
class CategoryRule(PortionRule):
    """Category default, unless it merely repeats the fallback."""

    table: dict[str, int]

    def apply(
        self, food_name: str, category: str, signals: PortionSignals
    ) -> PortionEstimate | None:
        key = category.strip().lower()
        grams = self.table.get(key)
        if grams is None or grams == FALLBACK_GRAMS:
            return None
        unit = _CATEGORY_UNITS.get(key, DEFAULT_UNIT)
        return _estimate(grams, unit, PortionSource.CATEGORY, PortionConfidence.MEDIUM)


@dataclass(frozen=True)
class FallbackRule(PortionRule):
    """Terminal rule; always produces the fallback portion."""

    def apply(
        self, food_name: str, category: str, signals: PortionSignals
    ) -> PortionEstimate | None:
        return _estimate(
            FALLBACK_GRAMS, DEFAULT_UNIT, PortionSource.FALLBACK, PortionConfidence.LOW
        )


DEFAULT_PORTION_RULES: tuple[PortionRule, ...] = (
    SignalRule("ocr_portion", PortionSource.OCR, PortionConfidence.HIGH),
    SignalRule("user_preference", PortionSource.USER_PREF, PortionConfidence.HIGH),
    SignalRule(
        "nutrition_ratio", PortionSource.NUTRITION_RATIO, PortionConfidence.MEDIUM
    ),
    SpecificFoodRule(SPECIFIC_FOODS),
    CategoryRule(CATEGORY_DEFAULTS),
    FallbackRule(),
)


def estimate_portion(
    food_name: str | None,
    category: str | None,
    options: PortionSignals | None = None,
    rules: tuple[PortionRule, ...] = DEFAULT_PORTION_RULES,
) -> PortionEstimate:
    """Return the portion from the first rule in the chain that applies."""
    signals = options or PortionSignals()
    for rule in rules:
        estimate = rule.apply(food_name or "", category or "", signals)
        if estimate is not None:
            return estimate
    return FallbackRule().apply(food_name or "", category or "", signals)


def portion_for_facets(
    facets: Facets, class_id: str | None = None, food_name: str = ""
) -> PortionEstimate:
    """Infer a portion from query facets and the food class.

    An explicit weight in the query wins. A count of the class unit (or of a
    generic counting unit) multiplies the class portion. Other units use the
    generic unit table, and unknown classes defer to ``estimate_portion``.
    """
    resolved_class = class_id or infer_class_id(food_name, facets)
    class_portion = CLASS_PORTIONS.get(resolved_class) if resolved_class else None
    units = facets.units

    if units is not None and units.unit in _WEIGHT_UNITS:
        grams = units.count * UNIT_GRAMS[units.unit]
        if _in_bounds(grams):
            return _estimate(
                grams, units.unit, PortionSource.USER_PREF, PortionConfidence.HIGH
            )

    if class_portion is not None:
        grams, unit, confidence = class_portion
        count = 1.0
        if units is not None and (
            units.unit == unit or units.unit in _COUNTING_UNITS
        ):
            count = units.count
        return _estimate(
            min(grams * count, MAX_PORTION_GRAMS),
            unit,
            PortionSource.CATEGORY,
            confidence,
        )

    if units is not None and units.unit in UNIT_GRAMS:
        grams = min(units.count * UNIT_GRAMS[units.unit], MAX_PORTION_GRAMS)
        return _estimate(
            grams, units.unit, PortionSource.CATEGORY, PortionConfidence.MEDIUM
        )

    return estimate_portion(food_name, None)


def parse_ocr_portion(text: str | None, category: str | None = None) -> float | None:
    """Extract a serving weight in grams from label text."""
    if not text:
        return None
    lowered = text.lower()
    key = (category or "").strip().lower()

    readings: list[float] = []
    for pattern in (_OCR_GRAMS, _OCR_SERVING_SIZE):
        match = pattern.search(lowered)
        if match:
            readings.append(float(match.group(1)))
    density = CUP_DENSITIES.get(key, DEFAULT_CUP_DENSITY)
    fraction = _OCR_FRACTION_CUP.search(lowered)
    if fraction and int(fraction.group(2)) != 0:
        cups = int(fraction.group(1)) / int(fraction.group(2))
        readings.append(_round_half_up(cups * density))
    decimal = _OCR_DECIMAL_CUP.search(lowered)
    if decimal:
        readings.append(_round_half_up(float(decimal.group(1)) * density))
    millilitres = _OCR_ML.search(lowered)
    if millilitres:
        ml = float(millilitres.group(1))
        readings.append(_round_half_up(ml * ML_DENSITIES.get(key, 1.0)))

    for grams in readings:
        if OCR_MIN_GRAMS <= grams <= OCR_MAX_GRAMS:
            return grams
    return None


def ratio_portion(
    per_100g_kcal: float | None, per_serving_kcal: float | None
) -> float | None:
    """Infer serving grams from per-100g and per-serving energy."""
    if not per_100g_kcal or not per_serving_kcal or per_100g_kcal <= 0:
        return None
    grams = _round_half_up(per_serving_kcal / per_100g_kcal * 100)
    if OCR_MIN_GRAMS <= grams <= OCR_MAX_GRAMS:
        return float(grams)
    return None


def _in_bounds(value: float | None) -> bool:
    return value is not None and 0 < value <= MAX_PORTION_GRAMS


def _estimate(
    grams: float,
    unit: str,
    source: PortionSource,
    confidence: PortionConfidence,
) -> PortionEstimate:
    return PortionEstimate(
        grams=max(1, _round_half_up(grams)),
        unit=unit,
        source=source,
        confidence=confidence,
    )


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)
