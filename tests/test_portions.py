"""Tests for portion inference."""

import pytest

from food_resolver.domain.portions import (
    PortionConfidence,
    PortionSignals,
    PortionSource,
)
from food_resolver.services.facets import parse_query
from food_resolver.services.portions import (
    estimate_portion,
    parse_ocr_portion,
    portion_for_facets,
    ratio_portion,
)


def test_ocr_portion_wins_over_other_signals() -> None:
    estimate = estimate_portion(
        "granola",
        "granola",
        PortionSignals(ocr_portion=55, user_preference=100, nutrition_ratio=80),
    )

    assert estimate.grams == 55
    assert estimate.source is PortionSource.OCR
    assert estimate.confidence is PortionConfidence.HIGH
    assert estimate.display == "55g • OCR"


@pytest.mark.parametrize("ocr_portion", [0, -5, 1500])
def test_out_of_bounds_signal_defers(ocr_portion: float) -> None:
    estimate = estimate_portion(
        "granola", "", PortionSignals(ocr_portion=ocr_portion, user_preference=42.4)
    )

    assert estimate.grams == 42
    assert estimate.source is PortionSource.USER_PREF
    assert estimate.display == "42g • yours"


def test_nutrition_ratio_is_medium() -> None:
    estimate = estimate_portion("chips", "", PortionSignals(nutrition_ratio=28))

    assert estimate.source is PortionSource.NUTRITION_RATIO
    assert estimate.confidence is PortionConfidence.MEDIUM
    assert estimate.display == "28g • calc"


def test_specific_food_then_category() -> None:
    banana = estimate_portion("Banana", "snacks")
    cereal = estimate_portion("Frosted flakes", "cereals")

    assert (banana.grams, banana.unit) == (118, "medium")
    assert banana.source is PortionSource.CATEGORY
    assert cereal.grams == 55
    assert cereal.confidence is PortionConfidence.MEDIUM


def test_category_equal_to_fallback_falls_through() -> None:
    estimate = estimate_portion("Mixed nuts", "nuts")

    assert estimate.grams == 30
    assert estimate.source is PortionSource.FALLBACK
    assert estimate.confidence is PortionConfidence.LOW


@pytest.mark.parametrize(("name", "category"), [("mystery", "unknown"), (None, None)])
def test_fallback_when_nothing_matches(name: str | None, category: str | None) -> None:
    estimate = estimate_portion(name, category)

    assert estimate.grams == 30
    assert estimate.source is PortionSource.FALLBACK
    assert estimate.confidence is PortionConfidence.LOW
    assert estimate.display == "30g • est."


def test_hot_dog_portion_from_facets() -> None:
    estimate = portion_for_facets(parse_query("hot dog"))

    assert estimate.grams == 50
    assert estimate.unit == "link"
    assert estimate.confidence is PortionConfidence.HIGH


def test_pizza_slice_portion_from_facets() -> None:
    single = portion_for_facets(parse_query("hawai pizza slice"))
    double = portion_for_facets(parse_query("2 slices pizza"))
    pieces = portion_for_facets(parse_query("3 pieces of pizza"))

    assert (single.grams, single.unit) == (125, "slice")
    assert single.display == "125g • est."
    assert double.grams == 250
    assert pieces.grams == 375


def test_explicit_weight_in_query() -> None:
    estimate = portion_for_facets(parse_query("250g rice"))

    assert (estimate.grams, estimate.unit) == (250, "g")
    assert estimate.source is PortionSource.USER_PREF


def test_unit_table_for_unknown_class() -> None:
    estimate = portion_for_facets(parse_query("2 cups mystery stew"))

    assert (estimate.grams, estimate.unit) == (480, "cup")
    assert estimate.confidence is PortionConfidence.MEDIUM


def test_explicit_class_id_and_unknown_food() -> None:
    egg = portion_for_facets(parse_query("mystery"), class_id="egg_large")
    unknown = portion_for_facets(parse_query("mystery"), food_name="mystery")

    assert (egg.grams, egg.unit) == (50, "egg")
    assert unknown.source is PortionSource.FALLBACK


def test_facet_portion_is_capped() -> None:
    estimate = portion_for_facets(parse_query("10 bowls teriyaki bowl"))

    assert estimate.grams == 1000


@pytest.mark.parametrize(
    ("text", "category", "expected"),
    [
        ("Serving size 1 bar (55 g)", None, 55),
        ("Serving size 1/2 cup (40g)", "cereals", 40),
        ("Serving size 3/4 cup", "cereals", 41),
        ("Serving size 1/2 cup", "grains", 23),
        ("Serving size 1 cup", None, 60),
        ("240 ml", "beverages", 240),
        ("330 ml", None, None),
        ("", None, None),
        ("no numbers here", None, None),
    ],
)
def test_parse_ocr_portion(text: str, category: str | None, expected: float | None) -> None:
    assert parse_ocr_portion(text, category) == expected


def test_ratio_portion() -> None:
    assert ratio_portion(500, 140) == 28
    assert ratio_portion(0, 140) is None
    assert ratio_portion(100, 900) is None
    assert ratio_portion(None, 100) is None


def test_half_gram_values_round_up() -> None:
    estimate = estimate_portion("x", "other", PortionSignals(ocr_portion=62.5))

    assert estimate.grams == 63
    assert estimate_portion("x", "other", PortionSignals(ocr_portion=61.5)).grams == 62
    assert ratio_portion(200, 125) == 63
