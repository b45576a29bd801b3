"""Tests for query normalization."""

import pytest

from food_resolver.services import normalizer
from food_resolver.services.normalizer import normalize


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Hawai Pizza Slice", "hawaii pizza slice"),
        ("califirnia roll", "california roll"),
        ("Peperoni pizza", "pepperoni pizza"),
        ("HotDog!", "hot dog"),
        ("2 hotdogs", "2 hot dogs"),
        ("Mac n' Cheese", "mac and cheese"),
        ("  grilled   CHICKEN  ", "grilled chicken"),
        ("1/2 cup oatmeal.", "1/2 cup oatmeal"),
        ("2.5 cups rice", "2.5 cups rice"),
        ("Café latte", "cafe latte"),
        ("burrrito", "burrito"),
        ("chiken sandwich", "chicken sandwich"),
        ("yoghurt with doughnut", "yogurt with donut"),
    ],
)
def test_normalize_examples(raw: str, expected: str) -> None:
    assert normalize(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "   ", "!!!", "...", "//"])
def test_normalize_empty_input(raw: str | None) -> None:
    assert normalize(raw) == ""


def test_normalize_is_idempotent() -> None:
    samples = [
        "Hawai Pizza Slice",
        "califirnia roll x2",
        "2 hotdogs w/ ketchup",
        "mac cheese",
        "Chiken Teriyaki Bowl!!",
        "1/2 cup of porridge",
        "barbecue ribs",
        "Crème brûlée",
        "spagetti and meatballs",
        "expresso 2 shots",
        "sammich",
        "hamburgers and fries",
        "a slice of peperoni pizza",
        "3.5 oz salmon",
        "doughnuts",
    ]
    for raw in samples:
        once = normalize(raw)
        assert normalize(once) == once, raw


def test_normalize_leaves_short_unknown_tokens() -> None:
    assert normalize("xyz pho") == "xyz pho"


def test_alias_validation_names_only_shadowing_sources(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    rules = normalizer._compile_rules(
        (("mac cheese", "mac and cheese"), ("pizza", "pie"))
    )
    monkeypatch.setattr(normalizer, "_RULES", rules)
    monkeypatch.setattr(
        normalizer,
        "_ALIAS_SOURCE_TOKENS",
        frozenset(token for source, _ in rules for token in source),
    )

    with pytest.raises(ValueError, match=r"shadow vocabulary: \['pizza'\]$"):
        normalizer._validate_rules()
