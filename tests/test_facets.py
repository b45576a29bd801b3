"""Tests for the facet parser."""

from food_resolver.domain.facets import Facets, UnitCount
from food_resolver.services.facets import parse_query


def test_count_and_unit_with_core() -> None:
    facets = parse_query("2 slices pizza")

    assert facets.units == UnitCount(count=2.0, unit="slice")
    assert facets.core == ("pizza",)


def test_multiword_core_noun() -> None:
    assert parse_query("hot dog").core == ("hot_dog",)
    assert parse_query("2 hotdogs").core == ("hot_dog",)
    assert parse_query("ice cream").core == ("ice_cream",)


def test_cuisine_variant_and_trailing_unit_word() -> None:
    facets = parse_query("hawai pizza slice")

    assert facets.cuisine == ("hawaiian",)
    assert facets.core == ("pizza",)
    assert facets.units is None


def test_prep_and_core_in_query_order() -> None:
    facets = parse_query("Grilled chicken teriyaki bowl")

    assert facets.prep == ("grilled",)
    assert facets.core == ("chicken", "teriyaki_bowl")


def test_number_word_and_of() -> None:
    facets = parse_query("a cup of oatmeal")

    assert facets.units == UnitCount(count=1.0, unit="cup")
    assert facets.core == ("oatmeal",)


def test_fraction_count() -> None:
    facets = parse_query("1/2 cup rice")

    assert facets.units == UnitCount(count=0.5, unit="cup")
    assert facets.core == ("rice",)


def test_number_word_requires_separate_token() -> None:
    facets = parse_query("apple")

    assert facets.units is None
    assert facets.core == ("apple",)


def test_plural_core_nouns_are_singularized_and_deduplicated() -> None:
    facets = parse_query("pancakes and more pancakes with cookies")

    assert facets.core == ("pancake", "cookie")


def test_zero_count_is_ignored() -> None:
    assert parse_query("0/0 cup rice").units is None


def test_empty_query_gives_empty_facets() -> None:
    facets = parse_query("")

    assert facets == Facets()
    assert facets.is_empty
    assert parse_query(None).is_empty
