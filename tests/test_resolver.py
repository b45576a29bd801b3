"""Tests for the resolver facade."""

import asyncio

import pytest

from food_resolver.domain.candidates import CandidateKind, CandidateOptions
from food_resolver.domain.nutrition import DataSource, HydrationItem
from food_resolver.domain.portions import PortionSignals, PortionSource
from food_resolver.services.cache import InMemoryCache
from food_resolver.services.candidates import CandidateSearchService
from food_resolver.services.canonical import InMemoryCanonicalTable
from food_resolver.services.hydration import NutritionHydrator
from food_resolver.services.resolver import FoodTextResolver
from tests.conftest import FakeCatalogSearch, FakeEstimator, make_hit


def _resolver(catalog: FakeCatalogSearch) -> FoodTextResolver:
    cache = InMemoryCache()
    return FoodTextResolver(
        candidate_service=CandidateSearchService(catalog=catalog, cache=cache),
        hydrator=NutritionHydrator(
            canonical_table=InMemoryCanonicalTable(),
            estimator=FakeEstimator(),
            cache=cache,
            timeout_seconds=1.0,
        ),
    )


def test_resolve_hot_dog_end_to_end() -> None:
    catalog = FakeCatalogSearch(
        hits=[
            make_hit("Oscar Mayer Hot Dog", 0.92),
            make_hit("Hot dog, plain", 0.9, kind=CandidateKind.GENERIC),
        ]
    )
    resolver = _resolver(catalog)

    resolution = asyncio.run(
        resolver.resolve("HotDog", CandidateOptions(prefer_generic=True))
    )

    assert resolution.query == "hot dog"
    assert "hot_dog" in resolution.facets.core
    assert resolution.class_id == "hot_dog_link"
    assert resolution.candidates[0].name == "Hot dog, plain"
    assert resolution.show_picker is True
    assert resolution.selected is None
    assert (resolution.portion.grams, resolution.portion.unit) == (50, "link")

    result = asyncio.run(resolver.hydrate(resolution.candidates[0]))
    totals = resolver.totals(result, resolution.portion)

    assert result.data_source is DataSource.CANONICAL
    assert result.per_gram.kcal == pytest.approx(2.9)
    assert totals.calories == pytest.approx(145.0)


def test_resolve_auto_selects_clear_winner() -> None:
    catalog = FakeCatalogSearch(
        hits=[
            make_hit("Pizza, cheese", 0.95, kind=CandidateKind.GENERIC),
            make_hit("Pizza, pepperoni", 0.6, kind=CandidateKind.GENERIC),
        ]
    )

    resolution = asyncio.run(_resolver(catalog).resolve("hawai pizza slice"))

    assert resolution.query == "hawaii pizza slice"
    assert resolution.show_picker is False
    assert resolution.selected == resolution.candidates[0]
    assert (resolution.portion.grams, resolution.portion.unit) == (125, "slice")


def test_resolve_prefers_label_signals() -> None:
    resolution = asyncio.run(
        _resolver(FakeCatalogSearch()).resolve(
            "granola", signals=PortionSignals(ocr_portion=55)
        )
    )

    assert resolution.candidates == ()
    assert resolution.portion.grams == 55
    assert resolution.portion.source is PortionSource.OCR


def test_resolve_uses_category_for_unknown_food() -> None:
    resolution = asyncio.run(
        _resolver(FakeCatalogSearch()).resolve("frosted flakes", category="cereals")
    )

    assert resolution.portion.grams == 55


def test_resolve_survives_search_failure() -> None:
    catalog = FakeCatalogSearch(error=RuntimeError("down"))

    resolution = asyncio.run(_resolver(catalog).resolve("rice"))

    assert resolution.candidates == ()
    assert resolution.show_picker is False
    assert resolution.portion.unit == "cup"


def test_hydrate_accepts_items() -> None:
    item = HydrationItem(name="Trail mix", has_store_data=True, calories=460)

    result = asyncio.run(_resolver(FakeCatalogSearch()).hydrate(item))

    assert result.data_source is DataSource.STORE
    assert result.per_gram.kcal == pytest.approx(4.6)
