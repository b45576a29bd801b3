"""Dependency container wiring for the resolver."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import acreate_client

from food_resolver.adapters.edge_nutrition_estimator import HttpxEdgeNutritionEstimator
from food_resolver.adapters.fdc_catalog_client import HttpxFdcCatalogSearch
from food_resolver.adapters.openai_nutrition_estimator import OpenAINutritionEstimator
from food_resolver.adapters.supabase_canonical_table import (
    SupabaseCanonicalNutritionTable,
)
from food_resolver.config import Settings, candidate_policy
from food_resolver.services.cache import InMemoryCache
from food_resolver.services.candidates import CandidateSearchService, CatalogSearch
from food_resolver.services.canonical import (
    CanonicalNutritionTable,
    InMemoryCanonicalTable,
)
from food_resolver.services.hydration import NutritionEstimator, NutritionHydrator
from food_resolver.services.resolver import FoodTextResolver


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    catalog_search: CatalogSearch
    canonical_table: CanonicalNutritionTable
    estimator: NutritionEstimator
    cache: InMemoryCache
    candidate_service: CandidateSearchService
    hydrator: NutritionHydrator
    resolver: FoodTextResolver
    close_resources: Callable[[], Awaitable[None]]


async def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    cache = InMemoryCache()

    canonical_table: CanonicalNutritionTable
    if resolved_settings.canonical_table_backend == "memory":
        canonical_table = InMemoryCanonicalTable()
    else:
        supabase_client = await acreate_client(
            resolved_settings.supabase_url, resolved_settings.supabase_service_key
        )
        canonical_table = SupabaseCanonicalNutritionTable(supabase_client)

    catalog_search = HttpxFdcCatalogSearch.create(
        api_key=resolved_settings.fdc_api_key,
        base_url=resolved_settings.fdc_base_url,
        debug=resolved_settings.debug,
    )
    edge_estimator: HttpxEdgeNutritionEstimator | None = None
    estimator: NutritionEstimator
    if resolved_settings.nutrition_estimator == "openai":
        if not resolved_settings.openai_api_key:
            raise ValueError("OPENAI_API_KEY is required for the openai estimator")
        estimator = OpenAINutritionEstimator.create(
            api_key=resolved_settings.openai_api_key,
            model=resolved_settings.openai_model,
            reasoning_effort=resolved_settings.openai_reasoning_effort,
            store=resolved_settings.openai_store,
        )
    else:
        edge_estimator = HttpxEdgeNutritionEstimator.create(
            supabase_url=resolved_settings.supabase_url,
            service_key=resolved_settings.supabase_service_key,
            function_name=resolved_settings.estimator_function_name,
        )
        estimator = edge_estimator

    candidate_service = CandidateSearchService(
        catalog=catalog_search,
        cache=cache,
        policy=candidate_policy(resolved_settings),
        search_ttl_seconds=resolved_settings.search_cache_ttl_seconds,
        debug=resolved_settings.debug,
    )
    hydrator = NutritionHydrator(
        canonical_table=canonical_table,
        estimator=estimator,
        cache=cache,
        timeout_seconds=resolved_settings.hydration_timeout_seconds,
        canonical_ttl_seconds=resolved_settings.canonical_cache_ttl_seconds,
        debug=resolved_settings.debug,
    )
    resolver = FoodTextResolver(
        candidate_service=candidate_service,
        hydrator=hydrator,
        debug=resolved_settings.debug,
    )

    async def close_resources() -> None:
        await catalog_search.close()
        if edge_estimator is not None:
            await edge_estimator.close()

    return AppContainer(
        settings=resolved_settings,
        catalog_search=catalog_search,
        canonical_table=canonical_table,
        estimator=estimator,
        cache=cache,
        candidate_service=candidate_service,
        hydrator=hydrator,
        resolver=resolver,
        close_resources=close_resources,
    )
