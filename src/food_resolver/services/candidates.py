"""Candidate search with re-ranking, generic promotion and the picker gate."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from typing import Protocol

from food_resolver.domain.candidates import (
    Candidate,
    CandidateKind,
    CandidateOptions,
    CandidatePolicy,
    CatalogHit,
)
from food_resolver.domain.facets import Facets
from food_resolver.services.cache import Cache
from food_resolver.services.canonical import canonical_for, infer_class_id
from food_resolver.services.facets import parse_query
from food_resolver.services.normalizer import normalize

PREP_BOOST = 0.05
CUISINE_BOOST = 0.05
KNOWN_CLASS_BOOST = 0.03
BRAND_LIMIT = 2
BRAND_LIMIT_EXTENDED = 4
_SCORE_EPSILON = 1e-9

_logger = logging.getLogger(__name__)


class CatalogSearch(Protocol):
    """Interface for the external food catalog search."""

    async def search(self, query: str, limit: int) -> list[CatalogHit]:
        """Return up to ``limit`` catalog rows for a normalized query."""


@dataclass
class CandidateSearchService:
    """Searches the catalog and orders the results for selection."""

    catalog: CatalogSearch
    cache: Cache
    policy: CandidatePolicy = field(default_factory=CandidatePolicy)
    search_ttl_seconds: int = 3600
    debug: bool = False

    async def get_food_candidates(
        self,
        query: str | None,
        facets_or_limit: Facets | int | None = None,
        options: CandidateOptions | None = None,
    ) -> list[Candidate]:
        """Return ranked candidates for a query. Never raises."""
        resolved_options = options or CandidateOptions()
        normalized = normalize(query)
        if not normalized:
            return []

        facets = facets_or_limit if isinstance(facets_or_limit, Facets) else None
        limit = self._result_limit(facets_or_limit, resolved_options)
        fetch_limit = max(self.policy.fetch_limit, limit)
        try:
            hits = await self._search(normalized, fetch_limit)
        except Exception as exc:
            _logger.warning("Candidate search failed: query=%s error=%s", normalized, exc)
            return []
        if not hits:
            if self.debug:
                _logger.info("Candidate search empty: query=%s", normalized)
            return []

        candidates = [_to_candidate(hit, facets) for hit in hits]
        if facets is not None:
            candidates = self._filter_core(candidates, facets, resolved_options)
        candidates = sorted(
            candidates, key=lambda candidate: candidate.score, reverse=True
        )
        if resolved_options.prefer_generic:
            candidates = promote_generic(
                candidates, self.policy.promotion_score_delta
            )
            if not resolved_options.disable_brand_interleave:
                candidates = interleave_brands(
                    candidates,
                    BRAND_LIMIT_EXTENDED
                    if resolved_options.allow_more_brands
                    else BRAND_LIMIT,
                )
        if resolved_options.max_per_family:
            candidates = _cap_families(candidates, resolved_options.max_per_family)
        candidates = candidates[:limit]
        if self.debug:
            _logger.info(
                "Candidate search: query=%s hits=%s returned=%s top=%s",
                normalized,
                len(hits),
                len(candidates),
                candidates[0].name if candidates else None,
            )
        return candidates

    def _result_limit(
        self, facets_or_limit: Facets | int | None, options: CandidateOptions
    ) -> int:
        if isinstance(facets_or_limit, int) and not isinstance(facets_or_limit, bool):
            return max(1, facets_or_limit)
        return max(1, options.max_results or self.policy.max_results)

    async def _search(self, normalized: str, limit: int) -> list[CatalogHit]:
        cache_key = f"catalog:search:{normalized}:{limit}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            return cached
        hits = list(await self.catalog.search(normalized, limit))
        if hits:
            self.cache.set(cache_key, hits, ttl_seconds=self.search_ttl_seconds)
        return hits

    def _filter_core(
        self, candidates: list[Candidate], facets: Facets, options: CandidateOptions
    ) -> list[Candidate]:
        if not options.require_core_token or not facets.core:
            return candidates
        wanted = set(facets.core)
        matching = [
            candidate
            for candidate in candidates
            if wanted & set(parse_query(candidate.name).core)
        ]
        if matching:
            return matching
        if self.debug:
            _logger.info("Core filter matched nothing: core=%s", facets.core)
        return candidates


def promote_generic(candidates: Sequence[Candidate], delta: float) -> list[Candidate]:
    """Move the first generic within ``delta`` of a top brand result to the front."""
    ranked = list(candidates)
    if len(ranked) < 2 or ranked[0].kind is not CandidateKind.BRAND:
        return ranked
    top_score = ranked[0].score
    for index in range(1, len(ranked)):
        candidate = ranked[index]
        if candidate.kind is not CandidateKind.GENERIC:
            continue
        if top_score - candidate.score <= delta + _SCORE_EPSILON:
            ranked.insert(0, ranked.pop(index))
            break
    return ranked


def interleave_brands(
    candidates: Sequence[Candidate], brand_limit: int
) -> list[Candidate]:
    """List generics first, then at most ``brand_limit`` brand or restaurant items."""
    generics = [item for item in candidates if item.kind is CandidateKind.GENERIC]
    branded = [item for item in candidates if item.kind is not CandidateKind.GENERIC]
    return generics + branded[: max(0, brand_limit)]


def should_show_candidate_picker(
    candidates: Sequence[Candidate], policy: CandidatePolicy | None = None
) -> bool:
    """Return True when the user should choose between candidates."""
    if len(candidates) < 2:
        return False
    resolved_policy = policy or CandidatePolicy()
    top, runner_up = candidates[0].confidence, candidates[1].confidence
    if top < resolved_policy.picker_min_confidence:
        return True
    return top - runner_up < resolved_policy.picker_min_gap


def _to_candidate(hit: CatalogHit, facets: Facets | None) -> Candidate:
    confidence = min(max(hit.confidence, 0.0), 1.0)
    class_id = infer_class_id(hit.name)
    candidate = Candidate(
        id=hit.id,
        name=hit.name,
        kind=hit.kind,
        calories_per_100g=max(hit.calories_per_100g, 0.0),
        confidence=confidence,
        score=confidence,
        class_id=class_id,
        image_url=hit.image_url,
    )
    if facets is None:
        return candidate
    return replace(candidate, score=confidence + _boost(hit.name, class_id, facets))


def _boost(name: str, class_id: str | None, facets: Facets) -> float:
    name_facets = parse_query(name)
    boost = 0.0
    if set(facets.prep) & set(name_facets.prep):
        boost += PREP_BOOST
    if set(facets.cuisine) & set(name_facets.cuisine):
        boost += CUISINE_BOOST
    if canonical_for(class_id) is not None:
        boost += KNOWN_CLASS_BOOST
    return boost


def _cap_families(candidates: list[Candidate], max_per_family: int) -> list[Candidate]:
    counts: dict[str, int] = {}
    kept: list[Candidate] = []
    for candidate in candidates:
        family = candidate.class_id or candidate.id
        if counts.get(family, 0) >= max_per_family:
            continue
        counts[family] = counts.get(family, 0) + 1
        kept.append(candidate)
    return kept
