"""Facade wiring normalization, search, portions and hydration."""

import logging
from dataclasses import dataclass

from food_resolver.domain.candidates import Candidate, CandidateOptions
from food_resolver.domain.facets import Facets
from food_resolver.domain.nutrition import HydrationItem, HydrationResult, MacroProfile
from food_resolver.domain.portions import PortionEstimate, PortionSignals, PortionSource
from food_resolver.services.candidates import (
    CandidateSearchService,
    should_show_candidate_picker,
)
from food_resolver.services.canonical import infer_class_id
from food_resolver.services.deadline import Deadline
from food_resolver.services.facets import parse_query
from food_resolver.services.hydration import NutritionHydrator
from food_resolver.services.normalizer import normalize
from food_resolver.services.portions import estimate_portion, portion_for_facets

_SIGNAL_SOURCES = frozenset(
    {PortionSource.OCR, PortionSource.USER_PREF, PortionSource.NUTRITION_RATIO}
)

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TextResolution:
    """Everything the caller needs to present one typed food entry."""

    query: str
    facets: Facets
    candidates: tuple[Candidate, ...]
    show_picker: bool
    portion: PortionEstimate
    class_id: str | None = None

    @property
    def selected(self) -> Candidate | None:
        """Top candidate when it can be auto-selected."""
        if self.show_picker or not self.candidates:
            return None
        return self.candidates[0]


@dataclass
class FoodTextResolver:
    """Resolves free-text food entries for a host application."""

    candidate_service: CandidateSearchService
    hydrator: NutritionHydrator
    debug: bool = False

    async def resolve(
        self,
        raw: str | None,
        options: CandidateOptions | None = None,
        signals: PortionSignals | None = None,
        category: str | None = None,
    ) -> TextResolution:
        """Normalize, parse, search and size a free-text entry."""
        query = normalize(raw)
        facets = parse_query(query)
        candidates = await self.candidate_service.get_food_candidates(
            query, facets, options
        )
        show_picker = should_show_candidate_picker(
            candidates, self.candidate_service.policy
        )
        class_id = infer_class_id(query, facets)
        portion = _portion(query, facets, class_id, signals, category)
        if self.debug:
            _logger.info(
                "Resolved text: query=%s core=%s candidates=%s picker=%s portion=%s",
                query,
                facets.core,
                len(candidates),
                show_picker,
                portion.display,
            )
        return TextResolution(
            query=query,
            facets=facets,
            candidates=tuple(candidates),
            show_picker=show_picker,
            portion=portion,
            class_id=class_id,
        )

    async def hydrate(
        self,
        selection: Candidate | HydrationItem,
        deadline: Deadline | None = None,
    ) -> HydrationResult:
        """Hydrate the chosen candidate or item."""
        item = (
            selection
            if isinstance(selection, HydrationItem)
            else HydrationItem.from_candidate(selection)
        )
        return await self.hydrator.hydrate(item, deadline=deadline)

    @staticmethod
    def totals(result: HydrationResult, portion: PortionEstimate) -> MacroProfile:
        """Scale hydrated nutrition to the inferred portion."""
        return result.per_gram.scaled(portion.grams)


def _portion(
    query: str,
    facets: Facets,
    class_id: str | None,
    signals: PortionSignals | None,
    category: str | None,
) -> PortionEstimate:
    if signals is not None:
        estimate = estimate_portion(query, category, signals)
        if estimate.source in _SIGNAL_SOURCES:
            return estimate
    if class_id is None and category:
        return estimate_portion(query, category)
    return portion_for_facets(facets, class_id=class_id, food_name=query)
