"""Per-gram nutrition hydration with a bounded fallback chain."""

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Protocol

from food_resolver.domain.estimator import EstimatorResponse
from food_resolver.domain.nutrition import (
    DataSource,
    HydrationItem,
    HydrationResult,
    PerGramProfile,
)
from food_resolver.services.cache import Cache
from food_resolver.services.canonical import (
    CanonicalNutritionTable,
    canonical_for,
    derive_canonical_key,
    infer_class_id,
)
from food_resolver.services.deadline import (
    Deadline,
    DeadlineExceeded,
    HydrationCancelled,
)

_logger = logging.getLogger(__name__)

# Food class -> (kcal, protein, carbs, fat) per gram for synthesized estimates.
ESTIMATE_HEURISTICS: dict[str, tuple[float, float, float, float]] = {
    "hot_dog_link": (2.9, 0.10, 0.02, 0.26),
    "pizza_slice": (2.66, 0.11, 0.33, 0.10),
    "teriyaki_bowl": (1.63, 0.12, 0.21, 0.04),
    "california_roll": (1.29, 0.04, 0.18, 0.06),
    "rice_cooked": (1.30, 0.027, 0.28, 0.003),
    "egg_large": (1.55, 0.13, 0.011, 0.11),
    "oatmeal_cooked": (0.68, 0.024, 0.12, 0.014),
}
DEFAULT_ESTIMATE: tuple[float, float, float, float] = (2.0, 0.08, 0.25, 0.08)
ESTIMATE_FIBER = 0.02
ESTIMATE_SUGAR = 0.05
ESTIMATE_SODIUM = 0.4


class NutritionEstimator(Protocol):
    """Interface for the remote name-based nutrition estimator."""

    async def estimate(
        self, food_name: str, amount_percentage: int = 100
    ) -> dict[str, object]:
        """Return the raw ``{"nutrition": {...}}`` payload for a food name."""


class HydrationState(StrEnum):
    """Lifecycle of a single hydration request."""

    IDLE = "idle"
    RESOLVING = "resolving"
    RESOLVED = "resolved"
    TIMED_OUT = "timed_out"
    FAILED = "failed"
    ESTIMATED_RESOLVED = "estimated_resolved"
    CANCELLED = "cancelled"


_TRANSITIONS: dict[HydrationState, frozenset[HydrationState]] = {
    HydrationState.IDLE: frozenset({HydrationState.RESOLVING}),
    HydrationState.RESOLVING: frozenset(
        {
            HydrationState.RESOLVED,
            HydrationState.TIMED_OUT,
            HydrationState.FAILED,
            HydrationState.CANCELLED,
        }
    ),
    HydrationState.TIMED_OUT: frozenset({HydrationState.ESTIMATED_RESOLVED}),
    HydrationState.FAILED: frozenset({HydrationState.ESTIMATED_RESOLVED}),
}
_TERMINAL_STATES = frozenset(
    {
        HydrationState.RESOLVED,
        HydrationState.ESTIMATED_RESOLVED,
        HydrationState.CANCELLED,
    }
)


@dataclass
class HydrationRun:
    """State holder for one hydration. Terminal states ignore later moves."""

    state: HydrationState = HydrationState.IDLE
    result: HydrationResult | None = None

    @property
    def is_terminal(self) -> bool:
        return self.state in _TERMINAL_STATES

    def transition(self, target: HydrationState) -> bool:
        """Move to ``target``; returns False when the run is already settled."""
        if self.is_terminal:
            return False
        if target not in _TRANSITIONS.get(self.state, frozenset()):
            raise ValueError(f"Invalid hydration transition {self.state} -> {target}")
        self.state = target
        return True

    def settle(self, result: HydrationResult) -> bool:
        """Record the final result unless the run is already settled."""
        target = (
            HydrationState.ESTIMATED_RESOLVED
            if self.state in (HydrationState.TIMED_OUT, HydrationState.FAILED)
            else HydrationState.RESOLVED
        )
        if not self.transition(target):
            return False
        self.result = result
        return True


class HydrationStep(Protocol):
    """One source in the hydration fallback chain."""

    name: str

    async def resolve(
        self, item: HydrationItem, deadline: Deadline
    ) -> HydrationResult | None:
        """Return a result, None to defer, or raise on failure."""


@dataclass
class StoreDataStep(HydrationStep):
    """Use per-100g values the item already carries."""

    name: str = "store"

    async def resolve(
        self, item: HydrationItem, deadline: Deadline
    ) -> HydrationResult | None:
        if not item.has_store_data:
            return None
        per_gram = PerGramProfile.from_per_100g(
            calories=item.calories,
            protein=item.protein,
            carbs=item.carbs,
            fat=item.fat,
            fiber=item.fiber,
            sugar=item.sugar,
            sodium=item.sodium,
        )
        return HydrationResult(
            per_gram=per_gram, data_source=DataSource.STORE, from_store=True
        )


@dataclass
class CanonicalStep(HydrationStep):
    """Look the item up in the canonical nutrition table."""

    table: CanonicalNutritionTable
    cache: Cache
    ttl_seconds: int = 86400
    name: str = "canonical"

    async def resolve(
        self, item: HydrationItem, deadline: Deadline
    ) -> HydrationResult | None:
        key = (
            item.canonical_key
            or canonical_for(item.class_id)
            or derive_canonical_key(item.display_name)
        )
        if not key:
            return None
        cache_key = f"canonical:{key}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, PerGramProfile):
            return HydrationResult(per_gram=cached, data_source=DataSource.CANONICAL)

        profile = await deadline.run(self.table.lookup(key))
        if profile is None:
            return None
        self.cache.set(cache_key, profile, ttl_seconds=self.ttl_seconds)
        return HydrationResult(per_gram=profile, data_source=DataSource.CANONICAL)


@dataclass
class LegacyEstimatorStep(HydrationStep):
    """Ask the remote estimator by food name."""

    estimator: NutritionEstimator
    name: str = "legacy"

    async def resolve(
        self, item: HydrationItem, deadline: Deadline
    ) -> HydrationResult | None:
        food_name = item.display_name
        if not food_name:
            return None
        raw = await deadline.run(
            self.estimator.estimate(food_name, amount_percentage=100)
        )
        nutrition = EstimatorResponse.model_validate(raw).nutrition
        per_gram = PerGramProfile.from_per_100g(
            calories=nutrition.calories,
            protein=nutrition.protein,
            carbs=nutrition.carbs,
            fat=nutrition.fat,
            fiber=nutrition.fiber,
            sugar=nutrition.sugar,
            sodium=nutrition.sodium,
        )
        return HydrationResult(per_gram=per_gram, data_source=DataSource.LEGACY)


@dataclass
class NutritionHydrator:
    """Resolves a per-gram profile within a hard time budget."""

    canonical_table: CanonicalNutritionTable
    estimator: NutritionEstimator
    cache: Cache
    timeout_seconds: float = 6.0
    canonical_ttl_seconds: int = 86400
    debug: bool = False
    steps: tuple[HydrationStep, ...] = field(init=False)

    def __post_init__(self) -> None:
        self.steps = (
            StoreDataStep(),
            CanonicalStep(
                table=self.canonical_table,
                cache=self.cache,
                ttl_seconds=self.canonical_ttl_seconds,
            ),
            LegacyEstimatorStep(estimator=self.estimator),
        )

    async def hydrate(
        self,
        item: HydrationItem,
        deadline: Deadline | None = None,
        run: HydrationRun | None = None,
    ) -> HydrationResult:
        """Return per-gram nutrition for an item.

        Falls back to a synthesized estimate on timeout or when every source
        fails. Only an explicit ``deadline.cancel()`` escapes, as
        ``HydrationCancelled``.
        """
        active_deadline = deadline or Deadline.after(self.timeout_seconds)
        tracker = run or HydrationRun()
        tracker.transition(HydrationState.RESOLVING)
        if active_deadline.cancelled:
            tracker.transition(HydrationState.CANCELLED)
            raise HydrationCancelled

        outcome = HydrationState.FAILED
        for step in self.steps:
            try:
                result = await step.resolve(item, active_deadline)
            except HydrationCancelled:
                tracker.transition(HydrationState.CANCELLED)
                if self.debug:
                    _logger.info("Hydration cancelled: item=%s", item.display_name)
                raise
            except DeadlineExceeded:
                _logger.warning(
                    "Hydration timed out: item=%s step=%s budget=%ss",
                    item.display_name,
                    step.name,
                    self.timeout_seconds,
                )
                outcome = HydrationState.TIMED_OUT
                break
            except Exception as exc:
                _logger.warning(
                    "Hydration step failed: item=%s step=%s error=%s",
                    item.display_name,
                    step.name,
                    exc,
                )
                continue
            if result is not None:
                tracker.settle(result)
                if self.debug:
                    _logger.info(
                        "Hydration resolved: item=%s source=%s",
                        item.display_name,
                        result.data_source,
                    )
                return result

        tracker.transition(outcome)
        estimate = synthesize_estimate(item)
        tracker.settle(estimate)
        if self.debug:
            _logger.info(
                "Hydration estimated: item=%s reason=%s kcal_per_g=%s",
                item.display_name,
                outcome,
                estimate.per_gram.kcal,
            )
        return estimate


def synthesize_estimate(item: HydrationItem) -> HydrationResult:
    """Build a conservative per-gram estimate from the food class."""
    class_id = item.class_id or infer_class_id(item.display_name)
    kcal, protein, carbs, fat = ESTIMATE_HEURISTICS.get(
        class_id or "", DEFAULT_ESTIMATE
    )
    per_gram = PerGramProfile(
        kcal=kcal,
        protein=protein,
        carbs=carbs,
        fat=fat,
        fiber=ESTIMATE_FIBER,
        sugar=ESTIMATE_SUGAR,
        sodium=ESTIMATE_SODIUM,
    )
    return HydrationResult(per_gram=per_gram, data_source=DataSource.ESTIMATED)
