"""USDA FoodData Central catalog search client."""

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import httpx
from rapidfuzz import fuzz, utils

from food_resolver.domain.candidates import CandidateKind, CatalogHit
from food_resolver.services.candidates import CatalogSearch

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

_ENERGY_KCAL_NUTRIENT_ID = 1008
_RESTAURANT_MARKERS = ("restaurant", "fast food", "fast foods")

_logger = logging.getLogger(__name__)


@dataclass
class HttpxFdcCatalogSearch(CatalogSearch):
    """Catalog search backed by the FDC ``/foods/search`` endpoint."""

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 15.0
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3
    debug: bool = False

    @classmethod
    def create(
        cls, api_key: str, base_url: str, debug: bool = False
    ) -> "HttpxFdcCatalogSearch":
        """Create a catalog client with a managed httpx session."""
        return cls(
            api_key=api_key,
            base_url=base_url,
            http_client=httpx.AsyncClient(),
            debug=debug,
        )

    async def search(self, query: str, limit: int) -> list[CatalogHit]:
        """Search FDC foods and map them to catalog hits."""
        payload = await self._call_with_retry(
            lambda: self._search_foods(query, limit), action="search"
        )
        foods = payload.get("foods") or []
        return [_to_hit(query, food) for food in foods if food.get("fdcId")]

    async def _search_foods(self, query: str, limit: int) -> dict[str, object]:
        response = await self.http_client.post(
            f"{self.base_url}/foods/search",
            params={"api_key": self.api_key},
            json={"query": query, "pageSize": limit},
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        return response.json()

    async def _call_with_retry(
        self, func: "Callable[[], Awaitable[dict[str, object]]]", *, action: str
    ) -> dict[str, object]:
        """Call an async function with a short retry."""
        attempt = 0
        while True:
            try:
                return await func()
            except (httpx.HTTPError, ValueError) as exc:
                attempt += 1
                if self.debug:
                    _logger.warning(
                        "FDC %s failed (attempt %s/%s, status=%s): %s",
                        action,
                        attempt,
                        self.retry_attempts + 1,
                        _status_code_from_exception(exc),
                        exc,
                    )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _to_hit(query: str, food: dict[str, object]) -> CatalogHit:
    description = str(food.get("description") or "")
    score = fuzz.token_set_ratio(query, description, processor=utils.default_process)
    return CatalogHit(
        id=str(food["fdcId"]),
        name=description,
        calories_per_100g=_energy_kcal(food.get("foodNutrients") or []),
        confidence=score / 100,
        kind=_kind(food),
    )


def _kind(food: dict[str, object]) -> CandidateKind:
    if food.get("dataType") == "Branded" or food.get("brandOwner") or food.get(
        "brandName"
    ):
        return CandidateKind.BRAND
    category = str(food.get("foodCategory") or "").lower()
    if any(marker in category for marker in _RESTAURANT_MARKERS):
        return CandidateKind.RESTAURANT
    return CandidateKind.GENERIC


def _energy_kcal(food_nutrients: list[dict[str, object]]) -> float:
    """Return energy in kcal per 100 g from FDC nutrient rows."""
    for nutrient in food_nutrients:
        nutrient_info = nutrient.get("nutrient") or {}
        nutrient_id = nutrient.get("nutrientId") or nutrient_info.get("id")
        if nutrient_id != _ENERGY_KCAL_NUTRIENT_ID:
            continue
        amount = nutrient.get("value", nutrient.get("amount"))
        if amount is not None:
            return float(amount)
    return 0.0


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"
