"""Supabase implementation of the canonical nutrition table."""

from dataclasses import dataclass

from supabase import AsyncClient

from food_resolver.domain.nutrition import PerGramProfile
from food_resolver.services.canonical import CanonicalNutritionTable

_TABLE = "canonical_nutrition"


@dataclass
class SupabaseCanonicalNutritionTable(CanonicalNutritionTable):
    """Reads per-100g canonical profiles from Supabase."""

    client: AsyncClient

    async def lookup(self, key: str) -> PerGramProfile | None:
        """Return the per-gram profile for a canonical key, if present."""
        response = (
            await self.client.table(_TABLE)
            .select("canonical_key,calories,protein,carbs,fat,fiber,sugar,sodium")
            .eq("canonical_key", key)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_profile(response.data[0])


def _parse_profile(row: dict[str, object]) -> PerGramProfile:
    return PerGramProfile.from_per_100g(
        calories=float(row.get("calories") or 0),
        protein=float(row.get("protein") or 0),
        carbs=float(row.get("carbs") or 0),
        fat=float(row.get("fat") or 0),
        fiber=_optional_float(row.get("fiber")),
        sugar=_optional_float(row.get("sugar")),
        sodium=_optional_float(row.get("sodium")),
    )


def _optional_float(value: object) -> float | None:
    if value is None:
        return None
    return float(value)
