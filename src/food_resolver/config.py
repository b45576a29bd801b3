"""Application configuration."""

import os
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from food_resolver.domain.candidates import CandidatePolicy

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    fdc_api_key: str
    fdc_base_url: str = "https://api.nal.usda.gov/fdc/v1"
    openai_api_key: str | None = None
    openai_model: str = "gpt-5.2"
    openai_reasoning_effort: str = "low"
    openai_store: bool = False
    nutrition_estimator: Literal["edge", "openai"] = "edge"
    estimator_function_name: str = "gpt-nutrition-estimator"
    canonical_table_backend: Literal["supabase", "memory"] = "supabase"
    hydration_timeout_seconds: float = 6.0
    promotion_score_delta: float = 0.15
    picker_min_confidence: float = 0.65
    picker_min_gap: float = 0.15
    max_candidates: int = 8
    search_cache_ttl_seconds: int = 3600
    canonical_cache_ttl_seconds: int = 86400
    debug: bool = False
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def candidate_policy(settings: Settings) -> CandidatePolicy:
    """Build the candidate ranking policy from settings."""
    return CandidatePolicy(
        promotion_score_delta=settings.promotion_score_delta,
        picker_min_confidence=settings.picker_min_confidence,
        picker_min_gap=settings.picker_min_gap,
        max_results=settings.max_candidates,
        fetch_limit=max(CandidatePolicy.fetch_limit, settings.max_candidates),
    )
