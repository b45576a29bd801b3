"""Models for name-based nutrition estimator responses."""

from pydantic import BaseModel, Field


class EstimatedNutrition(BaseModel):
    """Nutrition values returned for a full portion of a named food."""

    calories: float = Field(ge=0.0)
    protein: float = Field(default=0.0, ge=0.0)
    carbs: float = Field(default=0.0, ge=0.0)
    fat: float = Field(default=0.0, ge=0.0)
    fiber: float = Field(default=0.0, ge=0.0)
    sugar: float = Field(default=0.0, ge=0.0)
    sodium: float = Field(default=0.0, ge=0.0)


class EstimatorResponse(BaseModel):
    """Structured output of the nutrition estimator."""

    nutrition: EstimatedNutrition
