"""OpenAI Responses API client for name-based nutrition estimates."""

import json
from dataclasses import dataclass

from openai import AsyncOpenAI

from food_resolver.services.hydration import NutritionEstimator

_NUTRIENT_FIELDS = ("calories", "protein", "carbs", "fat", "fiber", "sugar", "sodium")

ESTIMATOR_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "nutrition": {
            "type": "object",
            "properties": {
                name: {"type": "number", "minimum": 0.0} for name in _NUTRIENT_FIELDS
            },
            "required": list(_NUTRIENT_FIELDS),
            "additionalProperties": False,
        }
    },
    "required": ["nutrition"],
    "additionalProperties": False,
}


@dataclass
class OpenAINutritionEstimator(NutritionEstimator):
    """Estimator backed by OpenAI structured outputs."""

    client: AsyncOpenAI
    model: str
    reasoning_effort: str | None = None
    store: bool = False

    @classmethod
    def create(
        cls,
        api_key: str,
        model: str,
        reasoning_effort: str | None = None,
        store: bool = False,
    ) -> "OpenAINutritionEstimator":
        """Create an OpenAI nutrition estimator."""
        return cls(
            client=AsyncOpenAI(api_key=api_key),
            model=model,
            reasoning_effort=reasoning_effort,
            store=store,
        )

    async def estimate(
        self, food_name: str, amount_percentage: int = 100
    ) -> dict[str, object]:
        """Ask the model for nutrition of a share of 100 g of a named food."""
        prompt = (
            f"Estimate the nutrition of {amount_percentage}% of 100 g of: "
            f"{food_name}. "
            "Return calories in kcal, protein, carbs, fat, fiber and sugar in "
            "grams, and sodium in milligrams. Use typical values for the most "
            "common preparation."
        )
        request_payload: dict[str, object] = {
            "model": self.model,
            "input": [
                {
                    "role": "user",
                    "content": [{"type": "input_text", "text": prompt}],
                }
            ],
            "text": {
                "format": {
                    "type": "json_schema",
                    "name": "nutrition_estimate",
                    "strict": True,
                    "schema": ESTIMATOR_SCHEMA,
                }
            },
            "store": self.store,
        }
        if self.reasoning_effort:
            request_payload["reasoning"] = {"effort": self.reasoning_effort}

        response = await self.client.responses.create(**request_payload)
        output_text = response.output_text
        if not output_text:
            raise RuntimeError("OpenAI returned an empty response")
        return json.loads(output_text)
