"""Supabase Edge Function client for name-based nutrition estimates."""

from dataclasses import dataclass

import httpx

from food_resolver.services.hydration import NutritionEstimator


@dataclass
class HttpxEdgeNutritionEstimator(NutritionEstimator):
    """Calls the ``gpt-nutrition-estimator`` edge function over httpx."""

    supabase_url: str
    service_key: str
    http_client: httpx.AsyncClient
    function_name: str = "gpt-nutrition-estimator"
    timeout_seconds: float = 15.0

    @classmethod
    def create(
        cls,
        supabase_url: str,
        service_key: str,
        function_name: str = "gpt-nutrition-estimator",
    ) -> "HttpxEdgeNutritionEstimator":
        """Create an estimator client with a managed httpx session."""
        return cls(
            supabase_url=supabase_url,
            service_key=service_key,
            http_client=httpx.AsyncClient(),
            function_name=function_name,
        )

    async def estimate(
        self, food_name: str, amount_percentage: int = 100
    ) -> dict[str, object]:
        """Invoke the edge function and return its JSON body."""
        url = f"{self.supabase_url.rstrip('/')}/functions/v1/{self.function_name}"
        response = await self.http_client.post(
            url,
            headers={
                "Authorization": f"Bearer {self.service_key}",
                "apikey": self.service_key,
            },
            json={"foodName": food_name, "amountPercentage": amount_percentage},
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict) or not payload.get("nutrition"):
            error = payload.get("error") if isinstance(payload, dict) else None
            raise RuntimeError(f"Nutrition estimator returned no data: {error}")
        return payload

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
