"""Spoonacular ingredient API provider."""

from dataclasses import dataclass

import httpx

from macro_tracker.domain.nutrition import (
    ALL_NUTRIENTS,
    CatalogFood,
    FoodSummary,
    NutritionProfile,
)
from macro_tracker.errors import (
    CatalogUnavailableError,
    FoodNotFoundError,
    RateLimitedError,
)
from macro_tracker.services.catalog import CatalogProvider
from macro_tracker.services.scaling import round_half_up

# Spoonacular answers 402 when the daily quota is spent.
_RATE_LIMIT_STATUSES = {402, 429}


@dataclass
class SpoonacularCatalog(CatalogProvider):
    """HTTPX-backed Spoonacular client."""

    api_key: str | None
    base_url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 10.0
    name: str = "spoonacular"

    @classmethod
    def create(
        cls, api_key: str | None, base_url: str, timeout_seconds: float = 10.0
    ) -> "SpoonacularCatalog":
        """Create a client with a managed httpx session."""
        return cls(
            api_key=api_key,
            base_url=base_url,
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
        )

    def is_available(self) -> bool:
        return bool(self.api_key)

    async def search_foods(self, query: str, limit: int) -> list[FoodSummary]:
        payload = await self._get(
            "/food/ingredients/search",
            {
                "query": query,
                "number": limit,
                "sort": "calories",
                "sortDirection": "desc",
            },
        )
        return [
            FoodSummary(
                id=int(row["id"]),
                name=str(row.get("name", "")),
                image=row.get("image") or None,
            )
            for row in payload.get("results", [])
        ]

    async def get_food(self, food_id: int) -> CatalogFood:
        payload = await self._get(
            f"/food/ingredients/{food_id}/information",
            {"amount": 100, "unit": "grams"},
        )
        nutrients = (payload.get("nutrition") or {}).get("nutrients") or []
        return CatalogFood(
            summary=FoodSummary(
                id=int(payload.get("id", food_id)),
                name=str(payload.get("name", "")),
                image=payload.get("image") or None,
            ),
            nutrition_per_100g=_extract_nutrition(nutrients),
            source=self.name,
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _get(self, path: str, params: dict[str, object]) -> dict[str, object]:
        try:
            response = await self.http_client.get(
                f"{self.base_url}{path}",
                params={**params, "apiKey": self.api_key},
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            if status_code in _RATE_LIMIT_STATUSES:
                raise RateLimitedError("Spoonacular quota reached") from exc
            if status_code == httpx.codes.NOT_FOUND:
                raise FoodNotFoundError(f"No Spoonacular food at {path}") from exc
            raise CatalogUnavailableError(
                f"Spoonacular returned {status_code}"
            ) from exc
        except httpx.TransportError as exc:
            raise CatalogUnavailableError(str(exc)) from exc
        return response.json()


def _extract_nutrition(nutrients: list[dict[str, object]]) -> NutritionProfile:
    """Pick tracked nutrients from Spoonacular's nutrient list by name."""
    values: dict[str, float] = {}
    for nutrient in nutrients:
        key = str(nutrient.get("name", "")).lower()
        amount = nutrient.get("amount")
        if key in ALL_NUTRIENTS and isinstance(amount, int | float):
            values[key] = round_half_up(float(amount), 2)
    return NutritionProfile(**values)
