"""Food catalog lookups with a fixture fallback."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol, TypeVar

from macro_tracker.domain.meals import FoodEntry, FoodUnit
from macro_tracker.domain.nutrition import CatalogFood, FoodSummary, NutritionProfile
from macro_tracker.errors import CatalogError, CatalogUnavailableError
from macro_tracker.services.cache import Cache
from macro_tracker.services.scaling import reference_units, scale

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class CatalogProvider(Protocol):
    """A source of food search results and nutrition per 100 g."""

    name: str

    def is_available(self) -> bool:
        """Return True when the provider can serve requests."""

    async def search_foods(self, query: str, limit: int) -> list[FoodSummary]:
        """Search foods by name."""

    async def get_food(self, food_id: int) -> CatalogFood:
        """Return a food with nutrition per 100 g."""


@dataclass
class FoodCatalogService:
    """Two-tier catalog: the primary provider, then the local fixture.

    Catalog errors from the primary are logged and answered by the fallback,
    so a lookup never fails a user action because the external API is down
    or out of quota.
    """

    primary: CatalogProvider
    fallback: CatalogProvider
    cache: Cache
    search_ttl_seconds: int = 3600
    food_ttl_seconds: int = 86400
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def search(self, query: str, limit: int = 20) -> list[FoodSummary]:
        """Search foods by name."""
        cache_key = f"catalog:search:{query.lower()}:{limit}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            return cached
        foods, answered_by = await self._lookup(
            lambda provider: provider.search_foods(query, limit),
            action=f"search:{query}",
        )
        if answered_by is self.primary:
            self.cache.set(cache_key, foods, ttl_seconds=self.search_ttl_seconds)
        return foods

    async def get_food(self, food_id: int) -> CatalogFood:
        """Return a food with its nutrition per 100 g."""
        cache_key = f"catalog:food:{food_id}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, CatalogFood):
            return cached
        food, answered_by = await self._lookup(
            lambda provider: provider.get_food(food_id),
            action=f"get_food:{food_id}",
        )
        if answered_by is self.primary:
            self.cache.set(cache_key, food, ttl_seconds=self.food_ttl_seconds)
        return food

    async def get_nutrition(
        self, food_id: int, amount: float, unit: FoodUnit | str = FoodUnit.GRAMS
    ) -> NutritionProfile:
        """Return nutrition for an amount of a catalog food."""
        food = await self.get_food(food_id)
        return scale(food.nutrition_per_100g, reference_units(amount, unit))

    async def build_food_entry(
        self,
        food_id: int,
        amount: float,
        unit: FoodUnit | str = FoodUnit.GRAMS,
        name: str | None = None,
    ) -> FoodEntry:
        """Create a meal food entry for a catalog food."""
        food = await self.get_food(food_id)
        return FoodEntry(
            name=name or food.summary.name,
            amount=amount,
            unit=FoodUnit(unit),
            nutrition_per_reference=food.nutrition_per_100g,
            actual_nutrition=scale(
                food.nutrition_per_100g, reference_units(amount, unit)
            ),
            added_at=datetime.now(tz=UTC),
            catalog_id=food_id,
        )

    async def _lookup(
        self,
        call: Callable[[CatalogProvider], Awaitable[T]],
        *,
        action: str,
    ) -> tuple[T, CatalogProvider]:
        """Return the result together with the provider that answered.

        Only primary results are cacheable; fixture answers stand in for an
        outage and must not outlive it.
        """
        if self.primary.is_available():
            try:
                result = await self._call_with_retry(call, self.primary, action)
                return result, self.primary
            except CatalogError as exc:
                _logger.warning(
                    "Catalog %s failed on %s, using %s: %s",
                    action,
                    self.primary.name,
                    self.fallback.name,
                    exc,
                )
        return await call(self.fallback), self.fallback

    async def _call_with_retry(
        self,
        call: Callable[[CatalogProvider], Awaitable[T]],
        provider: CatalogProvider,
        action: str,
    ) -> T:
        """Retry transient outages; other catalog errors fall through at once."""
        attempt = 0
        while True:
            try:
                return await call(provider)
            except CatalogUnavailableError as exc:
                attempt += 1
                if attempt > self.retry_attempts:
                    raise
                _logger.info(
                    "Catalog %s unavailable (attempt %s/%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    exc,
                )
                await asyncio.sleep(self.retry_delay_seconds)
