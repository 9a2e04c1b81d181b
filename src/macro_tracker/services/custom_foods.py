"""Services for user-defined foods."""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from macro_tracker.domain.custom_foods import FOOD_CATEGORIES, CustomFood
from macro_tracker.domain.nutrition import NutritionProfile
from macro_tracker.errors import NotFoundError, ValidationError


class CustomFoodRepository(Protocol):
    """Persistence interface for custom foods."""

    def create_food(  # noqa: PLR0913
        self,
        user_id: UUID,
        name: str,
        brand: str | None,
        category: str,
        nutrition_per_100g: NutritionProfile,
    ) -> CustomFood:
        """Create a custom food and return it."""

    def get_food(self, food_id: UUID) -> CustomFood | None:
        """Return a custom food by id, if present."""

    def search_foods(self, user_id: UUID, query: str, limit: int) -> list[CustomFood]:
        """Search a user's foods by name."""

    def list_top_foods(self, user_id: UUID, limit: int) -> list[CustomFood]:
        """Return a user's most used foods."""

    def delete_food(self, food_id: UUID) -> None:
        """Delete a custom food."""

    def increment_usage(self, food_id: UUID, used_at: datetime) -> None:
        """Increment the usage counter of a food."""


@dataclass
class CustomFoodService:
    """Application service for a user's own foods."""

    repository: CustomFoodRepository

    def create_food(
        self,
        user_id: UUID,
        name: str,
        category: str,
        nutrition_per_100g: NutritionProfile,
        brand: str | None = None,
    ) -> CustomFood:
        """Create a food owned by ``user_id``."""
        cleaned = name.strip()
        if not cleaned or len(cleaned) > 200:
            raise ValidationError("name", "must be 1-200 characters")
        if category not in FOOD_CATEGORIES:
            raise ValidationError("category", f"must be one of {FOOD_CATEGORIES}")
        return self.repository.create_food(
            user_id, cleaned, brand, category, nutrition_per_100g
        )

    def get_owned(self, user_id: UUID, food_id: UUID) -> CustomFood:
        """Return a food if it belongs to the user."""
        food = self.repository.get_food(food_id)
        if food is None or food.user_id != user_id:
            raise NotFoundError(f"Custom food {food_id} not found")
        return food

    def search(
        self, user_id: UUID, query: str | None, limit: int = 20
    ) -> list[CustomFood]:
        """Search foods, falling back to the most used when query is empty."""
        if not query:
            return self._rank(self.repository.list_top_foods(user_id, limit))
        return self._rank(self.repository.search_foods(user_id, query, limit))

    def delete(self, user_id: UUID, food_id: UUID) -> None:
        """Delete a food owned by the user."""
        self.get_owned(user_id, food_id)
        self.repository.delete_food(food_id)

    def record_use(self, food_id: UUID) -> None:
        """Record that a food was logged in a meal."""
        self.repository.increment_usage(food_id, used_at=datetime.now(tz=UTC))

    @staticmethod
    def _rank(items: list[CustomFood]) -> list[CustomFood]:
        """Rank foods by recent use then frequency."""
        return sorted(
            items,
            key=lambda item: (
                item.last_used_at or datetime.min.replace(tzinfo=UTC),
                item.times_used,
            ),
            reverse=True,
        )
