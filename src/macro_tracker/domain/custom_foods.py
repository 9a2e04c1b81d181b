"""Domain models for user-defined foods."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from macro_tracker.domain.nutrition import NutritionProfile

FOOD_CATEGORIES = (
    "vegetables",
    "fruits",
    "grains",
    "proteins",
    "dairy",
    "fats",
    "beverages",
    "snacks",
    "other",
)


@dataclass(frozen=True)
class CustomFood:
    """A food created by a user, stored with nutrition per 100 g."""

    id: UUID
    user_id: UUID
    name: str
    brand: str | None
    category: str
    nutrition_per_100g: NutritionProfile
    times_used: int
    last_used_at: datetime | None
