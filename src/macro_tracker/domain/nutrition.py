"""Nutrition domain models."""

from dataclasses import dataclass

CORE_NUTRIENTS = ("calories", "protein", "carbohydrates", "fat", "fiber")
EXTENDED_NUTRIENTS = ("sugar", "sodium", "potassium", "calcium", "iron")
ALL_NUTRIENTS = CORE_NUTRIENTS + EXTENDED_NUTRIENTS


@dataclass(frozen=True)
class NutritionProfile:
    """Nutrient amounts for a food, meal or day.

    Macros are grams, calories are kcal, minerals are milligrams.
    """

    calories: float = 0.0
    protein: float = 0.0
    carbohydrates: float = 0.0
    fat: float = 0.0
    fiber: float = 0.0
    sugar: float = 0.0
    sodium: float = 0.0
    potassium: float = 0.0
    calcium: float = 0.0
    iron: float = 0.0

    def to_dict(self) -> dict[str, float]:
        """Return the profile as a plain mapping."""
        return {name: getattr(self, name) for name in ALL_NUTRIENTS}

    @classmethod
    def from_dict(cls, data: dict[str, object] | None) -> "NutritionProfile":
        """Build a profile from a stored mapping, defaulting missing fields."""
        data = data or {}
        return cls(**{name: float(data.get(name) or 0.0) for name in ALL_NUTRIENTS})


ZERO_NUTRITION = NutritionProfile()


@dataclass(frozen=True)
class FoodSummary:
    """Search hit from a food catalog."""

    id: int
    name: str
    image: str | None = None


@dataclass(frozen=True)
class CatalogFood:
    """Catalog food with its nutrition per 100 g."""

    summary: FoodSummary
    nutrition_per_100g: NutritionProfile
    source: str
