"""Local fixture catalog used when the external catalog is unavailable."""

from dataclasses import dataclass, field

from macro_tracker.domain.nutrition import CatalogFood, FoodSummary, NutritionProfile
from macro_tracker.services.catalog import CatalogProvider

_FIXTURE_FOODS: dict[int, tuple[str, NutritionProfile]] = {
    1: ("Chicken Breast", NutritionProfile(165, 31, 0, 3.6, 0, 0, 74)),
    2: ("Brown Rice", NutritionProfile(123, 2.6, 23, 0.9, 1.8, 0.4, 5)),
    3: ("Broccoli", NutritionProfile(34, 2.8, 7, 0.4, 2.6, 1.5, 33)),
    4: ("Salmon Fillet", NutritionProfile(208, 25, 0, 12, 0, 0, 67)),
    5: ("Greek Yogurt", NutritionProfile(59, 10, 3.6, 0.4, 0, 3.2, 36)),
    6: ("Oatmeal", NutritionProfile(68, 2.4, 12, 1.4, 1.7, 0.8, 49)),
    7: ("Sweet Potato", NutritionProfile(86, 1.6, 20, 0.1, 3, 4.2, 54)),
    8: ("Spinach", NutritionProfile(23, 2.9, 3.6, 0.4, 2.2, 0.4, 79)),
    9: ("Almonds", NutritionProfile(579, 21, 22, 50, 12, 4.3, 1)),
    10: ("Banana", NutritionProfile(89, 1.1, 23, 0.3, 2.6, 12, 1)),
}

_DEFAULT_FOOD_ID = 1


@dataclass
class FixtureCatalog(CatalogProvider):
    """Always-available catalog backed by a small built-in food table.

    Unknown ids resolve to the default food so a meal can still be logged.
    """

    foods: dict[int, tuple[str, NutritionProfile]] = field(
        default_factory=lambda: dict(_FIXTURE_FOODS)
    )
    name: str = "fixture"

    def is_available(self) -> bool:
        """The fixture is always available."""
        return True

    async def search_foods(self, query: str, limit: int) -> list[FoodSummary]:
        """Return fixture foods whose name contains the query."""
        needle = query.lower()
        hits = [
            FoodSummary(id=food_id, name=food_name)
            for food_id, (food_name, _) in self.foods.items()
            if needle in food_name.lower()
        ]
        return hits[:limit]

    async def get_food(self, food_id: int) -> CatalogFood:
        """Return a fixture food, or the default food for unknown ids."""
        if food_id in self.foods:
            food_name, nutrition = self.foods[food_id]
        else:
            _, nutrition = self.foods[_DEFAULT_FOOD_ID]
            food_name = f"Food {food_id}"
        return CatalogFood(
            summary=FoodSummary(id=food_id, name=food_name),
            nutrition_per_100g=nutrition,
            source=self.name,
        )
