"""Domain models for meals and daily entries."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from uuid import UUID

from macro_tracker.domain.nutrition import NutritionProfile


class MealType(str, Enum):
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


class FoodUnit(str, Enum):
    GRAMS = "grams"
    CUPS = "cups"
    PIECES = "pieces"
    TABLESPOONS = "tablespoons"
    TEASPOONS = "teaspoons"
    OUNCES = "ounces"
    POUNDS = "pounds"


MIN_FOOD_AMOUNT = 0.1
MAX_FOOD_AMOUNT = 10000.0
DEFAULT_REFERENCE_AMOUNT = 100.0


@dataclass(frozen=True)
class FoodEntry:
    """A food logged in a meal, with nutrition scaled to the logged amount."""

    name: str
    amount: float
    unit: FoodUnit
    nutrition_per_reference: NutritionProfile
    actual_nutrition: NutritionProfile
    added_at: datetime
    catalog_id: int | None = None
    custom_food_id: UUID | None = None
    reference_amount: float = DEFAULT_REFERENCE_AMOUNT

    @property
    def is_custom_food(self) -> bool:
        return self.custom_food_id is not None


@dataclass
class Meal:
    """Foods eaten together; totals are owned by the meal aggregator."""

    meal_type: MealType
    foods: list[FoodEntry] = field(default_factory=list)
    name: str | None = None
    meal_totals: NutritionProfile = field(default_factory=NutritionProfile)


@dataclass(frozen=True)
class GoalProgress:
    """Progress towards a single daily target."""

    target: float
    actual: float
    percentage: int
    remaining: float


@dataclass(frozen=True)
class DailyGoalProgress:
    """Progress for every tracked nutrient of a day."""

    calories: GoalProgress
    protein: GoalProgress
    carbohydrates: GoalProgress
    fat: GoalProgress


@dataclass
class DayEntry:
    """All meals of one user on one calendar day."""

    user_id: UUID
    date: date
    goal_progress: DailyGoalProgress
    meals: list[Meal] = field(default_factory=list)
    daily_totals: NutritionProfile = field(default_factory=NutritionProfile)
    id: UUID | None = None

    @property
    def is_empty(self) -> bool:
        return self.id is None and not self.meals

    def find_meal(self, meal_type: MealType) -> Meal | None:
        """Return the meal of the given type, if logged."""
        for meal in self.meals:
            if meal.meal_type == meal_type:
                return meal
        return None
