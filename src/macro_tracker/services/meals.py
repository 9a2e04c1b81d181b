"""Meal logging service."""

import logging
import math
from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime
from typing import Protocol
from uuid import UUID

from macro_tracker.domain.meals import (
    DEFAULT_REFERENCE_AMOUNT,
    MAX_FOOD_AMOUNT,
    MIN_FOOD_AMOUNT,
    DayEntry,
    FoodEntry,
    FoodUnit,
    Meal,
    MealType,
)
from macro_tracker.domain.nutrition import ALL_NUTRIENTS, NutritionProfile
from macro_tracker.domain.users import UserGoals
from macro_tracker.errors import InvalidAmountError, NotFoundError, ValidationError
from macro_tracker.services.aggregation import (
    apply_meal,
    empty_day_entry,
    evaluate_progress,
    refresh_day_entry,
)
from macro_tracker.services.catalog import FoodCatalogService
from macro_tracker.services.custom_foods import CustomFoodService
from macro_tracker.services.scaling import reference_units, scale

_REQUIRED_NUTRIENTS = ("calories", "protein", "carbohydrates", "fat")

_logger = logging.getLogger(__name__)


class DayEntryRepository(Protocol):
    """Persistence interface for day entries."""

    def find_one(self, user_id: UUID, day: date) -> DayEntry | None:
        """Return the entry of a user for a day, if present."""

    def save(self, entry: DayEntry) -> DayEntry:
        """Insert or replace an entry and return the stored version.

        Raises ``DuplicateKeyError`` when inserting a second entry for the
        same user and day.
        """

    def list_range(self, user_id: UUID, start: date, end: date) -> list[DayEntry]:
        """Return a user's entries with ``start <= date <= end``."""


class GoalsProvider(Protocol):
    """Source of a user's current goals."""

    def get_goals(self, user_id: UUID) -> UserGoals:
        """Return the goals of a user."""


@dataclass(frozen=True)
class FoodInput:
    """A food as submitted by a caller, before scaling."""

    amount: float
    unit: str = FoodUnit.GRAMS.value
    name: str | None = None
    catalog_id: int | None = None
    custom_food_id: UUID | None = None
    nutrition_per_reference: dict[str, object] | None = None
    reference_amount: float = DEFAULT_REFERENCE_AMOUNT


@dataclass(frozen=True)
class MealInput:
    """A meal submission for one meal type."""

    meal_type: str
    foods: list[FoodInput] = field(default_factory=list)
    name: str | None = None


@dataclass
class MealEntryService:
    """Builds meals, runs the aggregation pipeline and persists day entries."""

    repository: DayEntryRepository
    goals_provider: GoalsProvider
    catalog_service: FoodCatalogService
    custom_food_service: CustomFoodService

    async def add_or_replace_meal(
        self, user_id: UUID, day: date, meal_input: MealInput
    ) -> DayEntry:
        """Log a meal, replacing any meal of the same type on that day."""
        goals = self.goals_provider.get_goals(user_id)
        meal = Meal(
            meal_type=_parse_meal_type(meal_input.meal_type),
            name=meal_input.name,
            foods=[
                await self._build_food(user_id, index, food)
                for index, food in enumerate(meal_input.foods)
            ],
        )
        entry = self.repository.find_one(user_id, day) or empty_day_entry(
            user_id, day, goals
        )
        replaced = entry.find_meal(meal.meal_type) is not None
        apply_meal(entry, meal)
        refresh_day_entry(entry, goals)
        saved = self.repository.save(entry)
        for food in meal.foods:
            if food.custom_food_id:
                self.custom_food_service.record_use(food.custom_food_id)
        _logger.info(
            "Saved %s for user %s on %s (replaced=%s, foods=%s)",
            meal.meal_type.value,
            user_id,
            day.isoformat(),
            replaced,
            len(meal.foods),
        )
        return saved

    def get_daily_summary(self, user_id: UUID, day: date) -> DayEntry:
        """Return the day's entry, or an all-zero one when nothing is logged.

        Progress is evaluated against the user's current goals.
        """
        goals = self.goals_provider.get_goals(user_id)
        entry = self.repository.find_one(user_id, day)
        if entry is None:
            return empty_day_entry(user_id, day, goals)
        entry.goal_progress = evaluate_progress(entry.daily_totals, goals)
        return entry

    def remove_meal(self, user_id: UUID, day: date, meal_type: str) -> DayEntry:
        """Delete one meal from a day and refresh totals."""
        parsed = _parse_meal_type(meal_type)
        goals = self.goals_provider.get_goals(user_id)
        entry = self._require_meal_entry(user_id, day, parsed)
        entry.meals = [meal for meal in entry.meals if meal.meal_type != parsed]
        refresh_day_entry(entry, goals)
        return self.repository.save(entry)

    def update_food_amount(  # noqa: PLR0913
        self,
        user_id: UUID,
        day: date,
        meal_type: str,
        food_index: int,
        amount: float,
    ) -> DayEntry:
        """Change the logged amount of one food and refresh totals."""
        parsed = _parse_meal_type(meal_type)
        _validate_amount(f"foods[{food_index}].amount", amount)
        goals = self.goals_provider.get_goals(user_id)
        entry = self._require_meal_entry(user_id, day, parsed)
        meal = entry.find_meal(parsed)
        if meal is None or not 0 <= food_index < len(meal.foods):
            raise NotFoundError(f"No food {food_index} in {parsed.value}")
        food = meal.foods[food_index]
        meal.foods[food_index] = replace(
            food,
            amount=amount,
            actual_nutrition=scale(
                food.nutrition_per_reference,
                reference_units(amount, food.unit),
                food.reference_amount,
            ),
        )
        refresh_day_entry(entry, goals)
        return self.repository.save(entry)

    def _require_meal_entry(
        self, user_id: UUID, day: date, meal_type: MealType
    ) -> DayEntry:
        entry = self.repository.find_one(user_id, day)
        if entry is None or entry.find_meal(meal_type) is None:
            raise NotFoundError(f"No {meal_type.value} logged on {day.isoformat()}")
        return entry

    async def _build_food(
        self, user_id: UUID, index: int, food: FoodInput
    ) -> FoodEntry:
        prefix = f"foods[{index}]"
        _validate_amount(f"{prefix}.amount", food.amount)
        unit = _parse_unit(f"{prefix}.unit", food.unit)
        if food.nutrition_per_reference is not None:
            reference = parse_nutrition(
                f"{prefix}.nutrition_per_reference", food.nutrition_per_reference
            )
            name = food.name
            reference_amount = food.reference_amount
        elif food.custom_food_id is not None:
            custom = self.custom_food_service.get_owned(user_id, food.custom_food_id)
            reference = custom.nutrition_per_100g
            name = food.name or custom.name
            reference_amount = DEFAULT_REFERENCE_AMOUNT
        elif food.catalog_id is not None:
            return await self.catalog_service.build_food_entry(
                food.catalog_id, food.amount, unit, name=food.name
            )
        else:
            raise ValidationError(
                prefix, "requires nutrition_per_reference, custom_food_id or catalog_id"
            )
        if not name:
            raise ValidationError(f"{prefix}.name", "is required")
        return FoodEntry(
            name=name,
            amount=food.amount,
            unit=unit,
            nutrition_per_reference=reference,
            actual_nutrition=scale(
                reference, reference_units(food.amount, unit), reference_amount
            ),
            added_at=datetime.now(tz=UTC),
            catalog_id=food.catalog_id,
            custom_food_id=food.custom_food_id,
            reference_amount=reference_amount,
        )


def parse_nutrition(field_name: str, data: dict[str, object]) -> NutritionProfile:
    """Validate a submitted nutrition mapping.

    Core nutrients are required; optional ones default to zero. Every value
    must be a non-negative finite number.
    """
    missing = [name for name in _REQUIRED_NUTRIENTS if data.get(name) is None]
    if missing:
        raise ValidationError(field_name, f"missing {', '.join(missing)}")
    values: dict[str, float] = {}
    for name in ALL_NUTRIENTS:
        raw = data.get(name)
        if raw is None:
            continue
        if isinstance(raw, bool) or not isinstance(raw, int | float):
            raise ValidationError(f"{field_name}.{name}", "must be a number")
        if not math.isfinite(raw) or raw < 0:
            raise ValidationError(f"{field_name}.{name}", "must be non-negative")
        values[name] = float(raw)
    return NutritionProfile(**values)


def _validate_amount(field_name: str, amount: float) -> None:
    if not isinstance(amount, int | float) or not math.isfinite(amount) or amount <= 0:
        raise InvalidAmountError(amount)
    if not MIN_FOOD_AMOUNT <= amount <= MAX_FOOD_AMOUNT:
        raise ValidationError(
            field_name, f"must be between {MIN_FOOD_AMOUNT} and {MAX_FOOD_AMOUNT:g}"
        )


def _parse_meal_type(value: str) -> MealType:
    try:
        return MealType(value)
    except ValueError as exc:
        raise ValidationError("meal_type", f"unknown meal type {value!r}") from exc


def _parse_unit(field_name: str, value: str) -> FoodUnit:
    try:
        return FoodUnit(value)
    except ValueError as exc:
        raise ValidationError(field_name, f"unknown unit {value!r}") from exc
