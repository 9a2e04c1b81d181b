"""Supabase repository for day entries.

Each row holds one user's day: meals, totals and progress are JSON columns,
and ``(user_id, entry_date)`` carries a unique constraint.
"""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from postgrest.exceptions import APIError
from supabase import Client

from macro_tracker.domain.meals import (
    DEFAULT_REFERENCE_AMOUNT,
    DailyGoalProgress,
    DayEntry,
    FoodEntry,
    FoodUnit,
    GoalProgress,
    Meal,
    MealType,
)
from macro_tracker.domain.nutrition import NutritionProfile
from macro_tracker.errors import DuplicateKeyError, ValidationError
from macro_tracker.services.meals import DayEntryRepository

_TABLE = "day_entries"
_UNIQUE_VIOLATION = "23505"
_CHECK_VIOLATION = "23514"
_NOT_NULL_VIOLATION = "23502"
_PROGRESS_FIELDS = ("calories", "protein", "carbohydrates", "fat")


@dataclass
class SupabaseDayEntryRepository(DayEntryRepository):
    """Supabase implementation for day entries."""

    client: Client

    def find_one(self, user_id: UUID, day: date) -> DayEntry | None:
        """Return the entry of a user for a day."""
        response = (
            self.client.table(_TABLE)
            .select("*")
            .eq("user_id", str(user_id))
            .eq("entry_date", day.isoformat())
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_entry(response.data[0])

    def save(self, entry: DayEntry) -> DayEntry:
        """Insert a new entry or replace the stored document."""
        payload = _entry_to_row(entry)
        try:
            if entry.id is None:
                response = self.client.table(_TABLE).insert(payload).execute()
            else:
                response = (
                    self.client.table(_TABLE)
                    .update(payload)
                    .eq("id", str(entry.id))
                    .execute()
                )
        except APIError as exc:
            if exc.code == _UNIQUE_VIOLATION:
                raise DuplicateKeyError(
                    f"Day entry for {entry.user_id} on {entry.date} already exists"
                ) from exc
            if exc.code in {_CHECK_VIOLATION, _NOT_NULL_VIOLATION}:
                raise ValidationError("day_entry", str(exc.message)) from exc
            raise
        if not response.data:
            raise RuntimeError("Failed to save day entry")
        return _parse_entry(response.data[0])

    def list_range(self, user_id: UUID, start: date, end: date) -> list[DayEntry]:
        """Return entries between two dates, inclusive."""
        response = (
            self.client.table(_TABLE)
            .select("*")
            .eq("user_id", str(user_id))
            .gte("entry_date", start.isoformat())
            .lte("entry_date", end.isoformat())
            .order("entry_date", desc=False)
            .execute()
        )
        return [_parse_entry(row) for row in response.data or []]


def _entry_to_row(entry: DayEntry) -> dict[str, object]:
    return {
        "user_id": str(entry.user_id),
        "entry_date": entry.date.isoformat(),
        "meals": [_meal_to_json(meal) for meal in entry.meals],
        "daily_totals": entry.daily_totals.to_dict(),
        "goal_progress": {
            name: vars(getattr(entry.goal_progress, name))
            for name in _PROGRESS_FIELDS
        },
    }


def _meal_to_json(meal: Meal) -> dict[str, object]:
    return {
        "meal_type": meal.meal_type.value,
        "name": meal.name,
        "foods": [_food_to_json(food) for food in meal.foods],
        "meal_totals": meal.meal_totals.to_dict(),
    }


def _food_to_json(food: FoodEntry) -> dict[str, object]:
    return {
        "name": food.name,
        "amount": food.amount,
        "unit": food.unit.value,
        "reference_amount": food.reference_amount,
        "catalog_id": food.catalog_id,
        "custom_food_id": str(food.custom_food_id) if food.custom_food_id else None,
        "nutrition_per_reference": food.nutrition_per_reference.to_dict(),
        "actual_nutrition": food.actual_nutrition.to_dict(),
        "added_at": food.added_at.isoformat(),
    }


def _parse_entry(row: dict[str, object]) -> DayEntry:
    progress = row.get("goal_progress") or {}
    return DayEntry(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        date=date.fromisoformat(str(row["entry_date"])[:10]),
        meals=[_parse_meal(meal) for meal in row.get("meals") or []],
        daily_totals=NutritionProfile.from_dict(row.get("daily_totals")),
        goal_progress=DailyGoalProgress(
            **{
                name: _parse_progress(progress.get(name) or {})
                for name in _PROGRESS_FIELDS
            }
        ),
    )


def _parse_meal(data: dict[str, object]) -> Meal:
    return Meal(
        meal_type=MealType(data["meal_type"]),
        name=data.get("name"),
        foods=[_parse_food(food) for food in data.get("foods") or []],
        meal_totals=NutritionProfile.from_dict(data.get("meal_totals")),
    )


def _parse_food(data: dict[str, object]) -> FoodEntry:
    custom_food_id = data.get("custom_food_id")
    return FoodEntry(
        name=str(data.get("name", "")),
        amount=float(data.get("amount", 0.0)),
        unit=FoodUnit(data.get("unit", FoodUnit.GRAMS.value)),
        reference_amount=float(
            data.get("reference_amount") or DEFAULT_REFERENCE_AMOUNT
        ),
        catalog_id=data.get("catalog_id"),
        custom_food_id=UUID(str(custom_food_id)) if custom_food_id else None,
        nutrition_per_reference=NutritionProfile.from_dict(
            data.get("nutrition_per_reference")
        ),
        actual_nutrition=NutritionProfile.from_dict(data.get("actual_nutrition")),
        added_at=datetime.fromisoformat(str(data["added_at"])),
    )


def _parse_progress(data: dict[str, object]) -> GoalProgress:
    return GoalProgress(
        target=float(data.get("target", 0.0)),
        actual=float(data.get("actual", 0.0)),
        percentage=int(data.get("percentage", 0)),
        remaining=float(data.get("remaining", 0.0)),
    )
