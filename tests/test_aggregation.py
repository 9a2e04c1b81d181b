"""Tests for meal, daily and goal-progress aggregation."""

from datetime import UTC, date, datetime
from uuid import uuid4

from macro_tracker.domain.meals import FoodEntry, FoodUnit, Meal, MealType
from macro_tracker.domain.nutrition import NutritionProfile
from macro_tracker.services.aggregation import (
    apply_meal,
    empty_day_entry,
    evaluate_progress,
    goal_progress,
    recompute_daily_totals,
    recompute_meal_totals,
    refresh_day_entry,
)
from macro_tracker.services.scaling import scale
from tests.conftest import make_goals


def _food(name: str, amount: float, ref: NutritionProfile) -> FoodEntry:
    return FoodEntry(
        name=name,
        amount=amount,
        unit=FoodUnit.GRAMS,
        nutrition_per_reference=ref,
        actual_nutrition=scale(ref, amount),
        added_at=datetime(2024, 1, 1, tzinfo=UTC),
    )


def _meal(meal_type: MealType, *foods: FoodEntry) -> Meal:
    return Meal(meal_type=meal_type, foods=list(foods))


def test_meal_totals_sum_every_food() -> None:
    meal = _meal(
        MealType.LUNCH,
        _food("Chicken", 150, NutritionProfile(165, 31, 0, 3.6)),
        _food("Rice", 200, NutritionProfile(123, 2.6, 23, 0.9, 1.8)),
    )

    totals = recompute_meal_totals(meal)

    assert totals.calories == 248 + 246
    assert totals.protein == 46.5 + 5.2
    assert totals.fiber == 3.6
    assert meal.meal_totals == totals


def test_meal_totals_of_empty_meal_are_zero() -> None:
    assert recompute_meal_totals(_meal(MealType.SNACK)) == NutritionProfile()


def test_meal_totals_are_idempotent() -> None:
    meal = _meal(MealType.DINNER, _food("Salmon", 120, NutritionProfile(208, 25, 0, 12)))

    first = recompute_meal_totals(meal)
    second = recompute_meal_totals(meal)

    assert first == second


def test_daily_totals_include_extended_fields() -> None:
    entry = empty_day_entry(uuid4(), date(2024, 5, 1), make_goals())
    entry.meals = [
        _meal(MealType.BREAKFAST, _food("Banana", 100, NutritionProfile(89, sodium=1))),
        _meal(MealType.SNACK, _food("Almonds", 100, NutritionProfile(579, sodium=1))),
    ]
    for meal in entry.meals:
        recompute_meal_totals(meal)

    totals = recompute_daily_totals(entry)

    assert totals.calories == 668
    assert totals.sodium == 2


def test_goal_progress_rounds_half_up() -> None:
    progress = goal_progress(1450, 2000)

    assert progress.target == 2000
    assert progress.actual == 1450
    assert progress.percentage == 73
    assert progress.remaining == 550


def test_goal_progress_is_not_capped_above_target() -> None:
    progress = goal_progress(2500, 2000)

    assert progress.percentage == 125
    assert progress.remaining == 0


def test_goal_progress_with_zero_target() -> None:
    progress = goal_progress(120, 0)

    assert progress.percentage == 0
    assert progress.remaining == 0


def test_goal_progress_exactly_on_target() -> None:
    progress = goal_progress(2000, 2000)

    assert progress.percentage == 100
    assert progress.remaining == 0


def test_evaluate_progress_uses_goal_targets() -> None:
    totals = NutritionProfile(calories=1000, protein=75, carbohydrates=125, fat=22)

    progress = evaluate_progress(totals, make_goals())

    assert progress.calories.percentage == 50
    assert progress.protein.target == 150
    assert progress.carbohydrates.remaining == 125
    assert progress.fat.percentage == 50


def test_apply_meal_replaces_instead_of_merging() -> None:
    goals = make_goals()
    entry = empty_day_entry(uuid4(), date(2024, 5, 1), goals)
    apply_meal(
        entry, _meal(MealType.BREAKFAST, _food("Oats", 100, NutritionProfile(300)))
    )
    refresh_day_entry(entry, goals)
    apply_meal(
        entry, _meal(MealType.BREAKFAST, _food("Eggs", 100, NutritionProfile(400)))
    )
    refresh_day_entry(entry, goals)

    assert len(entry.meals) == 1
    assert [food.name for food in entry.meals[0].foods] == ["Eggs"]
    assert entry.daily_totals.calories == 400
    assert entry.goal_progress.calories.actual == 400


def test_daily_totals_are_additive_across_meals() -> None:
    goals = make_goals()
    entry = empty_day_entry(uuid4(), date(2024, 5, 1), goals)
    breakfast = _meal(MealType.BREAKFAST, _food("Oats", 80, NutritionProfile(379, 13.2)))
    dinner = _meal(MealType.DINNER, _food("Salmon", 150, NutritionProfile(208, 25)))
    apply_meal(entry, breakfast)
    apply_meal(entry, dinner)

    refresh_day_entry(entry, goals)

    assert entry.daily_totals.calories == (
        breakfast.meal_totals.calories + dinner.meal_totals.calories
    )
    assert entry.daily_totals.protein == (
        breakfast.meal_totals.protein + dinner.meal_totals.protein
    )


def test_empty_day_entry_carries_targets() -> None:
    entry = empty_day_entry(uuid4(), date(2024, 5, 1), make_goals(daily_calories=2200))

    assert entry.meals == []
    assert entry.daily_totals == NutritionProfile()
    assert entry.goal_progress.calories.target == 2200
    assert entry.goal_progress.calories.remaining == 2200
    assert entry.is_empty
