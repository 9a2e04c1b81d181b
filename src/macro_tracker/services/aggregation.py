"""Meal, daily and goal-progress aggregation.

Every function here is synchronous and performs no I/O. Totals are always
recomputed from the full set of foods or meals, never adjusted incrementally,
so repeated edits cannot accumulate floating-point drift.

Pipeline order matters: meal totals first, then daily totals, then progress.
``refresh_day_entry`` runs the three steps in that order.
"""

from collections.abc import Iterable
from dataclasses import fields
from datetime import date
from uuid import UUID

from macro_tracker.domain.meals import (
    DailyGoalProgress,
    DayEntry,
    GoalProgress,
    Meal,
)
from macro_tracker.domain.nutrition import ZERO_NUTRITION, NutritionProfile
from macro_tracker.domain.users import UserGoals
from macro_tracker.services.scaling import round_half_up


def recompute_meal_totals(meal: Meal) -> NutritionProfile:
    """Sum the actual nutrition of every food and store it on the meal."""
    totals = _sum_profiles(food.actual_nutrition for food in meal.foods)
    meal.meal_totals = totals
    return totals


def recompute_daily_totals(day_entry: DayEntry) -> NutritionProfile:
    """Sum meal totals into the day's totals.

    Expects every meal to have been refreshed by ``recompute_meal_totals``.
    """
    totals = _sum_profiles(meal.meal_totals for meal in day_entry.meals)
    day_entry.daily_totals = totals
    return totals


def evaluate_progress(
    daily_totals: NutritionProfile, goals: UserGoals
) -> DailyGoalProgress:
    """Compare daily totals with the user's targets."""
    targets = goals.macro_targets
    return DailyGoalProgress(
        calories=goal_progress(daily_totals.calories, goals.daily_calories),
        protein=goal_progress(daily_totals.protein, targets.protein),
        carbohydrates=goal_progress(
            daily_totals.carbohydrates, targets.carbohydrates
        ),
        fat=goal_progress(daily_totals.fat, targets.fat),
    )


def goal_progress(actual: float, target: float) -> GoalProgress:
    """Build progress for one nutrient.

    The percentage is not capped, so overeating shows values above 100, while
    ``remaining`` bottoms out at zero.
    """
    percentage = int(round_half_up(actual / target * 100)) if target > 0 else 0
    return GoalProgress(
        target=target,
        actual=round_half_up(actual, 2),
        percentage=percentage,
        remaining=max(target - actual, 0),
    )


def apply_meal(day_entry: DayEntry, meal: Meal) -> None:
    """Put a meal into the day, replacing any meal of the same type wholesale.

    Foods from a replaced meal are discarded, not merged.
    """
    for index, existing in enumerate(day_entry.meals):
        if existing.meal_type == meal.meal_type:
            day_entry.meals[index] = meal
            return
    day_entry.meals.append(meal)


def refresh_day_entry(day_entry: DayEntry, goals: UserGoals) -> DayEntry:
    """Recompute meal totals, daily totals and progress in order."""
    for meal in day_entry.meals:
        recompute_meal_totals(meal)
    totals = recompute_daily_totals(day_entry)
    day_entry.goal_progress = evaluate_progress(totals, goals)
    return day_entry


def empty_day_entry(user_id: UUID, day: date, goals: UserGoals) -> DayEntry:
    """Build an all-zero entry carrying the user's current targets."""
    return DayEntry(
        user_id=user_id,
        date=day,
        goal_progress=evaluate_progress(ZERO_NUTRITION, goals),
    )


def _sum_profiles(profiles: Iterable[NutritionProfile]) -> NutritionProfile:
    names = [item.name for item in fields(NutritionProfile)]
    totals = dict.fromkeys(names, 0.0)
    for profile in profiles:
        for name in names:
            totals[name] += getattr(profile, name)
    return NutritionProfile(**totals)
