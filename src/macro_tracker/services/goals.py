"""Calorie and macro goal helpers."""

from dataclasses import replace

from macro_tracker.domain.users import (
    GoalType,
    MacroPercentages,
    MacroTargets,
    UserGoals,
)
from macro_tracker.errors import ValidationError
from macro_tracker.services.scaling import round_half_up

KCAL_PER_GRAM = {"protein": 4, "carbohydrates": 4, "fat": 9}

MIN_DAILY_CALORIES = 800
MAX_DAILY_CALORIES = 10000


def compute_macro_percentages(
    targets: MacroTargets, daily_calories: float
) -> MacroPercentages:
    """Share of daily calories supplied by each macro target."""
    if daily_calories <= 0:
        raise ValidationError("daily_calories", "must be greater than zero")
    shares = {
        name: int(
            round_half_up(getattr(targets, name) * kcal / daily_calories * 100)
        )
        for name, kcal in KCAL_PER_GRAM.items()
    }
    return MacroPercentages(**shares)


def build_goals(
    daily_calories: float,
    targets: MacroTargets,
    goal_type: GoalType = GoalType.MAINTAIN_WEIGHT,
) -> UserGoals:
    """Validate targets and derive percentages for a new goal set."""
    _validate(daily_calories, targets)
    return UserGoals(
        daily_calories=daily_calories,
        macro_targets=targets,
        macro_percentages=compute_macro_percentages(targets, daily_calories),
        goal_type=goal_type,
    )


def update_goals(
    current: UserGoals,
    *,
    daily_calories: float | None = None,
    targets: MacroTargets | None = None,
    goal_type: GoalType | None = None,
) -> UserGoals:
    """Apply changes to goals.

    Percentages are recomputed only when calories or targets change; a change
    of goal type alone keeps the stored percentages.
    """
    new_calories = current.daily_calories if daily_calories is None else daily_calories
    new_targets = current.macro_targets if targets is None else targets
    updated = replace(
        current,
        daily_calories=new_calories,
        macro_targets=new_targets,
        goal_type=goal_type or current.goal_type,
    )
    if new_calories == current.daily_calories and new_targets == current.macro_targets:
        return updated
    _validate(new_calories, new_targets)
    return replace(
        updated,
        macro_percentages=compute_macro_percentages(new_targets, new_calories),
    )


def _validate(daily_calories: float, targets: MacroTargets) -> None:
    if not MIN_DAILY_CALORIES <= daily_calories <= MAX_DAILY_CALORIES:
        raise ValidationError(
            "daily_calories",
            f"must be between {MIN_DAILY_CALORIES} and {MAX_DAILY_CALORIES}",
        )
    for name in ("protein", "carbohydrates", "fat", "fiber"):
        if getattr(targets, name) < 0:
            raise ValidationError(f"macro_targets.{name}", "cannot be negative")
