"""Domain models for statistics."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class DailyTotals:
    """Daily total macros with calorie progress."""

    day: date
    calories: float
    protein: float
    carbohydrates: float
    fat: float
    calorie_percentage: int
    logged: bool


@dataclass(frozen=True)
class WeeklySummary:
    """Aggregated totals for a Sunday-start week."""

    week_start: date
    daily: list[DailyTotals]
    avg_calories: float
    avg_protein: float
    avg_carbohydrates: float
    avg_fat: float
    days_logged: int
    days_on_target: int
