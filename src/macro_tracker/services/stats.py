"""Weekly statistics over day entries."""

from dataclasses import dataclass
from datetime import date, timedelta
from uuid import UUID

from macro_tracker.domain.meals import DayEntry
from macro_tracker.domain.stats import DailyTotals, WeeklySummary
from macro_tracker.domain.users import UserGoals
from macro_tracker.services.aggregation import goal_progress
from macro_tracker.services.meals import DayEntryRepository, GoalsProvider

DAYS_PER_WEEK = 7
ON_TARGET_RANGE = (90, 110)


@dataclass
class StatsService:
    """Service for week summaries."""

    repository: DayEntryRepository
    goals_provider: GoalsProvider

    def get_week(self, user_id: UUID, day: date) -> WeeklySummary:
        """Return totals and averages for the Sunday-start week holding ``day``."""
        start = week_start(day)
        end = start + timedelta(days=DAYS_PER_WEEK - 1)
        goals = self.goals_provider.get_goals(user_id)
        entries = {
            entry.date: entry
            for entry in self.repository.list_range(user_id, start, end)
        }
        daily = [
            _daily_row(start + timedelta(days=offset), entries, goals)
            for offset in range(DAYS_PER_WEEK)
        ]
        low, high = ON_TARGET_RANGE
        return WeeklySummary(
            week_start=start,
            daily=daily,
            avg_calories=sum(row.calories for row in daily) / DAYS_PER_WEEK,
            avg_protein=sum(row.protein for row in daily) / DAYS_PER_WEEK,
            avg_carbohydrates=sum(row.carbohydrates for row in daily)
            / DAYS_PER_WEEK,
            avg_fat=sum(row.fat for row in daily) / DAYS_PER_WEEK,
            days_logged=sum(1 for row in daily if row.logged),
            days_on_target=sum(
                1
                for row in daily
                if row.logged and low <= row.calorie_percentage <= high
            ),
        )


def week_start(day: date) -> date:
    """Return the Sunday on or before ``day``."""
    return day - timedelta(days=(day.weekday() + 1) % DAYS_PER_WEEK)


def _daily_row(
    day: date, entries: dict[date, DayEntry], goals: UserGoals
) -> DailyTotals:
    entry = entries.get(day)
    if entry is None or not entry.meals:
        return DailyTotals(
            day=day,
            calories=0,
            protein=0,
            carbohydrates=0,
            fat=0,
            calorie_percentage=0,
            logged=False,
        )
    totals = entry.daily_totals
    return DailyTotals(
        day=day,
        calories=totals.calories,
        protein=totals.protein,
        carbohydrates=totals.carbohydrates,
        fat=totals.fat,
        calorie_percentage=goal_progress(
            totals.calories, goals.daily_calories
        ).percentage,
        logged=True,
    )
