"""Tests for weekly statistics."""

import asyncio
from datetime import date

import pytest

from macro_tracker.services.meals import FoodInput, MealInput
from macro_tracker.services.stats import StatsService, week_start
from tests.conftest import TEST_USER_ID


def _log_calories(service, day: date, calories: float) -> None:  # type: ignore[no-untyped-def]
    food = FoodInput(
        name="Fixed meal",
        amount=100,
        nutrition_per_reference={
            "calories": calories,
            "protein": 70,
            "carbohydrates": 140,
            "fat": 28,
        },
    )
    asyncio.run(
        service.add_or_replace_meal(
            TEST_USER_ID, day, MealInput(meal_type="dinner", foods=[food])
        )
    )


def test_week_start_is_sunday() -> None:
    assert week_start(date(2024, 5, 1)) == date(2024, 4, 28)
    assert week_start(date(2024, 4, 28)) == date(2024, 4, 28)
    assert week_start(date(2024, 5, 4)) == date(2024, 4, 28)


@pytest.mark.usefixtures("registered_user")
def test_weekly_summary(meal_entry_service, day_entry_repository, user_service) -> None:
    _log_calories(meal_entry_service, date(2024, 4, 28), 2000)
    _log_calories(meal_entry_service, date(2024, 5, 1), 1500)
    _log_calories(meal_entry_service, date(2024, 5, 5), 1900)
    service = StatsService(repository=day_entry_repository, goals_provider=user_service)

    summary = service.get_week(TEST_USER_ID, date(2024, 5, 2))

    assert summary.week_start == date(2024, 4, 28)
    assert len(summary.daily) == 7
    assert summary.daily[0].calories == 2000
    assert summary.daily[0].calorie_percentage == 100
    assert summary.daily[1].logged is False
    assert summary.daily[3].calorie_percentage == 75
    assert summary.avg_calories == 500
    assert summary.avg_protein == 20
    assert summary.days_logged == 2
    assert summary.days_on_target == 1


@pytest.mark.usefixtures("registered_user")
def test_weekly_summary_without_entries(day_entry_repository, user_service) -> None:
    service = StatsService(repository=day_entry_repository, goals_provider=user_service)

    summary = service.get_week(TEST_USER_ID, date(2024, 5, 2))

    assert summary.avg_calories == 0
    assert summary.days_logged == 0
    assert all(not row.logged for row in summary.daily)
