"""Tests for user service."""

from datetime import date

import pytest

from macro_tracker.domain.users import ActivityLevel, GoalType, MacroTargets, Measurement
from macro_tracker.errors import DuplicateKeyError, NotFoundError, ValidationError
from macro_tracker.services.users import UserService
from tests.conftest import TEST_USER_ID, InMemoryUserRepository, make_profile


def _register(service: UserService, **overrides: object):  # type: ignore[no-untyped-def]
    return service.register(
        TEST_USER_ID,
        "alex@example.com",
        overrides.pop("profile", make_profile()),
        daily_calories=overrides.pop("daily_calories", 2000),
        targets=MacroTargets(protein=150, carbohydrates=250, fat=44),
        goal_type=GoalType.LOSE_WEIGHT,
    )


def test_register_creates_user_with_derived_percentages() -> None:
    repository = InMemoryUserRepository()
    service = UserService(repository)

    user = _register(service)

    assert user.full_name == "Alex Morgan"
    assert user.goals.goal_type == GoalType.LOSE_WEIGHT
    assert user.goals.macro_percentages.protein == 30
    assert TEST_USER_ID in repository.users


def test_register_twice_is_a_duplicate() -> None:
    service = UserService(InMemoryUserRepository())
    _register(service)

    with pytest.raises(DuplicateKeyError):
        _register(service)


def test_register_validates_profile() -> None:
    service = UserService(InMemoryUserRepository())

    with pytest.raises(ValidationError) as exc_info:
        _register(service, profile=make_profile(height=Measurement(90, "cm")))

    assert exc_info.value.field == "height.value"


def test_register_rejects_blank_name() -> None:
    service = UserService(InMemoryUserRepository())

    with pytest.raises(ValidationError) as exc_info:
        _register(service, profile=make_profile(first_name="  "))

    assert exc_info.value.field == "first_name"


def test_get_user_missing() -> None:
    service = UserService(InMemoryUserRepository())

    with pytest.raises(NotFoundError):
        service.get_user(TEST_USER_ID)


def test_activity_change_keeps_goals(registered_user) -> None:
    repository = InMemoryUserRepository(users={registered_user.id: registered_user})
    service = UserService(repository)

    updated = service.update_profile(
        registered_user.id, activity_level=ActivityLevel.VERY_ACTIVE
    )

    assert updated.profile.activity_level == ActivityLevel.VERY_ACTIVE
    assert updated.goals == registered_user.goals
    assert repository.users[registered_user.id].profile == updated.profile


def test_update_goals_persists(registered_user, user_repository) -> None:
    service = UserService(user_repository)

    updated = service.update_goals(registered_user.id, daily_calories=2400)

    assert updated.goals.macro_percentages.protein == 25
    assert user_repository.users[registered_user.id].goals == updated.goals


def test_get_summary_includes_metabolic_figures(registered_user, user_repository) -> None:
    service = UserService(user_repository)

    user, summary = service.get_summary(registered_user.id, date(2024, 6, 1))

    assert user == registered_user
    assert summary.bmr == 1710
    assert summary.tdee == 2651


def test_update_profile_validates(registered_user, user_repository) -> None:
    service = UserService(user_repository)

    with pytest.raises(ValidationError):
        service.update_profile(registered_user.id, weight=Measurement(10, "kg"))

    assert user_repository.users[registered_user.id] == registered_user
