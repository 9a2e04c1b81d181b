"""User-related business logic."""

import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Protocol
from uuid import UUID

from macro_tracker.domain.users import (
    GoalType,
    MacroTargets,
    MetabolicSummary,
    UserGoals,
    UserProfile,
    UserRecord,
)
from macro_tracker.errors import DuplicateKeyError, NotFoundError, ValidationError
from macro_tracker.services.goals import build_goals, update_goals
from macro_tracker.services.metabolic import metabolic_summary

_HEIGHT_RANGE = (100, 300)
_WEIGHT_RANGE = (30, 500)
_MAX_NAME_LENGTH = 50

_logger = logging.getLogger(__name__)


class UserRepository(Protocol):
    """Persistence interface for user data."""

    def get_user(self, user_id: UUID) -> UserRecord | None:
        """Return a user by id, if present."""

    def create_user(self, user: UserRecord) -> UserRecord:
        """Insert a user and return the stored record."""

    def update_profile(self, user_id: UUID, profile: UserProfile) -> None:
        """Replace a user's profile."""

    def update_goals(self, user_id: UUID, goals: UserGoals) -> None:
        """Replace a user's goals."""


@dataclass
class UserService:
    """Application service for profiles and goals."""

    repository: UserRepository

    def register(  # noqa: PLR0913
        self,
        user_id: UUID,
        email: str | None,
        profile: UserProfile,
        daily_calories: float,
        targets: MacroTargets,
        goal_type: GoalType = GoalType.MAINTAIN_WEIGHT,
    ) -> UserRecord:
        """Create the profile and goals for an authenticated identity."""
        if self.repository.get_user(user_id) is not None:
            raise DuplicateKeyError(f"User {user_id} already exists")
        _validate_profile(profile)
        user = UserRecord(
            id=user_id,
            email=email,
            profile=profile,
            goals=build_goals(daily_calories, targets, goal_type),
        )
        created = self.repository.create_user(user)
        _logger.info("Registered user %s", user_id)
        return created

    def get_user(self, user_id: UUID) -> UserRecord:
        """Return a user or raise ``NotFoundError``."""
        user = self.repository.get_user(user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        return user

    def get_goals(self, user_id: UUID) -> UserGoals:
        """Return the current goals of a user."""
        return self.get_user(user_id).goals

    def update_profile(self, user_id: UUID, **changes: object) -> UserRecord:
        """Apply profile field changes.

        Goals are left untouched, including when only the activity level
        changes.
        """
        user = self.get_user(user_id)
        profile = replace(user.profile, **changes)
        _validate_profile(profile)
        self.repository.update_profile(user_id, profile)
        return replace(user, profile=profile)

    def update_goals(
        self,
        user_id: UUID,
        *,
        daily_calories: float | None = None,
        targets: MacroTargets | None = None,
        goal_type: GoalType | None = None,
    ) -> UserRecord:
        """Change goals, recomputing macro percentages when needed."""
        user = self.get_user(user_id)
        goals = update_goals(
            user.goals,
            daily_calories=daily_calories,
            targets=targets,
            goal_type=goal_type,
        )
        self.repository.update_goals(user_id, goals)
        return replace(user, goals=goals)

    def get_summary(
        self, user_id: UUID, today: date
    ) -> tuple[UserRecord, MetabolicSummary]:
        """Return a user with derived metabolic figures."""
        user = self.get_user(user_id)
        return user, metabolic_summary(user.profile, today)


def _validate_profile(profile: UserProfile) -> None:
    for field_name in ("first_name", "last_name"):
        value = getattr(profile, field_name).strip()
        if not value or len(value) > _MAX_NAME_LENGTH:
            raise ValidationError(
                field_name, f"must be 1-{_MAX_NAME_LENGTH} characters"
            )
    if profile.height.unit not in {"cm", "inches"}:
        raise ValidationError("height.unit", "must be cm or inches")
    if profile.weight.unit not in {"kg", "lbs"}:
        raise ValidationError("weight.unit", "must be kg or lbs")
    low, high = _HEIGHT_RANGE
    if not low <= profile.height.value <= high:
        raise ValidationError("height.value", f"must be between {low} and {high}")
    low, high = _WEIGHT_RANGE
    if not low <= profile.weight.value <= high:
        raise ValidationError("weight.value", f"must be between {low} and {high}")
