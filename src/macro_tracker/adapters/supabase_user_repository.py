"""Supabase-backed user repository."""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from uuid import UUID

from supabase import Client

from macro_tracker.domain.users import (
    ActivityLevel,
    Gender,
    GoalType,
    MacroPercentages,
    MacroTargets,
    Measurement,
    UserGoals,
    UserProfile,
    UserRecord,
)
from macro_tracker.services.users import UserRepository


@dataclass
class SupabaseUserRepository(UserRepository):
    """Supabase implementation for user persistence."""

    client: Client

    def get_user(self, user_id: UUID) -> UserRecord | None:
        """Return the user row for an auth user id."""
        response = (
            self.client.table("users")
            .select("id, email, profile, goals")
            .eq("id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_user(response.data[0])

    def create_user(self, user: UserRecord) -> UserRecord:
        """Insert a user row and return it."""
        response = (
            self.client.table("users")
            .insert(
                {
                    "id": str(user.id),
                    "email": user.email,
                    "profile": _profile_to_json(user.profile),
                    "goals": _goals_to_json(user.goals),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create user in Supabase")
        return _parse_user(response.data[0])

    def update_profile(self, user_id: UUID, profile: UserProfile) -> None:
        """Replace the stored profile."""
        self._update(user_id, {"profile": _profile_to_json(profile)})

    def update_goals(self, user_id: UUID, goals: UserGoals) -> None:
        """Replace the stored goals."""
        self._update(user_id, {"goals": _goals_to_json(goals)})

    def _update(self, user_id: UUID, payload: dict[str, object]) -> None:
        self.client.table("users").update(
            {**payload, "updated_at": datetime.now(tz=UTC).isoformat()}
        ).eq("id", str(user_id)).execute()


def _profile_to_json(profile: UserProfile) -> dict[str, object]:
    return {
        "first_name": profile.first_name,
        "last_name": profile.last_name,
        "date_of_birth": profile.date_of_birth.isoformat(),
        "gender": profile.gender.value,
        "height": {"value": profile.height.value, "unit": profile.height.unit},
        "weight": {"value": profile.weight.value, "unit": profile.weight.unit},
        "activity_level": profile.activity_level.value,
    }


def _goals_to_json(goals: UserGoals) -> dict[str, object]:
    return {
        "goal_type": goals.goal_type.value,
        "daily_calories": goals.daily_calories,
        "macro_targets": vars(goals.macro_targets),
        "macro_percentages": vars(goals.macro_percentages),
    }


def _parse_user(row: dict[str, object]) -> UserRecord:
    profile = row["profile"]
    goals = row["goals"]
    return UserRecord(
        id=UUID(str(row["id"])),
        email=row.get("email"),
        profile=UserProfile(
            first_name=str(profile["first_name"]),
            last_name=str(profile["last_name"]),
            date_of_birth=date.fromisoformat(str(profile["date_of_birth"])[:10]),
            gender=Gender(profile["gender"]),
            height=Measurement(**profile["height"]),
            weight=Measurement(**profile["weight"]),
            activity_level=ActivityLevel(profile["activity_level"]),
        ),
        goals=UserGoals(
            daily_calories=float(goals["daily_calories"]),
            macro_targets=MacroTargets(**goals["macro_targets"]),
            macro_percentages=MacroPercentages(**goals["macro_percentages"]),
            goal_type=GoalType(goals.get("goal_type", GoalType.MAINTAIN_WEIGHT)),
        ),
    )
