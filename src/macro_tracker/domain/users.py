"""User profile and goal models."""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from uuid import UUID


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class ActivityLevel(str, Enum):
    SEDENTARY = "sedentary"
    LIGHT = "light"
    MODERATE = "moderate"
    ACTIVE = "active"
    VERY_ACTIVE = "very_active"


class GoalType(str, Enum):
    LOSE_WEIGHT = "lose_weight"
    GAIN_WEIGHT = "gain_weight"
    MAINTAIN_WEIGHT = "maintain_weight"
    BUILD_MUSCLE = "build_muscle"


@dataclass(frozen=True)
class Measurement:
    """A value with its unit, e.g. 180 cm or 165 lbs."""

    value: float
    unit: str


@dataclass(frozen=True)
class UserProfile:
    """Personal attributes used for metabolic estimates."""

    first_name: str
    last_name: str
    date_of_birth: date
    gender: Gender
    height: Measurement
    weight: Measurement
    activity_level: ActivityLevel


@dataclass(frozen=True)
class MacroTargets:
    """Daily macro targets in grams."""

    protein: float
    carbohydrates: float
    fat: float
    fiber: float = 25.0


@dataclass(frozen=True)
class MacroPercentages:
    """Share of daily calories per macro, derived from targets."""

    protein: int
    carbohydrates: int
    fat: int


@dataclass(frozen=True)
class UserGoals:
    """Calorie and macro goals for a user."""

    daily_calories: float
    macro_targets: MacroTargets
    macro_percentages: MacroPercentages
    goal_type: GoalType = GoalType.MAINTAIN_WEIGHT


@dataclass(frozen=True)
class UserRecord:
    """Represents a user stored in the database."""

    id: UUID
    email: str | None
    profile: UserProfile
    goals: UserGoals

    @property
    def full_name(self) -> str:
        return f"{self.profile.first_name} {self.profile.last_name}"


@dataclass(frozen=True)
class MetabolicSummary:
    """Derived metabolic figures for a profile."""

    age: int
    bmr: int
    tdee: int
    bmi: float
    bmi_category: str
