"""Pydantic models for API payloads."""

from dataclasses import asdict
from datetime import date
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

from macro_tracker.domain.meals import (
    DEFAULT_REFERENCE_AMOUNT,
    MAX_FOOD_AMOUNT,
    MIN_FOOD_AMOUNT,
    DayEntry,
    FoodUnit,
    MealType,
)
from macro_tracker.domain.users import (
    ActivityLevel,
    Gender,
    GoalType,
    MacroTargets,
    Measurement,
    MetabolicSummary,
    UserProfile,
    UserRecord,
)
from macro_tracker.services.meals import FoodInput, MealInput


class NutritionIn(BaseModel):
    """Nutrient amounts; the four macros and calories are required."""

    calories: float = Field(ge=0)
    protein: float = Field(ge=0)
    carbohydrates: float = Field(ge=0)
    fat: float = Field(ge=0)
    fiber: float = Field(default=0, ge=0)
    sugar: float = Field(default=0, ge=0)
    sodium: float = Field(default=0, ge=0)
    potassium: float = Field(default=0, ge=0)
    calcium: float = Field(default=0, ge=0)
    iron: float = Field(default=0, ge=0)


class FoodIn(BaseModel):
    """Food submitted as part of a meal."""

    name: str | None = Field(default=None, max_length=200)
    amount: float = Field(ge=MIN_FOOD_AMOUNT, le=MAX_FOOD_AMOUNT)
    unit: FoodUnit = FoodUnit.GRAMS
    catalog_id: int | None = None
    custom_food_id: UUID | None = None
    reference_amount: float = Field(default=DEFAULT_REFERENCE_AMOUNT, gt=0)
    nutrition_per_reference: NutritionIn | None = None

    def to_input(self) -> FoodInput:
        return FoodInput(
            name=self.name,
            amount=self.amount,
            unit=self.unit.value,
            catalog_id=self.catalog_id,
            custom_food_id=self.custom_food_id,
            reference_amount=self.reference_amount,
            nutrition_per_reference=(
                self.nutrition_per_reference.model_dump()
                if self.nutrition_per_reference
                else None
            ),
        )


class MealIn(BaseModel):
    """Meal submission for a day."""

    date: date
    meal_type: MealType
    meal_name: str | None = Field(default=None, max_length=100)
    foods: list[FoodIn]

    def to_input(self) -> MealInput:
        return MealInput(
            meal_type=self.meal_type.value,
            name=self.meal_name,
            foods=[food.to_input() for food in self.foods],
        )


class AmountIn(BaseModel):
    """New amount for a logged food."""

    amount: float = Field(ge=MIN_FOOD_AMOUNT, le=MAX_FOOD_AMOUNT)


class CustomFoodIn(BaseModel):
    """User-defined food."""

    name: str = Field(min_length=1, max_length=200)
    brand: str | None = Field(default=None, max_length=100)
    category: Literal[
        "vegetables",
        "fruits",
        "grains",
        "proteins",
        "dairy",
        "fats",
        "beverages",
        "snacks",
        "other",
    ] = "other"
    nutrition_per_100g: NutritionIn


class HeightIn(BaseModel):
    value: float = Field(ge=100, le=300)
    unit: Literal["cm", "inches"]


class WeightIn(BaseModel):
    value: float = Field(ge=30, le=500)
    unit: Literal["kg", "lbs"]


class ProfileIn(BaseModel):
    """Profile captured at registration."""

    first_name: str = Field(min_length=1, max_length=50)
    last_name: str = Field(min_length=1, max_length=50)
    date_of_birth: date
    gender: Gender
    height: HeightIn
    weight: WeightIn
    activity_level: ActivityLevel

    def to_profile(self) -> UserProfile:
        return UserProfile(
            first_name=self.first_name,
            last_name=self.last_name,
            date_of_birth=self.date_of_birth,
            gender=self.gender,
            height=Measurement(**self.height.model_dump()),
            weight=Measurement(**self.weight.model_dump()),
            activity_level=self.activity_level,
        )


class ProfilePatchIn(BaseModel):
    """Partial profile update."""

    first_name: str | None = Field(default=None, min_length=1, max_length=50)
    last_name: str | None = Field(default=None, min_length=1, max_length=50)
    date_of_birth: date | None = None
    gender: Gender | None = None
    height: HeightIn | None = None
    weight: WeightIn | None = None
    activity_level: ActivityLevel | None = None

    def changes(self) -> dict[str, object]:
        """Return only the fields that were sent, as domain values."""
        changes: dict[str, object] = {}
        for name in self.model_fields_set:
            value = getattr(self, name)
            if value is None:
                continue
            if isinstance(value, HeightIn | WeightIn):
                value = Measurement(**value.model_dump())
            changes[name] = value
        return changes


class MacroTargetsIn(BaseModel):
    protein: float = Field(ge=0)
    carbohydrates: float = Field(ge=0)
    fat: float = Field(ge=0)
    fiber: float = Field(default=25, ge=0)

    def to_targets(self) -> MacroTargets:
        return MacroTargets(**self.model_dump())


class GoalsIn(BaseModel):
    """Goals captured at registration."""

    goal_type: GoalType = GoalType.MAINTAIN_WEIGHT
    daily_calories: float = Field(ge=800, le=10000)
    macro_targets: MacroTargetsIn


class GoalsPatchIn(BaseModel):
    """Partial goals update."""

    goal_type: GoalType | None = None
    daily_calories: float | None = Field(default=None, ge=800, le=10000)
    macro_targets: MacroTargetsIn | None = None


class RegisterIn(BaseModel):
    profile: ProfileIn
    goals: GoalsIn


def day_entry_payload(entry: DayEntry) -> dict[str, object]:
    """Serialize a day entry for responses."""
    payload = asdict(entry)
    for meal_payload, meal in zip(payload["meals"], entry.meals, strict=True):
        for food_payload, food in zip(meal_payload["foods"], meal.foods, strict=True):
            food_payload["is_custom_food"] = food.is_custom_food
    return payload


def user_payload(
    user: UserRecord, summary: MetabolicSummary | None = None
) -> dict[str, object]:
    """Serialize a user, with metabolic figures when given."""
    payload: dict[str, object] = {
        "id": user.id,
        "email": user.email,
        "full_name": user.full_name,
        "profile": asdict(user.profile),
        "goals": asdict(user.goals),
    }
    if summary is not None:
        payload.update(asdict(summary))
    return payload
