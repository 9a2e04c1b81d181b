"""Metabolic estimates: BMR, TDEE and BMI."""

import logging
import math
from datetime import date

from macro_tracker.domain.users import (
    ActivityLevel,
    Gender,
    MetabolicSummary,
    UserProfile,
)
from macro_tracker.errors import InvalidInputError
from macro_tracker.services.scaling import round_half_up

ACTIVITY_MULTIPLIERS = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHT: 1.375,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.ACTIVE: 1.725,
    ActivityLevel.VERY_ACTIVE: 1.9,
}

KG_PER_LB = 0.453592
CM_PER_INCH = 2.54

_BMI_BANDS = (
    (18.5, "Underweight"),
    (25.0, "Normal"),
    (30.0, "Overweight"),
)

_logger = logging.getLogger(__name__)


def compute_bmr(
    weight_kg: float, height_cm: float, age: float, gender: Gender | str
) -> int:
    """Mifflin-St Jeor basal metabolic rate in kcal/day."""
    _require_non_negative(weight_kg=weight_kg, height_cm=height_cm, age=age)
    base = 10 * weight_kg + 6.25 * height_cm - 5 * age
    offset = 5 if _is_male(gender) else -161
    return int(round_half_up(base + offset))


def compute_tdee(bmr: float, activity_level: ActivityLevel | str) -> int:
    """Total daily energy expenditure for an activity level.

    Unknown levels use the sedentary multiplier.
    """
    _require_non_negative(bmr=bmr)
    multiplier = _activity_multiplier(activity_level)
    return int(round_half_up(bmr * multiplier))


def compute_bmi(weight_kg: float, height_m: float) -> float:
    """Body mass index."""
    _require_non_negative(weight_kg=weight_kg, height_m=height_m)
    if height_m == 0:
        raise InvalidInputError("height_m must be greater than zero")
    return weight_kg / (height_m * height_m)


def bmi_category(bmi: float) -> str:
    """Return the weight category for a BMI value."""
    for upper, label in _BMI_BANDS:
        if bmi < upper:
            return label
    return "Obese"


def weight_in_kg(value: float, unit: str) -> float:
    if unit == "lbs":
        return value * KG_PER_LB
    return value


def height_in_cm(value: float, unit: str) -> float:
    if unit == "inches":
        return value * CM_PER_INCH
    return value


def age_on(date_of_birth: date, today: date) -> int:
    """Whole years between birth and ``today``."""
    age = today.year - date_of_birth.year
    if (today.month, today.day) < (date_of_birth.month, date_of_birth.day):
        age -= 1
    return age


def metabolic_summary(profile: UserProfile, today: date) -> MetabolicSummary:
    """Compute age, BMR, TDEE and BMI for a stored profile."""
    weight_kg = weight_in_kg(profile.weight.value, profile.weight.unit)
    height_cm = height_in_cm(profile.height.value, profile.height.unit)
    age = age_on(profile.date_of_birth, today)
    bmr = compute_bmr(weight_kg, height_cm, age, profile.gender)
    bmi = compute_bmi(weight_kg, height_cm / 100)
    return MetabolicSummary(
        age=age,
        bmr=bmr,
        tdee=compute_tdee(bmr, profile.activity_level),
        bmi=round_half_up(bmi, 1),
        bmi_category=bmi_category(bmi),
    )


def _activity_multiplier(activity_level: ActivityLevel | str) -> float:
    try:
        return ACTIVITY_MULTIPLIERS[ActivityLevel(activity_level)]
    except ValueError:
        _logger.info("Unknown activity level %r, using sedentary", activity_level)
        return ACTIVITY_MULTIPLIERS[ActivityLevel.SEDENTARY]


def _is_male(gender: Gender | str) -> bool:
    return str(getattr(gender, "value", gender)).lower() == Gender.MALE.value


def _require_non_negative(**values: float) -> None:
    for name, value in values.items():
        if not isinstance(value, int | float) or not math.isfinite(value):
            raise InvalidInputError(f"{name} must be a finite number")
        if value < 0:
            raise InvalidInputError(f"{name} cannot be negative")
