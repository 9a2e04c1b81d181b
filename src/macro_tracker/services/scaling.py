"""Scaling of per-reference nutrition to logged amounts."""

import math
from dataclasses import fields
from decimal import ROUND_HALF_UP, Decimal

from macro_tracker.domain.meals import DEFAULT_REFERENCE_AMOUNT, FoodUnit
from macro_tracker.domain.nutrition import NutritionProfile
from macro_tracker.errors import InvalidAmountError

# Mass units are converted to grams; volume and count units stay as logged.
_GRAMS_PER_UNIT = {
    FoodUnit.GRAMS: 1.0,
    FoodUnit.OUNCES: 28.3495,
    FoodUnit.POUNDS: 453.592,
}


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with halves going up, so 72.5 becomes 73 rather than 72."""
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def reference_units(amount: float, unit: FoodUnit | str) -> float:
    """Express a logged amount in the units of the reference record."""
    factor = _GRAMS_PER_UNIT.get(FoodUnit(unit))
    if factor is None:
        return amount
    return amount * factor


def scale(
    ref: NutritionProfile,
    amount: float,
    reference_amount: float = DEFAULT_REFERENCE_AMOUNT,
) -> NutritionProfile:
    """Scale a per-reference record to an actual amount.

    Calories round to whole kcal and every other field to one decimal. The
    result is what gets stored; aggregation sums these values unchanged.
    """
    _check_amount(amount)
    _check_amount(reference_amount)
    factor = amount / reference_amount
    values = {}
    for item in fields(NutritionProfile):
        scaled = getattr(ref, item.name) * factor
        digits = 0 if item.name == "calories" else 1
        values[item.name] = round_half_up(scaled, digits)
    return NutritionProfile(**values)


def _check_amount(value: float) -> None:
    if not isinstance(value, int | float) or not math.isfinite(value) or value <= 0:
        raise InvalidAmountError(value)
