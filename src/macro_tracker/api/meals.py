"""Meal logging and daily summary endpoints."""

from __future__ import annotations

from dataclasses import asdict
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Query, Request, status

from macro_tracker.api.auth import require_identity
from macro_tracker.api.models import AmountIn, MealIn, day_entry_payload
from macro_tracker.domain.meals import MealType  # noqa: TC001
from macro_tracker.services.auth import AuthIdentity  # noqa: TC001

if TYPE_CHECKING:
    from macro_tracker.containers import AppContainer

router = APIRouter(prefix="/meals", tags=["meals"])
analytics_router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_meal(
    payload: MealIn,
    request: Request,
    identity: AuthIdentity = Depends(require_identity),
) -> dict[str, object]:
    """Log a meal for a day."""
    return await _save_meal(payload, request, identity)


@router.put("")
async def replace_meal(
    payload: MealIn,
    request: Request,
    identity: AuthIdentity = Depends(require_identity),
) -> dict[str, object]:
    """Replace the meal of the same type on a day."""
    return await _save_meal(payload, request, identity)


@router.get("/daily/{day}")
async def daily_summary(
    day: date,
    request: Request,
    identity: AuthIdentity = Depends(require_identity),
) -> dict[str, object]:
    """Return the day's meals, totals and progress."""
    container: AppContainer = request.app.state.container
    entry = container.meal_entry_service.get_daily_summary(identity.user_id, day)
    return {"meal_entry": day_entry_payload(entry), "is_empty": entry.is_empty}


@router.delete("/{day}/{meal_type}")
async def delete_meal(
    day: date,
    meal_type: MealType,
    request: Request,
    identity: AuthIdentity = Depends(require_identity),
) -> dict[str, object]:
    """Remove one meal from a day."""
    container: AppContainer = request.app.state.container
    entry = container.meal_entry_service.remove_meal(
        identity.user_id, day, meal_type.value
    )
    return {"meal_entry": day_entry_payload(entry)}


@router.patch("/{day}/{meal_type}/foods/{food_index}")
async def update_food_amount(  # noqa: PLR0913
    day: date,
    meal_type: MealType,
    food_index: int,
    payload: AmountIn,
    request: Request,
    identity: AuthIdentity = Depends(require_identity),
) -> dict[str, object]:
    """Change the amount of one logged food."""
    container: AppContainer = request.app.state.container
    entry = container.meal_entry_service.update_food_amount(
        identity.user_id, day, meal_type.value, food_index, payload.amount
    )
    return {"meal_entry": day_entry_payload(entry)}


@analytics_router.get("/weekly")
async def weekly_summary(
    request: Request,
    day: date | None = Query(default=None, alias="date"),
    identity: AuthIdentity = Depends(require_identity),
) -> dict[str, object]:
    """Return the week summary around ``date`` (today by default)."""
    container: AppContainer = request.app.state.container
    summary = container.stats_service.get_week(
        identity.user_id, day or datetime.now(tz=UTC).date()
    )
    return {"summary": asdict(summary)}


async def _save_meal(
    payload: MealIn, request: Request, identity: AuthIdentity
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    entry = await container.meal_entry_service.add_or_replace_meal(
        identity.user_id, payload.date, payload.to_input()
    )
    return {"meal_entry": day_entry_payload(entry)}
