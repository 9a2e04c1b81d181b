"""Profile and goal endpoints for the authenticated user."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request, status

from macro_tracker.api.auth import require_identity
from macro_tracker.api.models import (
    GoalsPatchIn,
    ProfilePatchIn,
    RegisterIn,
    user_payload,
)
from macro_tracker.services.auth import AuthIdentity  # noqa: TC001

if TYPE_CHECKING:
    from macro_tracker.containers import AppContainer

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/me", status_code=status.HTTP_201_CREATED)
async def register(
    payload: RegisterIn,
    request: Request,
    identity: AuthIdentity = Depends(require_identity),
) -> dict[str, object]:
    """Create the caller's profile and goals."""
    container: AppContainer = request.app.state.container
    user = container.user_service.register(
        identity.user_id,
        identity.email,
        payload.profile.to_profile(),
        daily_calories=payload.goals.daily_calories,
        targets=payload.goals.macro_targets.to_targets(),
        goal_type=payload.goals.goal_type,
    )
    return {"user": user_payload(user)}


@router.get("/me")
async def current_user(
    request: Request,
    identity: AuthIdentity = Depends(require_identity),
) -> dict[str, object]:
    """Return the caller's profile, goals and metabolic figures."""
    container: AppContainer = request.app.state.container
    user, summary = container.user_service.get_summary(
        identity.user_id, datetime.now(tz=UTC).date()
    )
    return {"user": user_payload(user, summary)}


@router.patch("/me/profile")
async def update_profile(
    payload: ProfilePatchIn,
    request: Request,
    identity: AuthIdentity = Depends(require_identity),
) -> dict[str, object]:
    """Apply profile changes."""
    container: AppContainer = request.app.state.container
    user = container.user_service.update_profile(
        identity.user_id, **payload.changes()
    )
    return {"user": user_payload(user)}


@router.put("/me/goals")
async def update_goals(
    payload: GoalsPatchIn,
    request: Request,
    identity: AuthIdentity = Depends(require_identity),
) -> dict[str, object]:
    """Change goals; macro percentages follow calorie or target changes."""
    container: AppContainer = request.app.state.container
    user = container.user_service.update_goals(
        identity.user_id,
        daily_calories=payload.daily_calories,
        targets=payload.macro_targets.to_targets() if payload.macro_targets else None,
        goal_type=payload.goal_type,
    )
    return {"user": user_payload(user)}
