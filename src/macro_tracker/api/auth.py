"""Bearer token dependency for user endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Header, Request

from macro_tracker.services.auth import AuthIdentity

if TYPE_CHECKING:
    from macro_tracker.containers import AppContainer


async def require_identity(
    request: Request,
    authorization: str | None = Header(default=None),
) -> AuthIdentity:
    """Resolve the caller from the ``Authorization`` header."""
    container: AppContainer = request.app.state.container
    return container.auth_service.authenticate(authorization)
