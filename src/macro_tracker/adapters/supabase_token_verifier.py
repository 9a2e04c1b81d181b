"""Supabase Auth token verification."""

import logging
from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from macro_tracker.services.auth import AuthIdentity, TokenVerifier

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseTokenVerifier(TokenVerifier):
    """Verifies access tokens against Supabase Auth."""

    client: Client

    def verify(self, token: str) -> AuthIdentity | None:
        """Return the identity for a token, or None when Supabase rejects it."""
        try:
            response = self.client.auth.get_user(token)
        except Exception as exc:  # noqa: BLE001
            _logger.info("Rejected access token: %s", exc)
            return None
        user = getattr(response, "user", None)
        if user is None:
            return None
        return AuthIdentity(user_id=UUID(str(user.id)), email=user.email)
