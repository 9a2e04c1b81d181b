"""Request authentication."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from macro_tracker.errors import UnauthorizedError

_BEARER_PREFIX = "bearer "


@dataclass(frozen=True)
class AuthIdentity:
    """Identity resolved from an access token."""

    user_id: UUID
    email: str | None = None


class TokenVerifier(Protocol):
    """Resolves access tokens issued by the identity provider."""

    def verify(self, token: str) -> AuthIdentity | None:
        """Return the identity for a valid token, or None."""


@dataclass
class AuthService:
    """Turns an Authorization header into an identity."""

    verifier: TokenVerifier

    def authenticate(self, authorization: str | None) -> AuthIdentity:
        """Return the caller's identity or raise ``UnauthorizedError``."""
        token = _extract_bearer(authorization)
        if token is None:
            raise UnauthorizedError("Missing bearer token")
        identity = self.verifier.verify(token)
        if identity is None:
            raise UnauthorizedError("Invalid or expired token")
        return identity


def _extract_bearer(authorization: str | None) -> str | None:
    if not authorization:
        return None
    if not authorization.lower().startswith(_BEARER_PREFIX):
        return None
    token = authorization[len(_BEARER_PREFIX) :].strip()
    return token or None
