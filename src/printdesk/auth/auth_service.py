"""Bearer token verification producing :class:`Actor` identities.

Tokens are issued by the campus identity provider; the print desk only checks
the signature and reads the ``sub``/``email``/``role`` claims. ``issue_token``
exists for development tooling and tests.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
from jwt import ExpiredSignatureError
from jwt import InvalidTokenError as PyJWTInvalidTokenError
import structlog

from .auth_models import Actor, Role

logger = structlog.get_logger(__name__)


def _utcnow() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(tz=timezone.utc)


class AuthError(Exception):
    """Base class for auth failures."""


class InvalidTokenError(AuthError):
    """Raised when token cannot be decoded or carries bad claims."""


class TokenExpiredError(AuthError):
    """Raised when token is expired."""


@dataclass(slots=True)
class AuthService:
    """Verify bearer tokens and map their claims onto an :class:`Actor`."""

    signing_key: str
    algorithm: str = "HS256"
    token_ttl: timedelta = timedelta(hours=12)

    def issue_token(
        self,
        *,
        user_id: str,
        email: str,
        role: Role | str,
        issued_at: datetime | None = None,
    ) -> str:
        now = issued_at or _utcnow()
        payload: dict[str, Any] = {
            "sub": user_id,
            "email": email,
            "role": Role(role).value,
            "iat": int(now.timestamp()),
            "exp": int((now + self.token_ttl).timestamp()),
        }
        return jwt.encode(payload, self.signing_key, algorithm=self.algorithm)

    def validate_token(self, token: str) -> Actor:
        """Decode JWT and return the caller identity."""
        try:
            payload: dict[str, Any] = jwt.decode(
                token,
                self.signing_key,
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat", "sub", "role"]},
            )
        except ExpiredSignatureError as exc:
            raise TokenExpiredError("Token expired") from exc
        except PyJWTInvalidTokenError as exc:
            raise InvalidTokenError("Invalid token") from exc

        try:
            role = Role(payload["role"])
        except ValueError as exc:
            logger.warning("auth.token.unknown_role", role=payload.get("role"))
            raise InvalidTokenError("Unknown role claim") from exc

        return Actor(id=str(payload["sub"]), email=str(payload.get("email", "")), role=role)


__all__ = [
    "AuthError",
    "AuthService",
    "InvalidTokenError",
    "TokenExpiredError",
]
