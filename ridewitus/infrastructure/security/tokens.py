"""
Session token issuance and verification.

Tokens are HS256 JWTs carrying the account id (``sub``) and role. They are
never stored server-side: validity is signature + expiry only, so a token
stays usable until it expires even after sign-out.

Boundary: a token presented at exactly its ``exp`` second is rejected.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from pydantic import BaseModel

from ridewitus.config.settings import get_settings
from ridewitus.domain.models import Role
from ridewitus.infrastructure.exceptions import (
    ConfigurationError,
    InvalidTokenError,
)


logger = logging.getLogger(__name__)

TOKEN_ALGORITHM = "HS256"
TOKEN_TTL = timedelta(days=7)


class SessionIdentity(BaseModel):
    """Identity resolved from a verified session token."""

    account_id: str
    role: Role


class TokenService:
    """Issues and verifies signed, time-limited session tokens."""

    def __init__(self, secret: Optional[str]):
        self._secret = secret

    def issue(
        self,
        account_id: str,
        role: Role,
        issued_at: Optional[datetime] = None,
    ) -> str:
        """
        Sign a token for an account, valid for seven days.

        Raises:
            ConfigurationError: If no signing secret is configured.
        """
        if not self._secret:
            logger.critical("JWT_SECRET is not set; refusing to issue tokens")
            raise ConfigurationError(
                "Token signing secret is not configured",
                missing_keys=["JWT_SECRET"],
            )

        issued_at = issued_at or datetime.now(timezone.utc)
        payload = {
            "sub": str(account_id),
            "role": Role(role).value,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + TOKEN_TTL).timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=TOKEN_ALGORITHM)

    def verify(self, token: Optional[str]) -> SessionIdentity:
        """
        Verify a token and return the identity it carries.

        Every failure mode raises the same ``InvalidTokenError``; callers
        must deny access without inspecting the cause.
        """
        if not self._secret:
            logger.error("JWT_SECRET is not set; rejecting token")
            raise InvalidTokenError("Invalid or expired token")
        if not token or not isinstance(token, str):
            raise InvalidTokenError("Invalid or expired token")

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[TOKEN_ALGORITHM],
                options={"require": ["exp", "iat", "sub"]},
            )
            return SessionIdentity(
                account_id=payload["sub"],
                role=Role(payload["role"]),
            )
        except (jwt.InvalidTokenError, KeyError, ValueError) as e:
            logger.warning(f"Token verification failed: {type(e).__name__}")
            raise InvalidTokenError("Invalid or expired token")


def get_token_service() -> TokenService:
    """Build a token service from the current settings."""
    return TokenService(get_settings().jwt_secret)
