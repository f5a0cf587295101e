"""Service layer for access token (JWT) issuance and validation."""
import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from uuid import UUID

import jwt

from core.config import Settings
from services.exceptions import ExpiredTokenError, InvalidTokenError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenClaims:
    """Validated claims carried by an access token."""

    user_id: UUID
    email: str
    expires_at: datetime


def create_access_token(settings: Settings, user_id: UUID, email: str) -> str:
    """
    Create a signed, short-lived access token.

    Args:
        settings: Application settings (secret, algorithm, expiry window).
        user_id: ID of the authenticated user, stored as the `sub` claim.
        email: Email of the authenticated user.

    Returns:
        Encoded JWT. There is no refresh token; clients sign in again after expiry.
    """
    now = datetime.now(UTC)
    payload = {
        "sub": str(user_id),
        "email": email,
        "iat": now,
        "exp": now + timedelta(minutes=settings.jwt_expire_minutes),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(settings: Settings, token: str) -> TokenClaims:
    """
    Decode and validate an access token.

    Raises:
        ExpiredTokenError: If the token is past its `exp` claim.
        InvalidTokenError: If the signature, algorithm, or claims are invalid.
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise ExpiredTokenError() from e
    except jwt.PyJWTError as e:
        # Log full details for debugging (server-side only)
        logger.warning("JWT validation failed: %s", e)
        raise InvalidTokenError() from e

    try:
        user_id = UUID(payload["sub"])
    except (TypeError, ValueError) as e:
        raise InvalidTokenError("Invalid token: malformed sub claim") from e

    return TokenClaims(
        user_id=user_id,
        email=payload.get("email", ""),
        expires_at=datetime.fromtimestamp(payload["exp"], tz=UTC),
    )
