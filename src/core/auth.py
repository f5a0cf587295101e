"""Authentication module for bearer-token (JWT) validation."""
import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings, get_settings
from db.session import get_async_session
from models.user import User
from services.exceptions import InvalidTokenError
from services.token_service import decode_access_token

logger = logging.getLogger(__name__)


# HTTP Bearer token scheme
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def authenticate_token(db: AsyncSession, settings: Settings, token: str) -> User:
    """
    Resolve a bearer token to the user it was issued for.

    Raises:
        HTTPException: 401 if the token is invalid or expired, or if its user
            no longer exists.
    """
    try:
        claims = decode_access_token(settings, token)
    except InvalidTokenError as e:
        raise _unauthorized(e.message) from e

    user = await db.get(User, claims.user_id)
    if user is None:
        logger.warning("Valid token for missing user %s", claims.user_id)
        raise _unauthorized("User not found")

    return user


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_settings),
) -> User:
    """
    Dependency that validates the bearer token and returns the current user.

    Identity is resolved once per request here; routes pass current_user.id
    explicitly into every service call.
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")

    return await authenticate_token(db, settings, credentials.credentials)
