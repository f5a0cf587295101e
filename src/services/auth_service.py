"""Service layer for account registration and sign-in."""
import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings
from core.passwords import hash_password_async, verify_password_async
from models.user import User
from schemas.auth import SignInRequest, SignUpRequest
from services.exceptions import DuplicateEmailError, InvalidCredentialsError
from services.token_service import create_access_token

logger = logging.getLogger(__name__)


async def sign_up(db: AsyncSession, data: SignUpRequest) -> User:
    """
    Register a new account.

    Email uniqueness is enforced by the unique index on users.email, not by a
    lookup before insert, so concurrent sign-ups with the same email cannot
    both succeed.

    Args:
        db: Database session.
        data: Validated sign-up payload (passwords already confirmed to match).

    Returns:
        The created user.

    Raises:
        DuplicateEmailError: If the email is already registered.

    Note:
        Does not commit. Caller (session generator) handles commit at request end.
    """
    password_hash = await hash_password_async(data.password)
    user = User(email=data.email, name=data.name, password_hash=password_hash)
    try:
        # Savepoint: a conflict only discards this insert, not earlier work in the request
        async with db.begin_nested():
            db.add(user)
            await db.flush()
    except IntegrityError as e:
        logger.info("Sign-up rejected: email already registered")
        raise DuplicateEmailError() from e
    await db.refresh(user)
    return user


async def sign_in(
    db: AsyncSession,
    settings: Settings,
    data: SignInRequest,
) -> tuple[User, str]:
    """
    Verify credentials and issue an access token.

    Args:
        db: Database session.
        settings: Application settings used to sign the token.
        data: Validated sign-in payload.

    Returns:
        Tuple of (user, access_token).

    Raises:
        InvalidCredentialsError: If the email is unknown or the password is wrong.
            Both cases raise the same error so callers cannot enumerate emails.
    """
    result = await db.execute(select(User).where(User.email == data.email))
    user = result.scalar_one_or_none()

    if user is None:
        logger.info("Sign-in failed: unknown email")
        raise InvalidCredentialsError()

    if not await verify_password_async(user.password_hash, data.password):
        logger.info("Sign-in failed: password mismatch for user %s", user.id)
        raise InvalidCredentialsError()

    token = create_access_token(settings, user.id, user.email)
    return user, token
