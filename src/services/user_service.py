"""Service layer for user profile operations."""
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.passwords import hash_password_async
from models.user import User
from schemas.user import UserUpdate
from services.exceptions import DuplicateEmailError, UserNotFoundError


async def get_user(db: AsyncSession, user_id: UUID) -> User:
    """
    Get a user by ID.

    Raises:
        UserNotFoundError: If no user has this ID.
    """
    user = await db.get(User, user_id)
    if user is None:
        raise UserNotFoundError()
    return user


async def edit_user(db: AsyncSession, user_id: UUID, data: UserUpdate) -> User:
    """
    Apply a partial profile edit.

    Only fields present (and non-null) in the request are changed. A new
    password is re-hashed before storage.

    Raises:
        UserNotFoundError: If no user has this ID.
        DuplicateEmailError: If the new email belongs to another account.

    Note:
        Does not commit. Caller (session generator) handles commit at request end.
    """
    user = await get_user(db, user_id)

    update_data = data.model_dump(exclude_unset=True, exclude_none=True)
    password = update_data.pop("password", None)
    if password is not None:
        update_data["password_hash"] = await hash_password_async(password)

    if not update_data:
        return user

    try:
        async with db.begin_nested():
            for field, value in update_data.items():
                setattr(user, field, value)
            await db.flush()
    except IntegrityError as e:
        raise DuplicateEmailError() from e
    await db.refresh(user)
    return user
