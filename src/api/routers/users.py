"""User profile endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_current_user
from models.user import User
from schemas.user import UserPublic, UserResponse, UserUpdate
from services import user_service


router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)) -> UserResponse:
    """Get the current authenticated user's profile."""
    return UserResponse(user=UserPublic.model_validate(current_user))


@router.patch("/edit", response_model=UserResponse)
async def edit_me(
    data: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> UserResponse:
    """
    Update the current user's email, name, or password.

    Only fields present in the body are changed. Returns 403 if the new email
    belongs to another account.
    """
    user = await user_service.edit_user(db, current_user.id, data)
    return UserResponse(user=UserPublic.model_validate(user))
