"""Sign-up and sign-in endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_settings
from core.config import Settings
from schemas.auth import SignInRequest, SignInResponse, SignUpRequest
from schemas.user import UserPublic, UserResponse
from services import auth_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", response_model=UserResponse, status_code=201)
async def sign_up(
    data: SignUpRequest,
    db: AsyncSession = Depends(get_async_session),
) -> UserResponse:
    """
    Register a new account.

    Returns 403 if the email is already registered.
    """
    user = await auth_service.sign_up(db, data)
    return UserResponse(user=UserPublic.model_validate(user))


@router.post("/signin", response_model=SignInResponse)
async def sign_in(
    data: SignInRequest,
    db: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_settings),
) -> SignInResponse:
    """
    Exchange email and password for a short-lived access token.

    Returns 403 with the same message for an unknown email and a wrong password.
    """
    user, token = await auth_service.sign_in(db, settings, data)
    return SignInResponse(access_token=token, user=UserPublic.model_validate(user))
