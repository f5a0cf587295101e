"""Pydantic schemas for sign-up and sign-in endpoints."""
from pydantic import AliasChoices, BaseModel, EmailStr, Field, field_validator, model_validator

from schemas.user import UserPublic, normalize_email, validate_name


class SignUpRequest(BaseModel):
    """
    Schema for registering a new account.

    confirm_password must equal password; a mismatch is a validation error and
    never reaches the service layer. Accepts `confirmPassword` for clients
    that send camelCase.
    """

    email: EmailStr
    password: str = Field(..., min_length=1)
    confirm_password: str = Field(
        ...,
        validation_alias=AliasChoices("confirm_password", "confirmPassword"),
    )
    name: str = Field(..., min_length=1, max_length=255)

    @field_validator("email")
    @classmethod
    def normalize(cls, v: str) -> str:
        """Normalize email."""
        return normalize_email(v)

    @field_validator("name")
    @classmethod
    def check_name_not_blank(cls, v: str) -> str:
        """Reject whitespace-only names."""
        return validate_name(v)

    @model_validator(mode="after")
    def check_passwords_match(self) -> "SignUpRequest":
        """Ensure confirm_password matches password."""
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class SignInRequest(BaseModel):
    """Schema for signing in with email and password."""

    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def normalize(cls, v: str) -> str:
        """Normalize email."""
        return normalize_email(v)


class SignInResponse(BaseModel):
    """
    Response for a successful sign-in.

    IMPORTANT: access_token is short-lived (JWT_EXPIRE_MINUTES) and there is no
    refresh token. Clients sign in again after it expires.
    """

    access_token: str
    token_type: str = "bearer"
    user: UserPublic
