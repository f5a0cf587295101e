"""Pydantic schemas for user endpoints."""
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


def normalize_email(email: str) -> str:
    """Trim and lower-case an email so uniqueness and lookup are case-insensitive."""
    return email.strip().lower()


def validate_name(name: str | None) -> str | None:
    """Strip a display name and reject one that is only whitespace."""
    if name is None:
        return None
    name = name.strip()
    if not name:
        raise ValueError("Name cannot be empty")
    return name


class UserSummary(BaseModel):
    """Owner summary embedded in bookmark responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    name: str


class UserPublic(UserSummary):
    """
    Public user fields.

    Deliberately has no password field: every user response is built from this
    schema, so the stored hash can never be serialized.
    """

    created_at: datetime
    updated_at: datetime


class UserResponse(BaseModel):
    """Response envelope for a single user."""

    user: UserPublic


class UserUpdate(BaseModel):
    """
    Schema for partial profile edits.

    Only fields present in the request are applied. Null values are ignored
    (email, name and password cannot be cleared).
    """

    email: EmailStr | None = None
    name: str | None = Field(default=None, min_length=1, max_length=255)
    password: str | None = Field(default=None, min_length=1)

    @field_validator("email")
    @classmethod
    def normalize(cls, v: str | None) -> str | None:
        """Normalize email if provided."""
        if v is None:
            return None
        return normalize_email(v)

    @field_validator("name")
    @classmethod
    def check_name_not_blank(cls, v: str | None) -> str | None:
        """Reject whitespace-only names if provided."""
        return validate_name(v)
