"""Pydantic schemas for bookmark endpoints."""
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_validator

from core.config import get_settings
from schemas.user import UserSummary

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
# Keeps the row offset, (page - 1) * limit, inside a signed 64-bit integer
MAX_PAGE = (2**63 - 1) // MAX_PAGE_SIZE


def validate_title(title: str | None) -> str:
    """Validate that a title is present, non-blank, and within the length limit."""
    if title is None:
        raise ValueError("Title cannot be null")
    title = title.strip()
    if not title:
        raise ValueError("Title cannot be empty")
    settings = get_settings()
    if len(title) > settings.max_title_length:
        raise ValueError(
            f"Title exceeds maximum length of {settings.max_title_length:,} characters "
            f"(got {len(title):,} characters).",
        )
    return title


def validate_description_length(description: str | None) -> str | None:
    """Validate that description doesn't exceed maximum length."""
    settings = get_settings()
    if description is not None and len(description) > settings.max_description_length:
        max_len = settings.max_description_length
        raise ValueError(
            f"Description exceeds maximum length of {max_len:,} characters "
            f"(got {len(description):,} characters).",
        )
    return description


class BookmarkCreate(BaseModel):
    """Schema for creating a new bookmark."""

    title: str
    description: str | None = None
    # HttpUrl normalizes root domains with trailing slash (example.com -> example.com/)
    # but preserves paths as-is (example.com/page stays example.com/page)
    link: HttpUrl | None = None

    @field_validator("title")
    @classmethod
    def check_title(cls, v: str) -> str:
        """Validate title."""
        return validate_title(v)

    @field_validator("description")
    @classmethod
    def check_description_length(cls, v: str | None) -> str | None:
        """Validate description length."""
        return validate_description_length(v)


class BookmarkUpdate(BaseModel):
    """
    Schema for updating an existing bookmark.

    Omitted fields are left unchanged. An explicit null clears description or
    link; title cannot be cleared.
    """

    # See BookmarkCreate for HttpUrl normalization behavior
    title: str | None = None
    description: str | None = None
    link: HttpUrl | None = None

    @field_validator("title")
    @classmethod
    def check_title(cls, v: str | None) -> str:
        """Validate title if provided (validators don't run on omitted fields)."""
        return validate_title(v)

    @field_validator("description")
    @classmethod
    def check_description_length(cls, v: str | None) -> str | None:
        """Validate description length."""
        return validate_description_length(v)


class BookmarkResponse(BaseModel):
    """Schema for a bookmark with its owner summary attached."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    description: str | None
    link: str | None
    user_id: UUID
    created_at: datetime
    updated_at: datetime
    user: UserSummary


class BookmarkListResponse(BaseModel):
    """Schema for paginated bookmark list responses."""

    data: list[BookmarkResponse]
    total: int  # Total count of bookmarks matching the query (before pagination)
    page: int
    limit: int
    total_pages: int


class BookmarkDeleteResponse(BaseModel):
    """Confirmation returned after a bookmark is deleted."""

    message: str = Field(default="Bookmark deleted successfully")
