"""Service layer for bookmark CRUD operations."""
import logging
import math
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from models.bookmark import Bookmark
from schemas.bookmark import DEFAULT_PAGE_SIZE, BookmarkCreate, BookmarkUpdate
from services.exceptions import BookmarkForbiddenError, BookmarkNotFoundError

logger = logging.getLogger(__name__)


def _contains_pattern(search: str) -> str:
    """
    Build an ILIKE pattern matching `search` anywhere in a title or description.

    Backslash, % and _ in the user's text are escaped so "100%" only matches
    the literal string. Queries pass escape="\\\\" to match.
    """
    escaped = search.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


@dataclass
class BookmarkPage:
    """One page of bookmarks plus the pagination metadata for the full result."""

    data: list[Bookmark]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        """Number of pages needed for `total` items at `limit` per page."""
        return math.ceil(self.total / self.limit) if self.limit else 0


async def get_owned_bookmark(
    db: AsyncSession,
    user_id: UUID,
    bookmark_id: UUID,
) -> Bookmark:
    """
    Fetch a bookmark and verify the caller owns it.

    This is the single ownership guard used by read, update and delete.
    Existence is checked before ownership, so a missing bookmark is a 404
    and another user's bookmark is a 403.

    Raises:
        BookmarkNotFoundError: If no bookmark has this ID.
        BookmarkForbiddenError: If the bookmark belongs to another user.
    """
    result = await db.execute(
        select(Bookmark)
        .options(selectinload(Bookmark.user))
        .where(Bookmark.id == bookmark_id),
    )
    bookmark = result.scalar_one_or_none()

    if bookmark is None:
        raise BookmarkNotFoundError()

    if bookmark.user_id != user_id:
        logger.info(
            "User %s denied access to bookmark %s owned by another user",
            user_id,
            bookmark_id,
        )
        raise BookmarkForbiddenError()

    return bookmark


async def _refresh_with_owner(db: AsyncSession, bookmark: Bookmark) -> None:
    """Refresh bookmark and eagerly load the owner relationship."""
    await db.refresh(bookmark)
    await db.refresh(bookmark, attribute_names=["user"])


async def create_bookmark(
    db: AsyncSession,
    user_id: UUID,
    data: BookmarkCreate,
) -> Bookmark:
    """
    Create a new bookmark owned by a user.

    Returns:
        The created bookmark with its owner summary loaded.

    Note:
        Does not commit. Caller (session generator) handles commit at request end.
    """
    bookmark = Bookmark(
        user_id=user_id,
        title=data.title,
        description=data.description,
        link=str(data.link) if data.link is not None else None,
    )
    db.add(bookmark)
    await db.flush()
    await _refresh_with_owner(db, bookmark)
    return bookmark


async def get_bookmark(
    db: AsyncSession,
    user_id: UUID,
    bookmark_id: UUID,
) -> Bookmark:
    """Get a bookmark by ID. Raises if missing or owned by another user."""
    return await get_owned_bookmark(db, user_id, bookmark_id)


async def update_bookmark(
    db: AsyncSession,
    user_id: UUID,
    bookmark_id: UUID,
    data: BookmarkUpdate,
) -> Bookmark:
    """
    Update a bookmark with the fields present in the request.

    Fields absent from the request are untouched; fields explicitly set to null
    (description, link) are cleared.

    Note:
        Does not commit. Caller (session generator) handles commit at request end.
    """
    bookmark = await get_owned_bookmark(db, user_id, bookmark_id)

    # mode="json" converts HttpUrl to str
    update_data = data.model_dump(mode="json", exclude_unset=True)
    if not update_data:
        return bookmark

    for field, value in update_data.items():
        setattr(bookmark, field, value)

    await db.flush()
    await _refresh_with_owner(db, bookmark)
    return bookmark


async def delete_bookmark(
    db: AsyncSession,
    user_id: UUID,
    bookmark_id: UUID,
) -> None:
    """
    Delete a bookmark. Raises if missing or owned by another user.

    Note:
        Does not commit. Caller (session generator) handles commit at request end.
    """
    bookmark = await get_owned_bookmark(db, user_id, bookmark_id)
    await db.delete(bookmark)
    await db.flush()


async def search_bookmarks(
    db: AsyncSession,
    user_id: UUID,
    search: str | None = None,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
) -> BookmarkPage:
    """
    List a user's bookmarks with optional text search and page-based pagination.

    Args:
        db: Database session.
        user_id: User whose bookmarks are listed. Other users' rows are never included.
        search: Case-insensitive substring matched against title OR description.
        page: 1-based page number.
        limit: Page size. Bounds (1-100) are enforced by query validation.

    Returns:
        BookmarkPage whose total counts every match, not just the returned page.
    """
    base_query = select(Bookmark).where(Bookmark.user_id == user_id)

    if search:
        search_pattern = _contains_pattern(search)
        base_query = base_query.where(
            or_(
                Bookmark.title.ilike(search_pattern, escape="\\"),
                Bookmark.description.ilike(search_pattern, escape="\\"),
            ),
        )

    count_query = select(func.count()).select_from(base_query.subquery())
    total = (await db.execute(count_query)).scalar_one()

    offset = (page - 1) * limit
    if offset >= total:
        return BookmarkPage(data=[], total=total, page=page, limit=limit)

    # UUIDv7 ids are time-ordered, so id breaks created_at ties by insertion order
    result = await db.execute(
        base_query
        .options(selectinload(Bookmark.user))
        .order_by(Bookmark.created_at.desc(), Bookmark.id.desc())
        .offset(offset)
        .limit(limit),
    )
    bookmarks = list(result.scalars().all())

    return BookmarkPage(data=bookmarks, total=total, page=page, limit=limit)
