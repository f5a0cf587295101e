"""Database engine and per-request session handling."""
import logging
from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from core.config import Settings, get_settings

logger = logging.getLogger(__name__)


def build_engine(settings: Settings, **kwargs: object) -> AsyncEngine:
    """
    Create the async engine for the configured database.

    Extra keyword arguments are passed through to create_async_engine (the
    migration runner uses this to swap in a NullPool).
    """
    kwargs.setdefault("pool_pre_ping", True)
    return create_async_engine(settings.database_url, echo=settings.db_echo, **kwargs)


engine = build_engine(get_settings())

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """
    Yield one session per request.

    Services only flush; the request's changes are committed here once the
    handler returns. Any exception, including a service error that becomes a
    4xx response, rolls back everything the request wrote.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            logger.debug("Rolling back request transaction")
            await session.rollback()
            raise
