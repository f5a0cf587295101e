"""Liveness endpoint with a database round-trip."""
import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from db.session import get_async_session

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Overall status plus the database status it was derived from."""

    status: str
    database: str


async def database_reachable(db: AsyncSession) -> bool:
    """Return True if a trivial query succeeds on this session."""
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Database health check failed")
        return False
    return True


@router.get("/health", response_model=HealthResponse)
async def health_check(db: AsyncSession = Depends(get_async_session)) -> HealthResponse:
    """Report "healthy", or "degraded" when the database cannot be reached. No auth."""
    if await database_reachable(db):
        return HealthResponse(status="healthy", database="healthy")
    return HealthResponse(status="degraded", database="unhealthy")
