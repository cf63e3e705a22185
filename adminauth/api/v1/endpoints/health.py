"""Public health check."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from adminauth.api.v1.deps import get_db
from adminauth.schemas.health import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health(db: AsyncSession = Depends(get_db)) -> HealthResponse:
    """Report whether the database answers."""
    try:
        await db.execute(select(1))
    except Exception as e:
        logger.error("Health check DB failure: %s", e)
        return HealthResponse(status="degraded", db=False)
    return HealthResponse(status="ok", db=True)
