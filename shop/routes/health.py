"""Health check endpoints for monitoring."""
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from shop.core.dependencies import get_db
from shop.main_config import fastapi_config

router = APIRouter(
    prefix="/api",
    tags=["health"],
)


@router.get("/")
async def root():
    """API root endpoint."""
    return {
        "message": fastapi_config.title,
        "version": fastapi_config.version,
        "docs": fastapi_config.docs_url,
    }


@router.get("/health")
async def health_check(session: AsyncSession = Depends(get_db)):
    """Health check endpoint; also pings the database."""
    await session.execute(text("SELECT 1"))
    return {"status": "healthy"}
