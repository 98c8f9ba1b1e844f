"""
Application lifespan management for FastAPI.

Startup opens the database pool (creating the schema when running on
SQLite) and makes sure the upload storage root exists; shutdown disposes
the pool.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

import structlog
from fastapi import FastAPI

from shop.core.database import AsyncDBPool
from shop.main_config import database_config, storage_config
from shop.models import Base

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def app_lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    await AsyncDBPool.init(database_config)

    if database_config.is_sqlite:
        # Local runs without migrations
        await AsyncDBPool.create_all(Base.metadata)

    Path(storage_config.root).mkdir(parents=True, exist_ok=True)
    logger.info("app_started", storage_root=storage_config.root)

    yield

    await AsyncDBPool.dispose()
    logger.info("app_stopped")
