"""
FastAPI dependencies for database sessions, upload storage and repositories.

Testing with Dependency Override:
    async def override_get_db():
        yield test_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_upload_storage] = lambda: UploadStorage(tmp_path)
"""

from collections.abc import AsyncIterator
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from shop.main_config import storage_config
from shop.repository import ProductRepository
from shop.storage import UploadStorage

from .database import AsyncDBPool


async def get_db() -> AsyncIterator[AsyncSession]:
    """Request-scoped async session; rolled back if the handler raises."""
    async with AsyncDBPool.get_session() as session:
        yield session


@lru_cache
def get_upload_storage() -> UploadStorage:
    """Shared storage for the configured public disk."""
    return UploadStorage.from_config(storage_config)


def get_product_repository(
    session: AsyncSession = Depends(get_db),
    storage: UploadStorage = Depends(get_upload_storage),
) -> ProductRepository:
    return ProductRepository(session, storage)
