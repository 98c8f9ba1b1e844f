"""Shared fixtures: in-memory SQLite database, upload storage, repository, API client."""

import io
from collections.abc import AsyncIterator, Callable

import pytest
from fastapi import UploadFile
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from shop.core.database import configure_sqlite
from shop.models import Base, Category
from shop.repository import ProductRepository
from shop.storage import UploadStorage


@pytest.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    """Fresh in-memory database per test, foreign keys enforced."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    configure_sqlite(test_engine)
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield test_engine

    await test_engine.dispose()


@pytest.fixture
async def session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    maker = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
    async with maker() as db_session:
        yield db_session


@pytest.fixture
def storage(tmp_path) -> UploadStorage:
    return UploadStorage(tmp_path / "public", public_url="/storage")


@pytest.fixture
def repo(session: AsyncSession, storage: UploadStorage) -> ProductRepository:
    return ProductRepository(session, storage, timezone="UTC", products_folder="products")


@pytest.fixture
def make_upload() -> Callable[..., UploadFile]:
    """Build an uploaded file the way FastAPI hands it to a route."""

    def _make(filename: str = "photo.jpg", content: bytes = b"\xff\xd8fake-jpeg") -> UploadFile:
        return UploadFile(file=io.BytesIO(content), filename=filename)

    return _make


@pytest.fixture
async def categories(session: AsyncSession) -> list[Category]:
    """Three committed categories: shoes, shirts, hats."""
    rows = [
        Category(name="Shoes", slug="shoes", status=True),
        Category(name="Shirts", slug="shirts", status=True),
        Category(name="Hats", slug="hats", status=True),
    ]
    session.add_all(rows)
    await session.commit()
    return rows


@pytest.fixture
async def client(session: AsyncSession, storage: UploadStorage) -> AsyncIterator[AsyncClient]:
    """API client bound to the test session and storage."""
    from shop.core.dependencies import get_db, get_upload_storage
    from shop.main import app

    async def override_get_db() -> AsyncIterator[AsyncSession]:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_upload_storage] = lambda: storage

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as test_client:
        yield test_client

    app.dependency_overrides.clear()
