"""
Generic async repository for SQLAlchemy models.

This is the persistence port the domain repositories build on. It covers:
    - load: get_by_id, find_one_or_fail
    - save: create, update
    - delete by id: delete
    - find where: get_by, find_one_by_or_fail, delete_where
    - listing with ordering and column projection: get_all

Write methods flush but never commit or roll back; the caller owns the
transaction. Database errors propagate unchanged, so a domain repository can
run a write inside ``session.begin_nested()`` and translate the error without
expiring the caller's objects.

Usage:
    class CategoryRepository(BaseRepository[Category, int]):
        def __init__(self, session: AsyncSession) -> None:
            super().__init__(Category, session)

    async with AsyncDBPool.get_session() as session:
        repo = CategoryRepository(session)
        category = await repo.create(name="Shoes", slug="shoes")
        await session.commit()
"""

from abc import ABC
from collections.abc import Sequence
from typing import Any, Generic, Literal, TypeVar

from sqlalchemy import delete, select, update
from sqlalchemy.exc import NoResultFound
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import load_only

__all__ = ["BaseRepository", "SortDirection"]

ModelType = TypeVar("ModelType")
IDType = TypeVar("IDType", int, str)

SortDirection = Literal["asc", "desc"]


class BaseRepository(Generic[ModelType, IDType], ABC):
    """Base repository with async CRUD operations for SQLAlchemy models."""

    def __init__(self, model: type[ModelType], session: AsyncSession) -> None:
        self.model = model
        self.session = session

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def column_names(self) -> set[str]:
        """Names of the mapped table columns."""
        return {column.key for column in self.model.__table__.columns}

    def _column(self, name: str) -> Any:
        if name not in self.column_names:
            msg = f"{self.model.__name__} has no column '{name}'"
            raise ValueError(msg)
        return getattr(self.model, name)

    def _where(self, query: Any, filters: dict[str, Any]) -> Any:
        for field, value in filters.items():
            query = query.where(self._column(field) == value)
        return query

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_by_id(self, id: IDType) -> ModelType | None:
        """Get record by primary key, or None."""
        result = await self.session.execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()

    async def find_one_or_fail(self, id: IDType) -> ModelType:
        """Get record by primary key.

        Raises:
            NoResultFound: No row has this primary key
        """
        instance = await self.get_by_id(id)
        if instance is None:
            msg = f"No {self.model.__name__} found with id {id}"
            raise NoResultFound(msg)
        return instance

    async def get_by(self, **filters: Any) -> ModelType | None:
        """Get the first record matching all filters, or None."""
        query = self._where(select(self.model), filters).order_by(self.model.id).limit(1)
        result = await self.session.execute(query)
        return result.scalars().first()

    async def find_one_by_or_fail(self, **filters: Any) -> ModelType:
        """Get the first record matching all filters.

        Raises:
            NoResultFound: Nothing matches
        """
        instance = await self.get_by(**filters)
        if instance is None:
            msg = f"No {self.model.__name__} found matching {filters}"
            raise NoResultFound(msg)
        return instance

    async def get_all(
        self,
        columns: Sequence[str] = ("*",),
        order_by: str = "id",
        sort: SortDirection = "desc",
        limit: int | None = None,
        offset: int | None = None,
    ) -> Sequence[ModelType]:
        """Get all records ordered by one column.

        Args:
            columns: Columns to load; ``("*",)`` loads every column.
                The primary key is always loaded.
            order_by: Column to order by
            sort: "asc" or "desc"
            limit: Max records
            offset: Records to skip
        """
        if sort not in ("asc", "desc"):
            msg = f"Sort direction must be 'asc' or 'desc', got '{sort}'"
            raise ValueError(msg)

        order_column = self._column(order_by)
        query = select(self.model).order_by(
            order_column.desc() if sort == "desc" else order_column.asc()
        )

        if list(columns) != ["*"]:
            query = query.options(load_only(*(self._column(name) for name in columns)))
        if offset:
            query = query.offset(offset)
        if limit:
            query = query.limit(limit)

        result = await self.session.execute(query)
        return result.scalars().all()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create(self, **kwargs: Any) -> ModelType:
        """Insert a new record and return it with generated fields loaded."""
        instance = self.model(**kwargs)
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def update(self, id: IDType, **kwargs: Any) -> bool:
        """Update record by ID.

        Returns:
            True if a row was updated
        """
        result = await self.session.execute(
            update(self.model)
            .where(self.model.id == id)
            .values(**kwargs)
            .execution_options(synchronize_session="fetch")
        )
        await self.session.flush()
        return result.rowcount > 0

    async def delete(self, id: IDType) -> bool:
        """Delete record by ID.

        Returns:
            True if deleted
        """
        return await self.delete_where(id=id) > 0

    async def delete_where(self, **filters: Any) -> int:
        """Delete every record matching all filters.

        Returns:
            Number deleted
        """
        result = await self.session.execute(
            self._where(delete(self.model), filters).execution_options(
                synchronize_session="fetch"
            )
        )
        await self.session.flush()
        return result.rowcount
