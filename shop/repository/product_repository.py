"""Product repository for database operations."""

from collections.abc import AsyncIterator, Iterable, Mapping, Sequence
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo

import structlog
from fastapi import UploadFile
from sqlalchemy import delete, insert, select
from sqlalchemy.exc import NoResultFound, StatementError
from sqlalchemy.ext.asyncio import AsyncSession

from shop.core.base_repository import BaseRepository, SortDirection
from shop.core.exceptions import ProductInvalidArgumentError, ProductNotFoundError
from shop.main_config import storage_config
from shop.models.category import Category, category_product
from shop.models.product import Product
from shop.models.product_image import ProductImage
from shop.storage import UploadStorage

from .image_repository import ProductImageRepository
from .product_search import ProductSearch
from .transformations import ProductDetail, transform_product

logger = structlog.get_logger(__name__)

# Anything that identifies a product row.
ProductRef = Product | ProductDetail


def _invalid_argument(exc: StatementError) -> ProductInvalidArgumentError:
    message = str(exc.orig)
    return ProductInvalidArgumentError(message=message, detail={"database_error": message})


class ProductRepository(BaseRepository[Product, int]):
    """Repository for Product entities, their categories and their images.

    A product may be bound at construction; ``get_categories``,
    ``sync_categories`` and ``find_product_images`` work on that product.

    Usage:
        repo = ProductRepository(session, storage)
        product = await repo.create_product({"name": "Shoe", "price": 10, "image": files})

        bound = ProductRepository(session, storage, product=product)
        await bound.sync_categories([1, 2])
        await session.commit()
    """

    def __init__(
        self,
        session: AsyncSession,
        storage: UploadStorage,
        product: ProductRef | None = None,
        search: ProductSearch | None = None,
        timezone: str | None = None,
        products_folder: str | None = None,
    ) -> None:
        super().__init__(Product, session)
        self.storage = storage
        self.product = product
        self.images = ProductImageRepository(session)
        self.searcher = search or ProductSearch(session)
        self.timezone = ZoneInfo(timezone or storage_config.timezone)
        self.products_folder = products_folder or storage_config.products_folder

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    async def list_products(
        self,
        order: str = "id",
        sort: SortDirection = "desc",
        columns: Sequence[str] = ("*",),
    ) -> Sequence[Product]:
        """List all the products, ordered by ``order`` in ``sort`` direction."""
        try:
            return await self.get_all(columns=columns, order_by=order, sort=sort)
        except ValueError as e:
            raise ProductInvalidArgumentError(message=str(e)) from e

    async def create_product(self, params: Mapping[str, Any]) -> Product:
        """Create a product, storing any uploaded ``image`` files with it.

        Raises:
            ProductInvalidArgumentError: The database rejected the data
        """
        async with self._write() as stored:
            product = await self.create(**self._fillable(params))
            images = params.get("image")
            if isinstance(images, list):
                await self._save_images(images, product, stored)

        logger.info("product_created", product_id=product.id, sku=product.sku)
        return product

    async def update_product(self, params: Mapping[str, Any], id: int) -> bool:
        """Update a product's fields and append any uploaded ``image`` files.

        Raises:
            ProductNotFoundError: No product has this id (nothing is written)
            ProductInvalidArgumentError: The database rejected the data
        """
        product = await self._find_or_raise(id)

        fields = self._fillable(params)
        async with self._write() as stored:
            images = params.get("image")
            if isinstance(images, list):
                await self._save_images(images, product, stored)

            updated = await self.update(id, **fields) if fields else True

        logger.info("product_updated", product_id=id, fields=sorted(fields))
        return updated

    async def find_product_by_id(self, id: int) -> ProductDetail:
        """Find a product by id.

        Raises:
            ProductNotFoundError: No product has this id
        """
        return transform_product(await self._find_or_raise(id), self.storage)

    async def find_product_by_slug(self, slug: Mapping[str, Any]) -> ProductDetail:
        """Find the first product matching a filter such as ``{"slug": "shoe"}``.

        Raises:
            ProductNotFoundError: Nothing matches
            ProductInvalidArgumentError: The filter names an unknown column
        """
        try:
            product = await self.find_one_by_or_fail(**slug)
        except NoResultFound as e:
            raise ProductNotFoundError(message=str(e), detail={"filter": dict(slug)}) from e
        except ValueError as e:
            raise ProductInvalidArgumentError(message=str(e)) from e
        return transform_product(product, self.storage)

    async def delete_product(self, product: ProductRef) -> bool:
        deleted = await self.delete(product.id)
        logger.info("product_deleted", product_id=product.id, deleted=deleted)
        return deleted

    async def search_product(self, text: str) -> list[Product]:
        return await self.searcher.search(text)

    async def delete_file(self, file: Mapping[str, Any], disk: str | None = None) -> bool:
        """Clear the cover of ``file["product"]``.

        Only the column is cleared; the stored file is left on ``disk``.
        """
        return await self.update(file["product"], cover=None)

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    async def detach_categories(self, product: ProductRef) -> int:
        """Remove every category association of the product.

        Returns:
            Number of associations removed
        """
        result = await self.session.execute(
            delete(category_product).where(category_product.c.product_id == product.id)
        )
        await self.session.flush()
        return result.rowcount

    async def get_categories(self) -> list[Category]:
        """Categories associated with the bound product."""
        result = await self.session.execute(
            select(Category)
            .join(category_product, category_product.c.category_id == Category.id)
            .where(category_product.c.product_id == self._bound_id())
            .order_by(Category.id)
        )
        return list(result.scalars().all())

    async def sync_categories(self, ids: Iterable[int]) -> dict[str, list[int]]:
        """Make the bound product's categories exactly ``ids``.

        Returns:
            ``{"attached": [...], "detached": [...]}``

        Raises:
            ProductInvalidArgumentError: An id is not an existing category
        """
        product_id = self._bound_id()
        wanted = list(dict.fromkeys(int(category_id) for category_id in ids))

        result = await self.session.execute(
            select(category_product.c.category_id).where(category_product.c.product_id == product_id)
        )
        current = set(result.scalars().all())

        detached = sorted(current.difference(wanted))
        attached = [category_id for category_id in wanted if category_id not in current]

        async with self._write():
            if detached:
                await self.session.execute(
                    delete(category_product).where(
                        category_product.c.product_id == product_id,
                        category_product.c.category_id.in_(detached),
                    )
                )
            if attached:
                await self.session.execute(
                    insert(category_product),
                    [{"product_id": product_id, "category_id": category_id} for category_id in attached],
                )
            await self.session.flush()

        logger.info(
            "product_categories_synced", product_id=product_id, attached=attached, detached=detached
        )
        return {"attached": attached, "detached": detached}

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    async def find_product_images(self) -> list[ProductImage]:
        """Images of the bound product."""
        return await self.images.find_by_product(self._bound_id())

    async def delete_thumb(self, src: str) -> bool:
        """Delete the image rows stored under ``src``."""
        deleted = await self.images.delete_by_src(src)
        logger.info("product_thumb_deleted", src=src, rows=deleted)
        return deleted > 0

    def image_folder(self) -> str:
        """Folder for one batch of uploads: ``products/<unix seconds>``."""
        timestamp = int(datetime.now(self.timezone).timestamp())
        return f"{self.products_folder}/{timestamp}"

    async def _save_images(
        self, files: Iterable[UploadFile], product: Product, stored: list[str]
    ) -> list[ProductImage]:
        folder = self.image_folder()
        for file in files:
            stored.append(await self.storage.store(file, folder))
        images = await self.images.add_many(product.id, stored)
        logger.info("product_images_saved", product_id=product.id, folder=folder, count=len(images))
        return images

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @asynccontextmanager
    async def _write(self) -> AsyncIterator[list[str]]:
        """Run a write inside a SAVEPOINT.

        Yields the list of paths stored during the write; if the write fails
        those files are deleted, the SAVEPOINT is rolled back and database
        errors become ``ProductInvalidArgumentError``. Objects loaded before
        the write stay usable.
        """
        stored: list[str] = []
        try:
            async with self.session.begin_nested():
                yield stored
        except StatementError as e:
            await self._discard(stored)
            raise _invalid_argument(e) from e
        except Exception:
            await self._discard(stored)
            raise

    async def _discard(self, paths: list[str]) -> None:
        if not paths:
            return
        for path in paths:
            await self.storage.delete(path)
        logger.info("product_uploads_discarded", paths=paths)

    async def _find_or_raise(self, id: int) -> Product:
        try:
            return await self.find_one_or_fail(id)
        except NoResultFound as e:
            raise ProductNotFoundError(message=str(e), detail={"product_id": id}) from e

    def _bound_id(self) -> int:
        if self.product is None:
            raise ProductInvalidArgumentError(message="No product is bound to the repository")
        return self.product.id

    @staticmethod
    def _fillable(params: Mapping[str, Any]) -> dict[str, Any]:
        fillable = Product.fillable()
        return {key: value for key, value in params.items() if key in fillable}
