"""Product image repository for database operations."""

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shop.core.base_repository import BaseRepository
from shop.models.product_image import ProductImage


class ProductImageRepository(BaseRepository[ProductImage, int]):
    """Repository for the ``product_images`` table."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(ProductImage, session)

    async def find_by_product(self, product_id: int) -> list[ProductImage]:
        """All images of a product, oldest first."""
        result = await self.session.execute(
            select(self.model).where(self.model.product_id == product_id).order_by(self.model.id)
        )
        return list(result.scalars().all())

    async def add_many(self, product_id: int, sources: Sequence[str]) -> list[ProductImage]:
        """Insert one row per stored path for the product."""
        images = [self.model(product_id=product_id, src=src) for src in sources]
        self.session.add_all(images)
        await self.session.flush()
        return images

    async def delete_by_src(self, src: str) -> int:
        """Delete every image row stored under ``src``."""
        return await self.delete_where(src=src)
