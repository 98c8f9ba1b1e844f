"""Read-side transformation of Product rows."""

from pydantic import BaseModel

from shop.models.product import Product
from shop.storage import UploadStorage


class ProductDetail(BaseModel):
    """Detached view of a product, with ``cover`` as a public URL."""

    id: int
    sku: str | None = None
    name: str
    slug: str | None = None
    description: str | None = None
    cover: str | None = None
    quantity: int = 0
    price: float
    sale_price: float | None = None
    status: bool = False
    length: float | None = None
    width: float | None = None
    height: float | None = None
    distance_unit: str | None = None
    weight: float | None = None
    mass_unit: str | None = None

    model_config = {"from_attributes": True}


def transform_product(product: Product, storage: UploadStorage) -> ProductDetail:
    detail = ProductDetail.model_validate(product)
    if product.cover:
        detail.cover = storage.url(product.cover)
    return detail
