"""Repository layer for database operations."""

from .image_repository import ProductImageRepository
from .product_repository import ProductRef, ProductRepository
from .product_search import ProductSearch
from .transformations import ProductDetail, transform_product

__all__ = [
    "ProductDetail",
    "ProductImageRepository",
    "ProductRef",
    "ProductRepository",
    "ProductSearch",
    "transform_product",
]
