"""
SQLAlchemy models for the shop catalogue.
"""

from .base import Base
from .category import Category, category_product
from .product import Product
from .product_image import ProductImage

__all__: list[str] = ["Base", "Category", "Product", "ProductImage", "category_product"]
