"""
Category model and the product/category association table.
"""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Table, Text

from .base import Base, TimestampMixin

category_product = Table(
    "category_product",
    Base.metadata,
    Column("category_id", Integer, ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True),
    Column("product_id", Integer, ForeignKey("products.id", ondelete="CASCADE"), primary_key=True),
)


class Category(Base, TimestampMixin):
    """
    Catalogue category. Categories nest through ``parent_id``.
    """

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True)
    description = Column(Text, nullable=True)
    cover = Column(String(500), nullable=True)
    status = Column(Boolean, nullable=False, default=False)
    parent_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, slug='{self.slug}')>"
