"""
Product model for the shop catalogue.
"""

from sqlalchemy import Boolean, Column, Integer, Numeric, String, Text

from .base import Base, TimestampMixin

# Columns a params map may never write directly.
GUARDED_COLUMNS = frozenset({"id", "created_at", "updated_at"})


class Product(Base, TimestampMixin):
    """
    Product sold in the shop.

    Categories are linked through the ``category_product`` table and images
    live in ``product_images``; both are queried explicitly by
    ProductRepository rather than through ORM relationships.

    Attributes:
        id: Unique identifier for the product
        sku: Stock keeping unit, unique
        name: Display name
        slug: URL slug, unique
        description: Long description
        cover: Stored path of the cover image on the public disk
        quantity: Units in stock
        price: Regular price
        sale_price: Discounted price, if any
        status: Whether the product is published
        length, width, height, distance_unit: Parcel dimensions
        weight, mass_unit: Parcel weight
    """

    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    sku = Column(String(255), nullable=True, unique=True)
    name = Column(String(255), nullable=False, index=True)
    slug = Column(String(255), nullable=True, unique=True)
    description = Column(Text, nullable=True)
    cover = Column(String(500), nullable=True)
    quantity = Column(Integer, nullable=False, default=0)
    price = Column(Numeric(10, 2), nullable=False, default=0)
    sale_price = Column(Numeric(10, 2), nullable=True)
    status = Column(Boolean, nullable=False, default=False)
    length = Column(Numeric(8, 2), nullable=True)
    width = Column(Numeric(8, 2), nullable=True)
    height = Column(Numeric(8, 2), nullable=True)
    distance_unit = Column(String(10), nullable=True)
    weight = Column(Numeric(8, 2), nullable=True, default=0)
    mass_unit = Column(String(10), nullable=True)

    @classmethod
    def fillable(cls) -> frozenset[str]:
        """Column names a create/update params map may set."""
        return frozenset(column.key for column in cls.__table__.columns) - GUARDED_COLUMNS

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, sku='{self.sku}', name='{self.name}')>"

    def to_summary_dict(self) -> dict:
        """Convert product to a summary dictionary (for list views)."""
        return {
            "id": self.id,
            "sku": self.sku,
            "name": self.name,
            "slug": self.slug,
            "price": float(self.price) if self.price is not None else None,
            "status": self.status,
        }
