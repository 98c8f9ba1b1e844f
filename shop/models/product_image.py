"""
ProductImage model for a product's gallery thumbnails.
"""

from sqlalchemy import Column, ForeignKey, Integer, String

from .base import Base


class ProductImage(Base):
    """
    Image attached to a product.

    Attributes:
        id: Unique identifier for the image
        product_id: Owning product
        src: Stored path of the file on the public disk
    """

    __tablename__ = "product_images"

    id = Column(Integer, primary_key=True, autoincrement=True)
    product_id = Column(
        Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True
    )
    src = Column(String(500), nullable=False, index=True)

    def __repr__(self):
        return f"<ProductImage(id={self.id}, product_id={self.product_id}, src='{self.src}')>"
