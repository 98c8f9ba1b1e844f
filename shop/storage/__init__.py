"""File storage for product uploads."""

from .uploads import UploadStorage

__all__ = ["UploadStorage"]
