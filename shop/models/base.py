"""
Base declarative class and mixins for the shop's SQLAlchemy models.

Connection handling lives in shop.core.database.
"""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime
from sqlalchemy.orm import DeclarativeBase


def utc_now() -> datetime:
    """Current UTC time, timezone aware."""
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Base class for all shop ORM models (Product, Category, ProductImage)."""


class TimestampMixin:
    """Adds created_at / updated_at columns maintained on insert and update."""

    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)
