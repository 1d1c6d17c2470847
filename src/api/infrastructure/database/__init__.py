"""Database infrastructure - shared async SQLAlchemy primitives."""

from infrastructure.database.models import Base, TimestampMixin

__all__ = [
    "Base",
    "TimestampMixin",
]
