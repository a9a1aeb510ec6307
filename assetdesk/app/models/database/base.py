# File: app/models/database/base.py

"""Base configuration and utilities for SQLAlchemy models.

This module provides the foundational setup for all database models, including:
- Base class configuration
- Common model mixins
- Shared column types
- Audit field implementations
"""

from datetime import datetime, timezone
from typing import Optional, Type
from enum import IntEnum
from sqlalchemy import Boolean, DateTime, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

class IntEnumType(TypeDecorator):
    """Store an ``IntEnum`` as its integer value.

    Keeps SQL ordering identical to the enum's numeric order.
    """

    impl = Integer
    cache_ok = True

    def __init__(self, enum_cls: Type[IntEnum], *args, **kwargs):
        self.enum_cls = enum_cls
        super().__init__(*args, **kwargs)

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return int(self.enum_cls(value))

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return self.enum_cls(value)

class BaseMixin:
    """Mixin class for common model functionality."""

    # Add soft delete capability
    is_deleted: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
        index=True
    )
    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True
    )

    def soft_delete(self) -> None:
        """Mark record as deleted without removing from database."""
        self.is_deleted = True
        self.deleted_at = utcnow()

    @classmethod
    def not_deleted(cls):
        """Query filter for non-deleted records."""
        return cls.is_deleted.is_(False)

class Base(BaseMixin, DeclarativeBase):
    """Enhanced base class for all database models."""

    id: Mapped[int] = mapped_column(primary_key=True)
    # Python-side defaults so values are on the instance right after flush
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False
    )
    created_by: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    last_modified_by: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
