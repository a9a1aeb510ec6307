# File: app/models/database/user.py

"""User model for staff members and administrators.

Users are identified by a generated username and a staff code derived from
their id. Every user belongs to exactly one location; admins only manage
users, assets and assignments of their own location.
"""

from datetime import date
from typing import Optional
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Boolean, Date, Index
from app.models.enums import Gender, Location, Role
from .base import Base, IntEnumType

class User(Base):
    """Staff or admin account."""
    __tablename__ = 'users'

    staff_code: Mapped[Optional[str]] = mapped_column(
        String(10),
        unique=True,
        nullable=True,
        index=True
    )
    first_name: Mapped[str] = mapped_column(String(50), nullable=False)
    last_name: Mapped[str] = mapped_column(String(50), nullable=False)
    username: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        nullable=False,
        index=True
    )
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    date_of_birth: Mapped[date] = mapped_column(Date, nullable=False)
    joined_date: Mapped[date] = mapped_column(Date, nullable=False)
    gender: Mapped[Gender] = mapped_column(IntEnumType(Gender), nullable=False)
    role: Mapped[Role] = mapped_column(
        IntEnumType(Role),
        default=Role.STAFF,
        nullable=False
    )
    location: Mapped[Location] = mapped_column(IntEnumType(Location), nullable=False)
    is_first_time_login: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False
    )

    # Indexes for common queries
    __table_args__ = (
        Index('idx_user_location_role', 'location', 'role'),
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
