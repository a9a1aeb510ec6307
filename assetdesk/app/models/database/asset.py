# app/models/database/asset.py
"""Asset and category models."""

from datetime import date
from typing import Optional
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, Text, Date, ForeignKey, Index
from app.models.enums import AssetState, Location
from .base import Base, IntEnumType

class Category(Base):
    """Asset category; ``prefix`` seeds the asset codes of the category."""
    __tablename__ = 'categories'

    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    prefix: Mapped[str] = mapped_column(String(10), unique=True, nullable=False)

class Asset(Base):
    """A piece of hardware tracked by the organisation."""
    __tablename__ = 'assets'

    asset_code: Mapped[str] = mapped_column(
        String(20),
        unique=True,
        nullable=False,
        index=True
    )
    asset_name: Mapped[str] = mapped_column(String(200), nullable=False)
    specification: Mapped[str] = mapped_column(Text, default="", nullable=False)
    installed_date: Mapped[date] = mapped_column(Date, nullable=False)
    state: Mapped[AssetState] = mapped_column(
        IntEnumType(AssetState),
        default=AssetState.AVAILABLE,
        nullable=False
    )
    location: Mapped[Location] = mapped_column(IntEnumType(Location), nullable=False)
    category_id: Mapped[int] = mapped_column(
        ForeignKey('categories.id', ondelete='RESTRICT'),
        nullable=False,
        index=True
    )

    # Relationships
    category: Mapped[Optional[Category]] = relationship(lazy="selectin")

    __table_args__ = (
        Index('idx_asset_location_state', 'location', 'state'),
    )
