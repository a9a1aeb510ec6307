# app/models/database/assignment.py
"""Assignment and return request models.

Relationships are many-to-one and loaded with ``selectin`` so mapped
transfer objects never trigger lazy IO on an async session.
"""

from datetime import date
from typing import Optional
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, Date, ForeignKey, Index
from app.models.enums import AssignmentState, Location, ReturnRequestState
from .base import Base, IntEnumType
from .asset import Asset
from .user import User

class Assignment(Base):
    """An asset handed to a staff member by an admin."""
    __tablename__ = 'assignments'

    asset_id: Mapped[int] = mapped_column(
        ForeignKey('assets.id', ondelete='RESTRICT'),
        nullable=False,
        index=True
    )
    assigned_to_id: Mapped[int] = mapped_column(
        ForeignKey('users.id', ondelete='RESTRICT'),
        nullable=False,
        index=True
    )
    assigned_by_id: Mapped[int] = mapped_column(
        ForeignKey('users.id', ondelete='RESTRICT'),
        nullable=False
    )
    assigned_date: Mapped[date] = mapped_column(Date, nullable=False)
    state: Mapped[AssignmentState] = mapped_column(
        IntEnumType(AssignmentState),
        default=AssignmentState.WAITING_FOR_ACCEPTANCE,
        nullable=False
    )
    note: Mapped[str] = mapped_column(String(600), default="", nullable=False)
    location: Mapped[Location] = mapped_column(IntEnumType(Location), nullable=False)

    # Relationships
    asset: Mapped[Asset] = relationship(lazy="selectin")
    assigned_to: Mapped[User] = relationship(
        foreign_keys=[assigned_to_id],
        lazy="selectin"
    )
    assigned_by: Mapped[User] = relationship(
        foreign_keys=[assigned_by_id],
        lazy="selectin"
    )

    __table_args__ = (
        Index('idx_assignment_location_state', 'location', 'state'),
    )

class ReturnRequest(Base):
    """Request to give an accepted assignment's asset back."""
    __tablename__ = 'return_requests'

    assignment_id: Mapped[int] = mapped_column(
        ForeignKey('assignments.id', ondelete='CASCADE'),
        nullable=False,
        index=True
    )
    requested_by_id: Mapped[int] = mapped_column(
        ForeignKey('users.id', ondelete='RESTRICT'),
        nullable=False
    )
    accepted_by_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey('users.id', ondelete='SET NULL'),
        nullable=True
    )
    returned_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    state: Mapped[ReturnRequestState] = mapped_column(
        IntEnumType(ReturnRequestState),
        default=ReturnRequestState.WAITING_FOR_RETURNING,
        nullable=False
    )
    location: Mapped[Location] = mapped_column(IntEnumType(Location), nullable=False)

    # Relationships
    assignment: Mapped[Assignment] = relationship(lazy="selectin")
    requested_by: Mapped[User] = relationship(
        foreign_keys=[requested_by_id],
        lazy="selectin"
    )
    accepted_by: Mapped[Optional[User]] = relationship(
        foreign_keys=[accepted_by_id],
        lazy="selectin"
    )
