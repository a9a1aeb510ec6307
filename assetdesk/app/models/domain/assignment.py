# app/models/domain/assignment.py
"""Schemas for assignments and return requests."""

from datetime import date
from typing import Optional
from pydantic import AliasChoices, Field

from app.models.enums import AssignmentState, Location, ReturnRequestState
from .common import CamelModel, ListQueryParams, enum_input

AssignmentStateInput = enum_input(AssignmentState)
ReturnRequestStateInput = enum_input(ReturnRequestState)
LocationInput = enum_input(Location)

class AddAssignmentRequest(CamelModel):
    """Schema for creating an assignment."""
    asset_id: int
    assigned_to_id: int = Field(
        ...,
        validation_alias=AliasChoices("assignedToId", "assigned_to_id", "assignedIdTo")
    )
    assigned_by_id: int = Field(
        ...,
        validation_alias=AliasChoices("assignedById", "assigned_by_id", "assignedIdBy")
    )
    assigned_date: date
    note: str = ""

class ChangeAssignmentStateRequest(CamelModel):
    """Schema for accepting or declining an assignment."""
    new_state: AssignmentStateInput

class AssignmentResponse(CamelModel):
    """Flattened assignment with asset and user names."""
    id: int
    asset_id: int
    asset_code: str
    asset_name: str
    specification: str
    assigned_to_id: int
    assigned_to: str
    assigned_by_id: int
    assigned_by: str
    assigned_date: date
    state: AssignmentState
    note: str
    location: Location

class AssignmentListQuery(ListQueryParams):
    """List parameters for assignment lists."""
    location: Optional[LocationInput] = None
    state: Optional[AssignmentStateInput] = None
    assigned_date: Optional[date] = None

class CreateReturnRequest(CamelModel):
    """Schema for asking to return an assigned asset."""
    assignment_id: int
    requested_by_id: int

class CompleteReturnRequest(CamelModel):
    """Schema for completing a return request."""
    accepted_by_id: int

class ReturnRequestResponse(CamelModel):
    """Flattened return request."""
    id: int
    assignment_id: int
    asset_code: str
    asset_name: str
    requested_by_id: int
    requested_by: str
    assigned_date: date
    accepted_by_id: Optional[int] = None
    accepted_by: Optional[str] = None
    returned_date: Optional[date] = None
    state: ReturnRequestState
    location: Location

class ReturnRequestListQuery(ListQueryParams):
    """List parameters for ``GET /return-requests``."""
    location: Optional[LocationInput] = None
    state: Optional[ReturnRequestStateInput] = None
    returned_date: Optional[date] = None
