"""Pydantic models for user management.

These models handle data validation and serialization for the user
endpoints. Business rules (ages, weekend joins) live in
``app.services.validators``; these models only check shapes.
"""

from datetime import date
from typing import Optional
from pydantic import AliasChoices, Field

from app.models.enums import Gender, Location, Role
from .common import CamelModel, ListQueryParams, enum_input

GenderInput = enum_input(Gender)
RoleInput = enum_input(Role)
LocationInput = enum_input(Location)

class AddUserRequest(CamelModel):
    """Model for creating a user."""
    first_name: str = Field(..., description="User's first name")
    last_name: str = Field(..., description="User's last name")
    date_of_birth: date
    joined_date: date
    gender: GenderInput
    role: RoleInput = Field(
        Role.STAFF,
        validation_alias=AliasChoices("role", "roleId", "role_id")
    )
    location: LocationInput

class UpdateUserRequest(CamelModel):
    """Model for editing a user; names and location are immutable."""
    date_of_birth: date
    joined_date: date
    gender: GenderInput
    role: RoleInput = Field(
        Role.STAFF,
        validation_alias=AliasChoices("role", "roleId", "role_id")
    )

class UserResponse(CamelModel):
    """Response model for user data."""
    id: int
    staff_code: Optional[str]
    first_name: str
    last_name: str
    full_name: str
    username: str
    date_of_birth: date
    joined_date: date
    gender: Gender
    role: Role
    location: Location
    is_first_time_login: bool

class UserListQuery(ListQueryParams):
    """List parameters for ``GET /users``."""
    location: Optional[LocationInput] = None
    role: Optional[RoleInput] = None
