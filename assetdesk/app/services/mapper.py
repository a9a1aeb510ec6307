# app/services/mapper.py
"""Conversions between ORM entities and transfer objects.

All functions are pure: they read loaded attributes only and never touch
the session.
"""

from datetime import date

from app.models.database import Asset, Assignment, ReturnRequest, User
from app.models.domain.asset import AssetResponse
from app.models.domain.assignment import (
    AddAssignmentRequest,
    AssignmentResponse,
    ReturnRequestResponse
)
from app.models.domain.user import AddUserRequest, UserResponse

def to_user_response(user: User) -> UserResponse:
    return UserResponse.model_validate(user)

def to_user_entity(request: AddUserRequest) -> User:
    """New user from a create request; username and password set by the service."""
    return User(
        first_name=request.first_name.strip(),
        last_name=request.last_name.strip(),
        date_of_birth=request.date_of_birth,
        joined_date=request.joined_date,
        gender=request.gender,
        role=request.role,
        location=request.location
    )

def to_asset_response(asset: Asset) -> AssetResponse:
    return AssetResponse(
        id=asset.id,
        asset_code=asset.asset_code,
        asset_name=asset.asset_name,
        specification=asset.specification,
        installed_date=asset.installed_date,
        state=asset.state,
        asset_location=asset.location,
        category_id=asset.category_id,
        category_name=asset.category.name if asset.category else None
    )

def to_assignment_response(assignment: Assignment) -> AssignmentResponse:
    return AssignmentResponse(
        id=assignment.id,
        asset_id=assignment.asset_id,
        asset_code=assignment.asset.asset_code,
        asset_name=assignment.asset.asset_name,
        specification=assignment.asset.specification,
        assigned_to_id=assignment.assigned_to_id,
        assigned_to=assignment.assigned_to.username,
        assigned_by_id=assignment.assigned_by_id,
        assigned_by=assignment.assigned_by.username,
        assigned_date=assignment.assigned_date,
        state=assignment.state,
        note=assignment.note,
        location=assignment.location
    )

def to_assignment_entity(
    request: AddAssignmentRequest,
    asset: Asset,
    assigned_to: User,
    assigned_by: User
) -> Assignment:
    """New assignment with its relationships set, so it maps without a reload."""
    return Assignment(
        asset=asset,
        assigned_to=assigned_to,
        assigned_by=assigned_by,
        assigned_date=request.assigned_date,
        note=request.note or "",
        location=asset.location
    )

def to_return_request_response(request: ReturnRequest) -> ReturnRequestResponse:
    assignment = request.assignment
    accepted_by = request.accepted_by
    return ReturnRequestResponse(
        id=request.id,
        assignment_id=request.assignment_id,
        asset_code=assignment.asset.asset_code,
        asset_name=assignment.asset.asset_name,
        requested_by_id=request.requested_by_id,
        requested_by=request.requested_by.username,
        assigned_date=assignment.assigned_date,
        accepted_by_id=request.accepted_by_id,
        accepted_by=accepted_by.username if accepted_by else None,
        returned_date=request.returned_date,
        state=request.state,
        location=request.location
    )

def default_password(username: str, date_of_birth: date) -> str:
    """Initial password, e.g. ``binhnv@01021995``."""
    return f"{username}@{date_of_birth.strftime('%d%m%Y')}"
