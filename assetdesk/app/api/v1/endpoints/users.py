"""User management endpoints for the AssetDesk application.

This module provides:
- Creating staff accounts (generated username, password and staff code)
- Editing a user's dates, gender and role
- The paged, searchable user list of a location
- The assignments handed to one user
"""

from fastapi import APIRouter, Depends, Request, status

from app.api.dependencies import (
    envelope_response,
    get_app_settings,
    get_assignment_service,
    get_user_service,
    list_query,
    request_route
)
from app.core.config import Settings
from app.core.logging import monitor_performance
from app.models.domain.assignment import AssignmentListQuery, AssignmentResponse
from app.models.domain.common import PagedResponse, Response
from app.models.domain.user import (
    AddUserRequest,
    UpdateUserRequest,
    UserListQuery,
    UserResponse
)
from app.services.assignment_service import AssignmentService
from app.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])

@router.post("", response_model=Response[UserResponse], status_code=status.HTTP_201_CREATED)
@monitor_performance("add_user")
async def add_user(
    user_data: AddUserRequest,
    service: UserService = Depends(get_user_service)
):
    """Create a user.

    The username is the first name plus last-name initials, the initial
    password is ``{username}@{ddMMyyyy}`` and the staff code follows the id.
    """
    return envelope_response(await service.add_user(user_data))

@router.get("", response_model=PagedResponse[UserResponse])
@monitor_performance("get_all_users")
async def get_all_users(
    request: Request,
    params: UserListQuery = Depends(list_query(UserListQuery)),
    service: UserService = Depends(get_user_service),
    settings: Settings = Depends(get_app_settings)
):
    """Paged users of a location, searchable by username and staff code."""
    response = await service.get_all_users(
        params,
        service.pagination_for(params.page_number, params.page_size),
        params.location or settings.DEFAULT_LOCATION,
        request_route(request)
    )
    return envelope_response(response)

@router.get("/{user_id}", response_model=Response[UserResponse])
@monitor_performance("get_user")
async def get_user(
    user_id: int,
    service: UserService = Depends(get_user_service)
):
    return envelope_response(
        await service.get_user_by_id(user_id),
        status.HTTP_404_NOT_FOUND
    )

@router.put("/{user_id}", response_model=Response[UserResponse])
@monitor_performance("update_user")
async def update_user(
    user_id: int,
    user_data: UpdateUserRequest,
    service: UserService = Depends(get_user_service)
):
    """Update date of birth, joined date, gender and role."""
    return envelope_response(await service.update_user(user_id, user_data))

@router.get("/{user_id}/assignments", response_model=PagedResponse[AssignmentResponse])
@monitor_performance("get_assignments_of_user")
async def get_assignments_of_user(
    user_id: int,
    request: Request,
    params: AssignmentListQuery = Depends(list_query(AssignmentListQuery)),
    service: AssignmentService = Depends(get_assignment_service)
):
    """Assignments handed to one user, across locations."""
    response = await service.get_assignments_of_user(
        user_id,
        params,
        service.pagination_for(params.page_number, params.page_size),
        request_route(request)
    )
    return envelope_response(response)
