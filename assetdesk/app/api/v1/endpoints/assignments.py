"""Assignment endpoints.

Admins assign available assets to staff; the assignee then accepts or
declines. Accepting or declining is final.
"""

from fastapi import APIRouter, Depends, Request, status

from app.api.dependencies import (
    envelope_response,
    get_app_settings,
    get_assignment_service,
    list_query,
    request_route
)
from app.core.config import Settings
from app.core.logging import monitor_performance
from app.models.domain.assignment import (
    AddAssignmentRequest,
    AssignmentListQuery,
    AssignmentResponse,
    ChangeAssignmentStateRequest
)
from app.models.domain.common import PagedResponse, Response
from app.services.assignment_service import AssignmentService

router = APIRouter(prefix="/assignments", tags=["assignments"])

@router.post("", response_model=Response[AssignmentResponse], status_code=status.HTTP_201_CREATED)
@monitor_performance("add_assignment")
async def add_assignment(
    assignment_data: AddAssignmentRequest,
    service: AssignmentService = Depends(get_assignment_service)
):
    return envelope_response(await service.add_assignment(assignment_data))

@router.get("", response_model=PagedResponse[AssignmentResponse])
@monitor_performance("get_all_assignments")
async def get_all_assignments(
    request: Request,
    params: AssignmentListQuery = Depends(list_query(AssignmentListQuery)),
    service: AssignmentService = Depends(get_assignment_service),
    settings: Settings = Depends(get_app_settings)
):
    """Paged assignments of a location.

    Searches asset code, asset name and assignee username; filters by state
    and assigned date.
    """
    response = await service.get_all_assignments(
        params,
        service.pagination_for(params.page_number, params.page_size),
        params.location or settings.DEFAULT_LOCATION,
        request_route(request)
    )
    return envelope_response(response)

@router.get("/{assignment_id}", response_model=Response[AssignmentResponse])
@monitor_performance("get_assignment")
async def get_assignment(
    assignment_id: int,
    service: AssignmentService = Depends(get_assignment_service)
):
    return envelope_response(
        await service.get_assignment_by_id(assignment_id),
        status.HTTP_404_NOT_FOUND
    )

@router.put("/{assignment_id}/state", response_model=Response[AssignmentResponse])
@monitor_performance("change_assignment_state")
async def change_assignment_state(
    assignment_id: int,
    state_data: ChangeAssignmentStateRequest,
    service: AssignmentService = Depends(get_assignment_service)
):
    return envelope_response(
        await service.change_assignment_state(assignment_id, state_data.new_state)
    )
