# app/api/v1/endpoints/return_requests.py
"""Return request endpoints."""

from fastapi import APIRouter, Depends, Request, status

from app.api.dependencies import (
    envelope_response,
    get_app_settings,
    get_return_request_service,
    list_query,
    request_route
)
from app.core.config import Settings
from app.core.logging import monitor_performance
from app.models.domain.assignment import (
    CompleteReturnRequest,
    CreateReturnRequest,
    ReturnRequestListQuery,
    ReturnRequestResponse
)
from app.models.domain.common import PagedResponse, Response
from app.services.return_request_service import ReturnRequestService

router = APIRouter(prefix="/return-requests", tags=["return-requests"])

@router.get("", response_model=PagedResponse[ReturnRequestResponse])
@monitor_performance("get_all_return_requests")
async def get_all_return_requests(
    request: Request,
    params: ReturnRequestListQuery = Depends(list_query(ReturnRequestListQuery)),
    service: ReturnRequestService = Depends(get_return_request_service),
    settings: Settings = Depends(get_app_settings)
):
    response = await service.get_all_return_requests(
        params,
        service.pagination_for(params.page_number, params.page_size),
        params.location or settings.DEFAULT_LOCATION,
        request_route(request)
    )
    return envelope_response(response)

@router.post("", response_model=Response[ReturnRequestResponse], status_code=status.HTTP_201_CREATED)
@monitor_performance("create_return_request")
async def create_return_request(
    request_data: CreateReturnRequest,
    service: ReturnRequestService = Depends(get_return_request_service)
):
    return envelope_response(await service.create_return_request(request_data))

@router.put("/{return_request_id}/complete", response_model=Response[ReturnRequestResponse])
@monitor_performance("complete_return_request")
async def complete_return_request(
    return_request_id: int,
    request_data: CompleteReturnRequest,
    service: ReturnRequestService = Depends(get_return_request_service)
):
    """Mark the asset as returned today; it becomes available again."""
    return envelope_response(
        await service.complete_return_request(return_request_id, request_data)
    )

@router.delete("/{return_request_id}", response_model=Response[bool])
@monitor_performance("cancel_return_request")
async def cancel_return_request(
    return_request_id: int,
    service: ReturnRequestService = Depends(get_return_request_service)
):
    return envelope_response(await service.cancel_return_request(return_request_id))
