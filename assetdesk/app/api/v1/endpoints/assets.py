# app/api/v1/endpoints/assets.py
from fastapi import APIRouter, Depends, Request, status

from app.api.dependencies import (
    envelope_response,
    get_app_settings,
    get_asset_service,
    list_query,
    request_route
)
from app.core.config import Settings
from app.core.logging import monitor_performance
from app.models.domain.asset import AssetListQuery, AssetResponse
from app.models.domain.common import PagedResponse, Response
from app.services.asset_service import AssetService

router = APIRouter(prefix="/assets", tags=["assets"])

@router.get("", response_model=PagedResponse[AssetResponse])
@monitor_performance("get_all_assets")
async def get_all_assets(
    request: Request,
    params: AssetListQuery = Depends(list_query(AssetListQuery)),
    service: AssetService = Depends(get_asset_service),
    settings: Settings = Depends(get_app_settings)
):
    """Paged assets of a location, filterable by state and category."""
    response = await service.get_all_assets(
        params,
        service.pagination_for(params.page_number, params.page_size),
        params.location or settings.DEFAULT_LOCATION,
        request_route(request)
    )
    return envelope_response(response)

@router.get("/{asset_id}", response_model=Response[AssetResponse])
@monitor_performance("get_asset")
async def get_asset(
    asset_id: int,
    service: AssetService = Depends(get_asset_service)
):
    return envelope_response(
        await service.get_asset_by_id(asset_id),
        status.HTTP_404_NOT_FOUND
    )
