# app/services/asset_service.py
"""Read-side use cases for assets."""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings
from app.core.exceptions import NotFoundError
from app.database.repositories.assets import AssetRepository
from app.models.domain.asset import AssetListQuery, AssetResponse
from app.models.domain.common import PagedResponse, Response
from app.models.enums import Location
from app.utils.pagination import PaginationFilter, UriService, create_paged_response
from . import mapper
from .base import BaseService, service_boundary
from .specifications import asset_list_spec

class AssetService(BaseService):
    """Asset lookups and the paged asset list of a location."""

    def __init__(
        self,
        session: AsyncSession,
        assets: AssetRepository,
        uri_service: UriService,
        settings: Settings
    ):
        super().__init__(session, uri_service, settings)
        self.assets = assets

    @service_boundary()
    async def get_asset_by_id(self, asset_id: int) -> Response[AssetResponse]:
        asset = await self.assets.get(asset_id)
        if asset is None:
            raise NotFoundError("Asset not found")
        return Response(data=mapper.to_asset_response(asset))

    @service_boundary(PagedResponse)
    async def get_all_assets(
        self,
        params: AssetListQuery,
        pagination: Optional[PaginationFilter],
        location: Location,
        route: str
    ) -> PagedResponse[AssetResponse]:
        """Paged assets of ``location``, searched on asset code and name.

        Optional filters narrow by state and category.
        """
        pagination = pagination or self.pagination_for(params.page_number, params.page_size)
        spec = asset_list_spec(params, pagination, location)

        assets, total = await self.assets.find(spec)
        data = [mapper.to_asset_response(asset) for asset in assets]
        return create_paged_response(data, pagination, total, self.uri_service, route)
