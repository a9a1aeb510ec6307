# app/models/domain/asset.py
from datetime import date
from typing import Optional

from app.models.enums import AssetState, Location
from .common import CamelModel, ListQueryParams, enum_input

class AssetResponse(CamelModel):
    """Schema for asset response."""
    id: int
    asset_code: str
    asset_name: str
    specification: str
    installed_date: date
    state: AssetState
    asset_location: Location
    category_id: int
    category_name: Optional[str] = None

class AssetListQuery(ListQueryParams):
    """List parameters for ``GET /assets``."""
    location: Optional[enum_input(Location)] = None
    state: Optional[enum_input(AssetState)] = None
    category_id: Optional[int] = None
