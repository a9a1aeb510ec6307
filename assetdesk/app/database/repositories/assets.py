# app/database/repositories/assets.py
"""Repository for asset-related database operations."""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select
from app.database.specification import EntityField
from app.models.database.asset import Asset, Category
from .base import BaseRepository

class AssetFields:
    """Filterable and sortable asset fields."""
    id = EntityField("id", Asset.id)
    asset_code = EntityField("asset_code", Asset.asset_code, case_insensitive=True)
    asset_name = EntityField("asset_name", Asset.asset_name, case_insensitive=True)
    category_id = EntityField("category_id", Asset.category_id)
    category_name = EntityField("category.name", Category.name, case_insensitive=True)
    installed_date = EntityField("installed_date", Asset.installed_date)
    state = EntityField("state", Asset.state)
    location = EntityField("location", Asset.location)

class AssetRepository(BaseRepository[Asset]):
    """Repository for managing assets."""

    def __init__(self, session: AsyncSession):
        super().__init__(Asset, session)

    def base_query(self) -> Select:
        # Category is joined so it can be sorted on
        return super().base_query().join(Asset.category)
