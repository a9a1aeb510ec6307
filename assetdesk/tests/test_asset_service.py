"""Tests for the asset service."""

from app.models.domain.asset import AssetListQuery
from app.models.enums import AssetState, Location

async def test_get_asset_by_id(asset_service, factory):
    category = await factory.category(name="Laptop", prefix="LA")
    asset = await factory.asset(category, asset_code="LA000001")

    found = await asset_service.get_asset_by_id(asset.id)
    missing = await asset_service.get_asset_by_id(asset.id + 1)

    assert found.data.asset_code == "LA000001"
    assert found.data.category_name == "Laptop"
    assert found.data.asset_location == Location.HA_NOI
    assert not missing.succeeded
    assert missing.message == "Asset not found"

async def test_get_all_assets_filters_and_sorts(asset_service, factory):
    laptops = await factory.category(name="Laptop", prefix="LA")
    monitors = await factory.category(name="Monitor", prefix="MO")
    await factory.asset(laptops, asset_code="LA000002", asset_name="Dell XPS")
    await factory.asset(laptops, asset_code="LA000001", asset_name="MacBook", state=AssetState.ASSIGNED)
    await factory.asset(monitors, asset_code="MO000001", asset_name="Dell U2720")
    await factory.asset(monitors, asset_code="MO000002", asset_name="LG", location=Location.DA_NANG)

    default = await asset_service.get_all_assets(AssetListQuery(), None, Location.HA_NOI, "/api/v1/assets")
    dell = await asset_service.get_all_assets(
        AssetListQuery(search="dell", order_by="category", is_descending=True),
        None,
        Location.HA_NOI,
        "/api/v1/assets"
    )
    assigned = await asset_service.get_all_assets(
        AssetListQuery(state=AssetState.ASSIGNED), None, Location.HA_NOI, "/api/v1/assets"
    )
    by_category = await asset_service.get_all_assets(
        AssetListQuery(category_id=monitors.id), None, Location.HA_NOI, "/api/v1/assets"
    )

    assert [a.asset_code for a in default.data] == ["LA000001", "LA000002", "MO000001"]
    assert [a.category_name for a in dell.data] == ["Monitor", "Laptop"]
    assert [a.asset_name for a in assigned.data] == ["MacBook"]
    assert [a.asset_code for a in by_category.data] == ["MO000001"]

async def test_page_size_is_capped(asset_service, factory, settings):
    category = await factory.category()
    for _ in range(3):
        await factory.asset(category)

    response = await asset_service.get_all_assets(
        AssetListQuery(page_size=1000), None, Location.HA_NOI, "/api/v1/assets"
    )

    assert response.page_size == settings.PAGINATION.MAX_PAGE_SIZE
    assert response.total_pages == 1
