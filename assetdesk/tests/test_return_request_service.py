"""Tests for the return request service."""

import pytest
from datetime import date

from app.models.domain.assignment import (
    CompleteReturnRequest,
    CreateReturnRequest,
    ReturnRequestListQuery
)
from app.models.enums import AssetState, AssignmentState, Location, ReturnRequestState

@pytest.fixture
async def accepted(factory):
    """An accepted assignment of an assigned asset."""
    admin = await factory.user(username="admin")
    staff = await factory.user(username="binhnv")
    asset = await factory.asset(await factory.category(), state=AssetState.ASSIGNED)
    assignment = await factory.assignment(asset, staff, admin, state=AssignmentState.ACCEPTED)
    return admin, staff, asset, assignment

async def test_create_return_request(return_request_service, accepted):
    _, staff, asset, assignment = accepted

    response = await return_request_service.create_return_request(
        CreateReturnRequest(assignment_id=assignment.id, requested_by_id=staff.id)
    )

    assert response.succeeded
    assert response.data.state == ReturnRequestState.WAITING_FOR_RETURNING
    assert response.data.requested_by == "binhnv"
    assert response.data.asset_code == asset.asset_code
    assert response.data.accepted_by is None
    assert response.data.returned_date is None

async def test_only_one_open_request_per_assignment(return_request_service, factory, accepted):
    _, staff, _, assignment = accepted
    await factory.return_request(assignment, staff)

    response = await return_request_service.create_return_request(
        CreateReturnRequest(assignment_id=assignment.id, requested_by_id=staff.id)
    )

    assert not response.succeeded
    assert "already exists" in response.message

async def test_waiting_assignment_cannot_be_returned(return_request_service, factory, accepted):
    admin, staff, _, _ = accepted
    asset = await factory.asset(await factory.category())
    waiting = await factory.assignment(asset, staff, admin)

    response = await return_request_service.create_return_request(
        CreateReturnRequest(assignment_id=waiting.id, requested_by_id=staff.id)
    )

    assert not response.succeeded
    assert response.message == "Only accepted assignments can be returned."

async def test_complete_return_request(return_request_service, db_session, factory, accepted):
    admin, staff, asset, assignment = accepted
    request = await factory.return_request(assignment, staff)

    response = await return_request_service.complete_return_request(
        request.id, CompleteReturnRequest(accepted_by_id=admin.id)
    )

    assert response.succeeded
    assert response.data.state == ReturnRequestState.COMPLETED
    assert response.data.accepted_by == "admin"
    assert response.data.returned_date == date.today()
    await db_session.refresh(asset)
    assert asset.state == AssetState.AVAILABLE

async def test_completed_request_is_terminal(return_request_service, factory, accepted):
    admin, staff, _, assignment = accepted
    request = await factory.return_request(assignment, staff, state=ReturnRequestState.COMPLETED)
    request_id = request.id

    completed_again = await return_request_service.complete_return_request(
        request_id, CompleteReturnRequest(accepted_by_id=admin.id)
    )
    cancelled = await return_request_service.cancel_return_request(request_id)

    assert not completed_again.succeeded
    assert not cancelled.succeeded

async def test_cancel_return_request(return_request_service, factory, accepted):
    _, staff, _, assignment = accepted
    request = await factory.return_request(assignment, staff)
    request_id = request.id

    response = await return_request_service.cancel_return_request(request_id)
    listed = await return_request_service.get_all_return_requests(
        ReturnRequestListQuery(), None, Location.HA_NOI, "/api/v1/return-requests"
    )

    assert response.succeeded
    assert response.data is True
    assert listed.total_records == 0

async def test_cancel_missing_request(return_request_service):
    response = await return_request_service.cancel_return_request(12345)

    assert not response.succeeded
    assert response.message == "Return request not found"

async def test_get_all_return_requests_filters(return_request_service, factory, accepted):
    admin, staff, _, assignment = accepted
    other = await factory.user(username="maitt")
    other_asset = await factory.asset(await factory.category(), asset_name="Monitor")
    other_assignment = await factory.assignment(other_asset, other, admin, state=AssignmentState.ACCEPTED)
    await factory.return_request(assignment, staff)
    await factory.return_request(other_assignment, other, state=ReturnRequestState.COMPLETED)

    by_state = await return_request_service.get_all_return_requests(
        ReturnRequestListQuery(state=ReturnRequestState.COMPLETED),
        None,
        Location.HA_NOI,
        "/api/v1/return-requests"
    )
    by_requester = await return_request_service.get_all_return_requests(
        ReturnRequestListQuery(search="binh", order_by="requestedBy"),
        None,
        Location.HA_NOI,
        "/api/v1/return-requests"
    )
    elsewhere = await return_request_service.get_all_return_requests(
        ReturnRequestListQuery(), None, Location.DA_NANG, "/api/v1/return-requests"
    )

    assert [r.asset_name for r in by_state.data] == ["Monitor"]
    assert [r.requested_by for r in by_requester.data] == ["binhnv"]
    assert elsewhere.total_records == 0

async def test_returned_assignment_cannot_be_returned_again(return_request_service, db_session, accepted):
    admin, staff, asset, assignment = accepted
    assignment_id, staff_id, admin_id = assignment.id, staff.id, admin.id

    first = await return_request_service.create_return_request(
        CreateReturnRequest(assignment_id=assignment_id, requested_by_id=staff_id)
    )
    completed = await return_request_service.complete_return_request(
        first.data.id, CompleteReturnRequest(accepted_by_id=admin_id)
    )
    second = await return_request_service.create_return_request(
        CreateReturnRequest(assignment_id=assignment_id, requested_by_id=staff_id)
    )
    listed = await return_request_service.get_all_return_requests(
        ReturnRequestListQuery(), None, Location.HA_NOI, "/api/v1/return-requests"
    )

    assert first.succeeded and completed.succeeded
    assert not second.succeeded
    assert second.message == "This assignment has already been returned."
    assert listed.total_records == 1
    await db_session.refresh(asset)
    assert asset.state == AssetState.AVAILABLE

async def test_cancelled_request_can_be_raised_again(return_request_service, accepted):
    _, staff, _, assignment = accepted
    assignment_id, staff_id = assignment.id, staff.id

    first = await return_request_service.create_return_request(
        CreateReturnRequest(assignment_id=assignment_id, requested_by_id=staff_id)
    )
    await return_request_service.cancel_return_request(first.data.id)
    second = await return_request_service.create_return_request(
        CreateReturnRequest(assignment_id=assignment_id, requested_by_id=staff_id)
    )

    assert second.succeeded
    assert second.data.id != first.data.id
