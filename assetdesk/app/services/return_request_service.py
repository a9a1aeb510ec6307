"""Return request service.

A staff member asks to give back the asset of an accepted assignment; an
admin completes the request (the asset becomes Available) or it is
cancelled while still waiting.
"""

from datetime import date
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings
from app.core.exceptions import BusinessRuleViolation, NotFoundError
from app.core.logging import get_logger
from app.database.repositories.assets import AssetRepository
from app.database.repositories.assignments import AssignmentRepository, ReturnRequestRepository
from app.database.repositories.users import UserRepository
from app.models.database.assignment import ReturnRequest
from app.models.domain.assignment import (
    CompleteReturnRequest,
    CreateReturnRequest,
    ReturnRequestListQuery,
    ReturnRequestResponse
)
from app.models.domain.common import PagedResponse, Response
from app.models.enums import AssetState, AssignmentState, Location, ReturnRequestState
from app.utils.pagination import PaginationFilter, UriService, create_paged_response
from . import mapper
from .base import BaseService, service_boundary
from .specifications import return_request_list_spec

logger = get_logger(__name__)

class ReturnRequestService(BaseService):
    """Use cases for returning assigned assets."""

    def __init__(
        self,
        session: AsyncSession,
        return_requests: ReturnRequestRepository,
        assignments: AssignmentRepository,
        assets: AssetRepository,
        users: UserRepository,
        uri_service: UriService,
        settings: Settings
    ):
        super().__init__(session, uri_service, settings)
        self.return_requests = return_requests
        self.assignments = assignments
        self.assets = assets
        self.users = users

    @service_boundary(PagedResponse)
    async def get_all_return_requests(
        self,
        params: ReturnRequestListQuery,
        pagination: Optional[PaginationFilter],
        location: Location,
        route: str
    ) -> PagedResponse[ReturnRequestResponse]:
        """Paged return requests of ``location``."""
        pagination = pagination or self.pagination_for(params.page_number, params.page_size)
        spec = return_request_list_spec(params, pagination, location)

        requests, total = await self.return_requests.find(spec)
        data = [mapper.to_return_request_response(request) for request in requests]
        return create_paged_response(data, pagination, total, self.uri_service, route)

    @service_boundary()
    async def create_return_request(
        self,
        request: CreateReturnRequest
    ) -> Response[ReturnRequestResponse]:
        """Open a return request for an accepted assignment."""
        assignment = await self.assignments.get(request.assignment_id)
        if assignment is None:
            raise NotFoundError("Assignment not found")
        requested_by = await self.users.get(request.requested_by_id)
        if requested_by is None:
            raise NotFoundError("User not found")

        if assignment.state != AssignmentState.ACCEPTED:
            raise BusinessRuleViolation("Only accepted assignments can be returned.")
        existing = await self.return_requests.get_for_assignment(assignment.id)
        if existing is not None:
            if existing.state == ReturnRequestState.COMPLETED:
                raise BusinessRuleViolation("This assignment has already been returned.")
            raise BusinessRuleViolation("A return request for this assignment already exists.")

        return_request = ReturnRequest(
            assignment=assignment,
            requested_by=requested_by,
            accepted_by=None,
            location=assignment.location,
            created_by=requested_by.username
        )
        await self.return_requests.add(return_request)
        await self.commit()

        logger.info(
            "Return request created",
            return_request_id=return_request.id,
            assignment_id=assignment.id
        )
        return Response(
            data=mapper.to_return_request_response(return_request),
            message="Return request created"
        )

    @service_boundary()
    async def complete_return_request(
        self,
        return_request_id: int,
        request: CompleteReturnRequest
    ) -> Response[ReturnRequestResponse]:
        """Mark the asset as returned today and make it available again."""
        return_request = await self._get_waiting(return_request_id)
        accepted_by = await self.users.get(request.accepted_by_id)
        if accepted_by is None:
            raise NotFoundError("User not found")

        await self.return_requests.update(
            return_request,
            state=ReturnRequestState.COMPLETED,
            accepted_by=accepted_by,
            returned_date=date.today(),
            last_modified_by=accepted_by.username
        )
        await self.assets.update(return_request.assignment.asset, state=AssetState.AVAILABLE)
        await self.commit()

        logger.info("Return request completed", return_request_id=return_request.id)
        return Response(
            data=mapper.to_return_request_response(return_request),
            message="Return request completed"
        )

    @service_boundary()
    async def cancel_return_request(self, return_request_id: int) -> Response[bool]:
        """Withdraw a waiting return request."""
        return_request = await self._get_waiting(return_request_id)
        await self.return_requests.delete(return_request)
        await self.commit()

        logger.info("Return request cancelled", return_request_id=return_request_id)
        return Response(data=True, message="Return request cancelled")

    async def _get_waiting(self, return_request_id: int) -> ReturnRequest:
        return_request = await self.return_requests.get(return_request_id)
        if return_request is None:
            raise NotFoundError("Return request not found")
        if return_request.state != ReturnRequestState.WAITING_FOR_RETURNING:
            raise BusinessRuleViolation("Return request is no longer waiting for returning.")
        return return_request
