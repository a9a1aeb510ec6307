"""Assignment service.

Handles handing assets to staff and the assignment state machine:

    WaitingForAcceptance -> Accepted   (asset becomes Available again)
    WaitingForAcceptance -> Declined

Accepted and Declined are terminal. Creating an assignment marks the asset
Assigned. Each use case writes through one session and commits once, so the
assignment and asset updates land in a single transaction.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings
from app.core.exceptions import BusinessRuleViolation, NotFoundError, RequestValidationFailed
from app.core.logging import get_logger
from app.database.repositories.assets import AssetRepository
from app.database.repositories.assignments import AssignmentRepository
from app.database.repositories.users import UserRepository
from app.models.database.assignment import Assignment
from app.models.domain.assignment import (
    AddAssignmentRequest,
    AssignmentListQuery,
    AssignmentResponse
)
from app.models.domain.common import PagedResponse, Response
from app.models.enums import AssetState, AssignmentState, Location
from app.utils.pagination import PaginationFilter, UriService, create_paged_response
from . import mapper
from .base import BaseService, service_boundary
from .specifications import assignment_list_spec
from .validators import validate_add_assignment

logger = get_logger(__name__)

class AssignmentService(BaseService):
    """Use cases for assignments."""

    def __init__(
        self,
        session: AsyncSession,
        assignments: AssignmentRepository,
        assets: AssetRepository,
        users: UserRepository,
        uri_service: UriService,
        settings: Settings
    ):
        super().__init__(session, uri_service, settings)
        self.assignments = assignments
        self.assets = assets
        self.users = users

    @service_boundary()
    async def add_assignment(self, request: AddAssignmentRequest) -> Response[AssignmentResponse]:
        """Assign an available asset to a user."""
        is_valid, errors = validate_add_assignment(request)
        if not is_valid:
            raise RequestValidationFailed(errors)

        asset = await self.assets.get(request.asset_id)
        if asset is None:
            raise NotFoundError("Asset not found")
        assigned_to = await self.users.get(request.assigned_to_id)
        if assigned_to is None:
            raise NotFoundError("Assigned user not found")
        assigned_by = await self.users.get(request.assigned_by_id)
        if assigned_by is None:
            raise NotFoundError("Assigning user not found")

        if asset.state != AssetState.AVAILABLE:
            raise BusinessRuleViolation("Asset is not available for assignment.")
        if request.assigned_date < assigned_to.joined_date:
            raise BusinessRuleViolation(
                "Assigned date cannot be earlier than the user's joined date."
            )

        assignment = mapper.to_assignment_entity(request, asset, assigned_to, assigned_by)
        assignment.created_by = assigned_by.username
        await self.assignments.add(assignment)
        await self.assets.update(asset, state=AssetState.ASSIGNED)
        await self.commit()

        logger.info(
            "Assignment created",
            assignment_id=assignment.id,
            asset_id=asset.id,
            assigned_to_id=assigned_to.id
        )
        return Response(
            data=mapper.to_assignment_response(assignment),
            message="Assignment created"
        )

    @service_boundary()
    async def get_assignment_by_id(self, assignment_id: int) -> Response[AssignmentResponse]:
        assignment = await self._get_assignment(assignment_id)
        return Response(data=mapper.to_assignment_response(assignment))

    @service_boundary(PagedResponse)
    async def get_all_assignments(
        self,
        params: AssignmentListQuery,
        pagination: Optional[PaginationFilter],
        location: Location,
        route: str
    ) -> PagedResponse[AssignmentResponse]:
        """Paged assignments of ``location``."""
        pagination = pagination or self.pagination_for(params.page_number, params.page_size)
        spec = assignment_list_spec(params, pagination, location=location)
        return await self._page(spec, pagination, route)

    @service_boundary(PagedResponse)
    async def get_assignments_of_user(
        self,
        user_id: int,
        params: AssignmentListQuery,
        pagination: Optional[PaginationFilter],
        route: str
    ) -> PagedResponse[AssignmentResponse]:
        """Paged assignments handed to one user, whatever their location."""
        pagination = pagination or self.pagination_for(params.page_number, params.page_size)
        spec = assignment_list_spec(params, pagination, assigned_to_id=user_id)
        return await self._page(spec, pagination, route)

    @service_boundary()
    async def change_assignment_state(
        self,
        assignment_id: int,
        new_state: AssignmentState
    ) -> Response[AssignmentResponse]:
        """Accept or decline a waiting assignment.

        Raises (converted to a failed response):
            NotFoundError: Unknown assignment
            BusinessRuleViolation: Current state is terminal, or the target
                state is WaitingForAcceptance
        """
        assignment = await self._get_assignment(assignment_id)

        if assignment.state.is_terminal:
            raise BusinessRuleViolation("Assignment state cannot be changed.")
        if new_state == AssignmentState.WAITING_FOR_ACCEPTANCE:
            raise BusinessRuleViolation("Assignment is already waiting for acceptance.")

        await self.assignments.update(assignment, state=new_state)
        if new_state == AssignmentState.ACCEPTED:
            await self.assets.update(assignment.asset, state=AssetState.AVAILABLE)
        await self.commit()

        logger.info(
            "Assignment state changed",
            assignment_id=assignment.id,
            state=new_state.name
        )
        return Response(
            data=mapper.to_assignment_response(assignment),
            message="Assignment state changed"
        )

    async def _page(
        self,
        spec,
        pagination: PaginationFilter,
        route: str
    ) -> PagedResponse[AssignmentResponse]:
        assignments, total = await self.assignments.find(spec)
        data = [mapper.to_assignment_response(assignment) for assignment in assignments]
        return create_paged_response(data, pagination, total, self.uri_service, route)

    async def _get_assignment(self, assignment_id: int) -> Assignment:
        assignment = await self.assignments.get(assignment_id)
        if assignment is None:
            raise NotFoundError("Assignment not found")
        return assignment
