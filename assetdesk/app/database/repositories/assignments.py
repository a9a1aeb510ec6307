# app/database/repositories/assignments.py
"""Repository for assignment and return request operations.

List queries join the asset and the involved users under fixed aliases so
specifications can filter and sort on their columns.
"""

from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased
from sqlalchemy.sql import Select
from app.database.specification import EntityField
from app.models.database.asset import Asset
from app.models.database.assignment import Assignment, ReturnRequest
from app.models.database.user import User
from .base import BaseRepository

AssignedTo = aliased(User, name="assigned_to_user")
AssignedBy = aliased(User, name="assigned_by_user")
RequestedBy = aliased(User, name="requested_by_user")
AcceptedBy = aliased(User, name="accepted_by_user")
ReturnedAssignment = aliased(Assignment, name="returned_assignment")
ReturnedAsset = aliased(Asset, name="returned_asset")

class AssignmentFields:
    """Filterable and sortable assignment fields."""
    id = EntityField("id", Assignment.id)
    asset_code = EntityField("asset.asset_code", Asset.asset_code, case_insensitive=True)
    asset_name = EntityField("asset.asset_name", Asset.asset_name, case_insensitive=True)
    assigned_to_id = EntityField("assigned_to_id", Assignment.assigned_to_id)
    assigned_to = EntityField("assigned_to.username", AssignedTo.username, case_insensitive=True)
    assigned_by = EntityField("assigned_by.username", AssignedBy.username, case_insensitive=True)
    assigned_date = EntityField("assigned_date", Assignment.assigned_date)
    state = EntityField("state", Assignment.state)
    location = EntityField("location", Assignment.location)

class ReturnRequestFields:
    """Filterable and sortable return request fields."""
    id = EntityField("id", ReturnRequest.id)
    asset_code = EntityField(
        "assignment.asset.asset_code", ReturnedAsset.asset_code, case_insensitive=True
    )
    asset_name = EntityField(
        "assignment.asset.asset_name", ReturnedAsset.asset_name, case_insensitive=True
    )
    requested_by = EntityField("requested_by.username", RequestedBy.username, case_insensitive=True)
    assigned_date = EntityField("assignment.assigned_date", ReturnedAssignment.assigned_date)
    accepted_by = EntityField("accepted_by.username", AcceptedBy.username, case_insensitive=True)
    returned_date = EntityField("returned_date", ReturnRequest.returned_date)
    state = EntityField("state", ReturnRequest.state)
    location = EntityField("location", ReturnRequest.location)

class AssignmentRepository(BaseRepository[Assignment]):
    """Repository for managing assignments."""

    def __init__(self, session: AsyncSession):
        super().__init__(Assignment, session)

    def base_query(self) -> Select:
        return (
            super().base_query()
            .join(Assignment.asset)
            .join(AssignedTo, Assignment.assigned_to_id == AssignedTo.id)
            .join(AssignedBy, Assignment.assigned_by_id == AssignedBy.id)
        )

class ReturnRequestRepository(BaseRepository[ReturnRequest]):
    """Repository for managing return requests."""

    def __init__(self, session: AsyncSession):
        super().__init__(ReturnRequest, session)

    def base_query(self) -> Select:
        return (
            super().base_query()
            .join(ReturnedAssignment, ReturnRequest.assignment_id == ReturnedAssignment.id)
            .join(ReturnedAsset, ReturnedAssignment.asset_id == ReturnedAsset.id)
            .join(RequestedBy, ReturnRequest.requested_by_id == RequestedBy.id)
            # Not accepted yet means no user
            .outerjoin(AcceptedBy, ReturnRequest.accepted_by_id == AcceptedBy.id)
        )

    async def get_for_assignment(self, assignment_id: int) -> Optional[ReturnRequest]:
        """Return the live request of an assignment, waiting or completed.

        Cancelled requests are soft-deleted and do not count.
        """
        query = self.base_query().where(ReturnRequest.assignment_id == assignment_id)
        result = await self.session.execute(query)
        return result.scalars().first()
