"""Sort tables and specification builders for each list use case.

Each builder turns raw list parameters into a ``QuerySpecification``. The
mandatory scope (location, assignee) always goes into ``scope`` and is
applied before any user supplied criteria.
"""

from typing import Optional

from app.database.repositories.assets import AssetFields
from app.database.repositories.assignments import AssignmentFields, ReturnRequestFields
from app.database.repositories.users import UserFields
from app.database.specification import (
    CriteriaBuilder,
    Equals,
    QuerySpecification,
    SortTable
)
from app.models.domain.asset import AssetListQuery
from app.models.domain.assignment import AssignmentListQuery, ReturnRequestListQuery
from app.models.domain.user import UserListQuery
from app.models.enums import Location
from app.utils.pagination import PaginationFilter

USER_SORT = SortTable(
    {
        "staffCode": UserFields.staff_code,
        "firstName": UserFields.first_name,
        "fullName": UserFields.full_name,
        "lastName": UserFields.last_name,
        "username": UserFields.username,
        "dateOfBirth": UserFields.date_of_birth,
        "joinedDate": UserFields.joined_date,
        "gender": UserFields.gender,
        "role": UserFields.role,
    },
    default="firstName",
)

ASSET_SORT = SortTable(
    {
        "assetCode": AssetFields.asset_code,
        "assetName": AssetFields.asset_name,
        "category": AssetFields.category_name,
        "state": AssetFields.state,
        "installedDate": AssetFields.installed_date,
    },
    default="assetCode",
)

ASSIGNMENT_SORT = SortTable(
    {
        "assetCode": AssignmentFields.asset_code,
        "assetName": AssignmentFields.asset_name,
        "assignedTo": AssignmentFields.assigned_to,
        "assignedBy": AssignmentFields.assigned_by,
        "assignedDate": AssignmentFields.assigned_date,
        "state": AssignmentFields.state,
    },
    default="assetCode",
)

RETURN_REQUEST_SORT = SortTable(
    {
        "assetCode": ReturnRequestFields.asset_code,
        "assetName": ReturnRequestFields.asset_name,
        "requestedBy": ReturnRequestFields.requested_by,
        "assignedDate": ReturnRequestFields.assigned_date,
        "acceptedBy": ReturnRequestFields.accepted_by,
        "returnedDate": ReturnRequestFields.returned_date,
        "state": ReturnRequestFields.state,
    },
    default="assetCode",
)

def user_list_spec(
    params: UserListQuery,
    pagination: PaginationFilter,
    location: Location
) -> QuerySpecification:
    criteria = (
        CriteriaBuilder()
        .search(params.search, UserFields.username, UserFields.staff_code)
        .equals(UserFields.role, params.role)
        .build()
    )
    return QuerySpecification.build(
        USER_SORT,
        UserFields.id,
        scope=[Equals(UserFields.location, location)],
        criteria=criteria,
        order_by=params.order_by,
        is_descending=params.is_descending,
        skip=pagination.skip,
        take=pagination.take,
    )

def asset_list_spec(
    params: AssetListQuery,
    pagination: PaginationFilter,
    location: Location
) -> QuerySpecification:
    criteria = (
        CriteriaBuilder()
        .search(params.search, AssetFields.asset_code, AssetFields.asset_name)
        .equals(AssetFields.state, params.state)
        .equals(AssetFields.category_id, params.category_id)
        .build()
    )
    return QuerySpecification.build(
        ASSET_SORT,
        AssetFields.id,
        scope=[Equals(AssetFields.location, location)],
        criteria=criteria,
        order_by=params.order_by,
        is_descending=params.is_descending,
        skip=pagination.skip,
        take=pagination.take,
    )

def assignment_list_spec(
    params: AssignmentListQuery,
    pagination: PaginationFilter,
    location: Optional[Location] = None,
    assigned_to_id: Optional[int] = None
) -> QuerySpecification:
    """Assignments of a location, or of one assignee when ``assigned_to_id`` is given."""
    scope = []
    if location is not None:
        scope.append(Equals(AssignmentFields.location, location))
    if assigned_to_id is not None:
        scope.append(Equals(AssignmentFields.assigned_to_id, assigned_to_id))

    criteria = (
        CriteriaBuilder()
        .search(
            params.search,
            AssignmentFields.asset_code,
            AssignmentFields.asset_name,
            AssignmentFields.assigned_to,
        )
        .equals(AssignmentFields.state, params.state)
        .equals(AssignmentFields.assigned_date, params.assigned_date)
        .build()
    )
    return QuerySpecification.build(
        ASSIGNMENT_SORT,
        AssignmentFields.id,
        scope=scope,
        criteria=criteria,
        order_by=params.order_by,
        is_descending=params.is_descending,
        skip=pagination.skip,
        take=pagination.take,
    )

def return_request_list_spec(
    params: ReturnRequestListQuery,
    pagination: PaginationFilter,
    location: Location
) -> QuerySpecification:
    criteria = (
        CriteriaBuilder()
        .search(
            params.search,
            ReturnRequestFields.asset_code,
            ReturnRequestFields.asset_name,
            ReturnRequestFields.requested_by,
        )
        .equals(ReturnRequestFields.state, params.state)
        .equals(ReturnRequestFields.returned_date, params.returned_date)
        .build()
    )
    return QuerySpecification.build(
        RETURN_REQUEST_SORT,
        ReturnRequestFields.id,
        scope=[Equals(ReturnRequestFields.location, location)],
        criteria=criteria,
        order_by=params.order_by,
        is_descending=params.is_descending,
        skip=pagination.skip,
        take=pagination.take,
    )
