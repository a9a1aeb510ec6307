"""Tests for repositories and SQL evaluation of specifications."""

import pytest
from datetime import date

from app.database.repositories.assignments import (
    AssignmentFields,
    AssignmentRepository,
    ReturnRequestFields,
    ReturnRequestRepository
)
from app.database.repositories.users import UserFields, UserRepository
from app.database.specification import CriteriaBuilder, Equals, QuerySpecification, SpecificationEvaluator
from app.models.enums import AssignmentState, Location, ReturnRequestState
from app.services.specifications import (
    ASSIGNMENT_SORT,
    RETURN_REQUEST_SORT,
    USER_SORT
)

def user_spec(**kwargs) -> QuerySpecification:
    return QuerySpecification.build(USER_SORT, UserFields.id, **kwargs)

@pytest.fixture
async def users(factory):
    created = []
    for number in range(25):
        created.append(await factory.user(first_name=f"Staff{number + 1:02d}", username=f"staff{number + 1:02d}"))
    # Other location, never in the scoped results
    await factory.user(first_name="Remote", username="remote", location=Location.DA_NANG)
    return created

async def test_twenty_five_users_page_through_three_pages(db_session, users):
    repository = UserRepository(db_session)
    scope = [Equals(UserFields.location, Location.HA_NOI)]

    first, total = await repository.find(user_spec(scope=scope, skip=0, take=10))
    last, last_total = await repository.find(user_spec(scope=scope, skip=20, take=10))

    assert total == last_total == 25
    assert [user.first_name for user in first] == [f"Staff{n:02d}" for n in range(1, 11)]
    assert [user.first_name for user in last] == [f"Staff{n:02d}" for n in range(21, 26)]

async def test_soft_deleted_rows_are_excluded(db_session, factory):
    repository = UserRepository(db_session)
    kept = await factory.user(username="kept")
    removed = await factory.user(username="removed")

    await repository.delete(removed, deleted_by="admin")
    await db_session.commit()

    assert await repository.get(removed.id) is None
    assert await repository.get(kept.id) is not None
    assert await repository.count() == 1

async def test_sql_search_matches_in_memory_search(db_session, factory):
    for username in ["john", "mary", "joy", "JOAN"]:
        await factory.user(username=username)
    repository = UserRepository(db_session)
    specification = user_spec(
        criteria=CriteriaBuilder().search("jo", UserFields.username).build(),
        order_by="username"
    )

    from_sql, total = await repository.find(specification)
    everyone = await repository.list(user_spec())

    assert [user.username for user in from_sql] == ["JOAN", "john", "joy"]
    assert total == 3
    assert from_sql == SpecificationEvaluator.evaluate(everyone, specification)

async def test_search_treats_wildcards_literally(db_session, factory):
    await factory.user(username="a%b")
    await factory.user(username="axb")
    await factory.user(username="a_c")
    repository = UserRepository(db_session)

    percent, _ = await repository.find(user_spec(criteria=CriteriaBuilder().search("%", UserFields.username).build()))
    underscore, _ = await repository.find(user_spec(criteria=CriteriaBuilder().search("_", UserFields.username).build()))

    assert [user.username for user in percent] == ["a%b"]
    assert [user.username for user in underscore] == ["a_c"]

@pytest.mark.parametrize("order_by", ["firstName", "lastName", "fullName", "staffCode", "joinedDate", "gender"])
@pytest.mark.parametrize("is_descending", [False, True])
async def test_sql_order_matches_in_memory_order(db_session, factory, order_by, is_descending):
    people = [
        ("anna", "Tran", date(2021, 1, 4)),
        ("Anna", "le", date(2020, 1, 6)),
        ("bao", "Pham", date(2021, 1, 4)),
        ("Cuong", "Do", date(2019, 7, 1)),
        ("anna", "Tran", date(2022, 3, 7)),
    ]
    for first_name, last_name, joined in people:
        await factory.user(first_name=first_name, last_name=last_name, joined_date=joined)
    repository = UserRepository(db_session)
    specification = user_spec(order_by=order_by, is_descending=is_descending, skip=1, take=3)

    from_sql = await repository.list(specification)
    everyone = await repository.list(user_spec())

    assert [user.id for user in from_sql] == [
        user.id for user in SpecificationEvaluator.evaluate(everyone, specification)
    ]

async def test_generate_username_adds_numeric_suffix(db_session, factory):
    repository = UserRepository(db_session)

    assert await repository.generate_username("Binh", "Nguyen Van") == "binhnv"

    await factory.user(username="binhnv")
    assert await repository.generate_username("Binh", "Nguyen Van") == "binhnv1"

    await factory.user(username="binhnv1")
    await factory.user(username="binhnvx")
    assert await repository.generate_username("binh", "nguyen van") == "binhnv2"

async def test_assignment_sorting_on_joined_users(db_session, factory):
    admin = await factory.user(username="admin", first_name="Admin")
    category = await factory.category()
    for username in ["zoe", "adam", "minh"]:
        staff = await factory.user(username=username)
        asset = await factory.asset(category)
        await factory.assignment(asset, staff, admin)
    repository = AssignmentRepository(db_session)

    specification = QuerySpecification.build(
        ASSIGNMENT_SORT,
        AssignmentFields.id,
        scope=[Equals(AssignmentFields.location, Location.HA_NOI)],
        criteria=CriteriaBuilder().equals(AssignmentFields.state, AssignmentState.WAITING_FOR_ACCEPTANCE).build(),
        order_by="assignedTo"
    )
    assignments, total = await repository.find(specification)

    assert total == 3
    assert [assignment.assigned_to.username for assignment in assignments] == ["adam", "minh", "zoe"]

async def test_return_requests_without_acceptor_sort_last(db_session, factory):
    admin = await factory.user(username="admin")
    category = await factory.category()
    requests = []
    for username in ["an", "bich", "chi"]:
        staff = await factory.user(username=username)
        asset = await factory.asset(category)
        assignment = await factory.assignment(asset, staff, admin, state=AssignmentState.ACCEPTED)
        requests.append(await factory.return_request(assignment, staff))
    accepted = requests[1]
    accepted.accepted_by = admin
    await db_session.commit()
    repository = ReturnRequestRepository(db_session)

    for is_descending in (False, True):
        specification = QuerySpecification.build(
            RETURN_REQUEST_SORT,
            ReturnRequestFields.id,
            order_by="acceptedBy",
            is_descending=is_descending
        )
        ordered, _ = await repository.find(specification)
        assert ordered[0].id == accepted.id
        assert [request.id for request in ordered[1:]] == [requests[0].id, requests[2].id]

async def test_return_request_lookup_by_assignment(db_session, factory):
    admin = await factory.user(username="admin")
    staff = await factory.user(username="staff")
    asset = await factory.asset(await factory.category())
    assignment = await factory.assignment(asset, staff, admin, state=AssignmentState.ACCEPTED)
    repository = ReturnRequestRepository(db_session)

    assert await repository.get_for_assignment(assignment.id) is None

    cancelled = await factory.return_request(assignment, staff)
    await repository.delete(cancelled)
    await db_session.commit()
    assert await repository.get_for_assignment(assignment.id) is None

    completed = await factory.return_request(assignment, staff, state=ReturnRequestState.COMPLETED)
    found = await repository.get_for_assignment(assignment.id)
    assert found.id == completed.id
    assert found.state == ReturnRequestState.COMPLETED
