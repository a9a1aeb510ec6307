"""Tests for the user service."""

import pytest
from datetime import date

from app.database.repositories.users import UserRepository
from app.models.domain.common import PagedResponse
from app.models.domain.user import AddUserRequest, UpdateUserRequest, UserListQuery
from app.models.enums import Gender, Location, Role
from app.services.user_service import pwd_context
from app.services.validators import validate_add_user

def add_request(**overrides) -> AddUserRequest:
    values = dict(
        first_name="Binh",
        last_name="Nguyen Van",
        date_of_birth=date(1995, 2, 1),
        joined_date=date(2020, 1, 6),
        gender=Gender.MALE,
        role=Role.STAFF,
        location=Location.HA_NOI,
    )
    values.update(overrides)
    return AddUserRequest(**values)

async def test_add_user_generates_credentials(user_service, db_session):
    response = await user_service.add_user(add_request())

    assert response.succeeded
    assert response.data.username == "binhnv"
    assert response.data.staff_code == f"SD{response.data.id:04d}"
    assert response.data.is_first_time_login

    user = await UserRepository(db_session).get(response.data.id)
    assert pwd_context.verify("binhnv@01021995", user.password_hash)
    assert not pwd_context.verify("binhnv", user.password_hash)

async def test_add_user_suffixes_taken_username(user_service):
    first = await user_service.add_user(add_request())
    second = await user_service.add_user(add_request())

    assert first.data.username == "binhnv"
    assert second.data.username == "binhnv1"
    assert first.data.staff_code != second.data.staff_code

async def test_add_user_validation_errors(user_service, db_session):
    response = await user_service.add_user(add_request(
        first_name=" ",
        last_name="x" * 51,
        joined_date=date(2020, 1, 4)
    ))

    assert not response.succeeded
    assert response.data is None
    assert any(error.startswith("firstName") for error in response.errors)
    assert any(error.startswith("lastName") for error in response.errors)
    assert any("Saturday or Sunday" in error for error in response.errors)
    assert await UserRepository(db_session).count() == 0

@pytest.mark.parametrize(
    "date_of_birth, joined_date",
    [
        (date(2015, 1, 1), date(2020, 1, 6)),
        (date(1995, 2, 1), date(1994, 1, 3)),
        (date(2004, 6, 1), date(2020, 1, 6)),
    ],
)
def test_add_user_date_rules(date_of_birth, joined_date):
    is_valid, errors = validate_add_user(
        add_request(date_of_birth=date_of_birth, joined_date=joined_date),
        today=date(2024, 1, 1)
    )

    assert not is_valid
    assert errors

async def test_get_user_by_id(user_service, factory):
    user = await factory.user(username="lanpt")

    found = await user_service.get_user_by_id(user.id)
    missing = await user_service.get_user_by_id(user.id + 100)

    assert found.succeeded and found.data.username == "lanpt"
    assert not missing.succeeded
    assert missing.message == "User not found"

async def test_get_all_users_is_scoped_and_searchable(user_service, factory):
    await factory.user(username="john", first_name="John")
    await factory.user(username="joy", first_name="Joy", role=Role.ADMIN)
    await factory.user(username="mary", first_name="Mary")
    await factory.user(username="jonas", first_name="Jonas", location=Location.HO_CHI_MINH)

    response = await user_service.get_all_users(
        UserListQuery(search="JO"),
        None,
        Location.HA_NOI,
        "/api/v1/users?search=JO"
    )

    assert isinstance(response, PagedResponse)
    assert response.succeeded
    assert [user.username for user in response.data] == ["john", "joy"]
    assert response.total_records == 2
    assert response.page_size == 10

    admins = await user_service.get_all_users(
        UserListQuery(search="jo", role=Role.ADMIN), None, Location.HA_NOI, "/api/v1/users"
    )
    assert [user.username for user in admins.data] == ["joy"]

async def test_get_all_users_pages_and_links(user_service, factory):
    for number in range(25):
        await factory.user(first_name=f"Staff{number:02d}")

    response = await user_service.get_all_users(
        UserListQuery(page_number=3, page_size=10, order_by="firstName"),
        None,
        Location.HA_NOI,
        "/api/v1/users?orderBy=firstName&pageNumber=3&pageSize=10"
    )

    assert response.total_pages == 3
    assert [user.first_name for user in response.data] == [f"Staff{n:02d}" for n in range(20, 25)]
    assert response.next_page is None
    assert response.previous_page == "http://test/api/v1/users?orderBy=firstName&pageNumber=2&pageSize=10"

async def test_update_user(user_service, factory):
    user = await factory.user()

    response = await user_service.update_user(user.id, UpdateUserRequest(
        date_of_birth=date(1990, 5, 5),
        joined_date=date(2019, 3, 4),
        gender=Gender.FEMALE,
        role=Role.ADMIN
    ))

    assert response.succeeded
    assert response.data.role == Role.ADMIN
    assert response.data.gender == Gender.FEMALE
    assert response.data.joined_date == date(2019, 3, 4)

async def test_update_missing_user(user_service):
    response = await user_service.update_user(999, UpdateUserRequest(
        date_of_birth=date(1990, 5, 5),
        joined_date=date(2019, 3, 4),
        gender=Gender.FEMALE,
        role=Role.ADMIN
    ))

    assert not response.succeeded
    assert response.message == "User not found"

async def test_unexpected_failure_becomes_error_envelope(user_service, mocker):
    mocker.patch.object(user_service.users, "find", side_effect=RuntimeError("database is gone"))

    response = await user_service.get_all_users(UserListQuery(), None, Location.HA_NOI, "/api/v1/users")

    assert isinstance(response, PagedResponse)
    assert not response.succeeded
    assert response.errors == ["database is gone"]
