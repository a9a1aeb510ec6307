"""User management service.

Handles creating and editing staff accounts and the paged user list of an
admin's location. Usernames and initial passwords are generated here:

- username: lowercased first name plus the initial of every last-name word,
  with a numeric suffix when already taken (``binhnv``, ``binhnv1``)
- password: ``{username}@{ddMMyyyy of date of birth}``, stored hashed
- staff code: ``SD`` plus the zero-padded id (``SD0007``)
"""

from typing import List, Optional

from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings
from app.core.exceptions import NotFoundError, RequestValidationFailed
from app.core.logging import get_logger
from app.database.repositories.users import UserRepository
from app.models.database.user import User
from app.models.domain.common import PagedResponse, Response
from app.models.domain.user import (
    AddUserRequest,
    UpdateUserRequest,
    UserListQuery,
    UserResponse
)
from app.models.enums import Location
from app.utils.pagination import PaginationFilter, UriService, create_paged_response
from . import mapper
from .base import BaseService, service_boundary
from .specifications import user_list_spec
from .validators import validate_add_user, validate_update_user

logger = get_logger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

def staff_code_for(user_id: int) -> str:
    return f"SD{user_id:04d}"

class UserService(BaseService):
    """Use cases for staff accounts."""

    def __init__(
        self,
        session: AsyncSession,
        users: UserRepository,
        uri_service: UriService,
        settings: Settings
    ):
        super().__init__(session, uri_service, settings)
        self.users = users

    @service_boundary()
    async def add_user(self, request: AddUserRequest) -> Response[UserResponse]:
        """Create a user with generated username, password and staff code."""
        is_valid, errors = validate_add_user(request)
        if not is_valid:
            raise RequestValidationFailed(errors)

        user = mapper.to_user_entity(request)
        user.username = await self.users.generate_username(user.first_name, user.last_name)
        user.password_hash = pwd_context.hash(
            mapper.default_password(user.username, user.date_of_birth)
        )
        await self.users.add(user)

        # Staff code needs the id assigned by the insert
        await self.users.update(user, staff_code=staff_code_for(user.id))
        await self.commit()

        logger.info("User created", user_id=user.id, username=user.username)
        return Response(data=mapper.to_user_response(user), message="User created")

    @service_boundary()
    async def get_user_by_id(self, user_id: int) -> Response[UserResponse]:
        user = await self._get_user(user_id)
        return Response(data=mapper.to_user_response(user))

    @service_boundary(PagedResponse)
    async def get_all_users(
        self,
        params: UserListQuery,
        pagination: Optional[PaginationFilter],
        location: Location,
        route: str
    ) -> PagedResponse[UserResponse]:
        """Paged users of ``location``, searched on username and staff code."""
        pagination = pagination or self.pagination_for(params.page_number, params.page_size)
        spec = user_list_spec(params, pagination, location)

        users, total = await self.users.find(spec)
        data: List[UserResponse] = [mapper.to_user_response(user) for user in users]
        return create_paged_response(data, pagination, total, self.uri_service, route)

    @service_boundary()
    async def update_user(self, user_id: int, request: UpdateUserRequest) -> Response[UserResponse]:
        """Edit date of birth, joined date, gender and role."""
        is_valid, errors = validate_update_user(request)
        if not is_valid:
            raise RequestValidationFailed(errors)

        user = await self._get_user(user_id)
        await self.users.update(
            user,
            date_of_birth=request.date_of_birth,
            joined_date=request.joined_date,
            gender=request.gender,
            role=request.role
        )
        await self.commit()
        return Response(data=mapper.to_user_response(user), message="User updated")

    async def _get_user(self, user_id: int) -> User:
        user = await self.users.get(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user
