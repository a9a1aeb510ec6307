"""Shared pytest fixtures and configurations for the AssetDesk application.

This module provides test fixtures and configurations used across all test files,
including:
- An in-memory database per test
- Test data factories
- Service instances wired to the test session
- Test client setup
"""

import pytest
from datetime import date
from typing import AsyncGenerator, Optional
import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import DatabaseSettings, Settings
from app.database.repositories.assets import AssetRepository
from app.database.repositories.assignments import AssignmentRepository, ReturnRequestRepository
from app.database.repositories.users import UserRepository
from app.database.session import SessionManager, get_session
from app.main import create_application
from app.models.database import Asset, Assignment, Category, ReturnRequest, User
from app.models.enums import (
    AssetState,
    AssignmentState,
    Gender,
    Location,
    ReturnRequestState,
    Role
)
from app.services.asset_service import AssetService
from app.services.assignment_service import AssignmentService
from app.services.return_request_service import ReturnRequestService
from app.services.user_service import UserService
from app.utils.pagination import UriService

BASE_URL = "http://test"

# Settings fixtures
@pytest.fixture
def settings() -> Settings:
    """Settings pointing at a private in-memory database."""
    return Settings(
        DB=DatabaseSettings(DB_URL="sqlite+aiosqlite:///:memory:", DB_AUTO_CREATE=False),
        BASE_URL=BASE_URL
    )

# Database fixtures
@pytest.fixture
async def session_manager(settings: Settings) -> AsyncGenerator[SessionManager, None]:
    """Create the schema on a fresh in-memory engine."""
    manager = SessionManager(settings)
    await manager.init_db()
    yield manager
    await manager.dispose()

@pytest.fixture
async def db_session(session_manager: SessionManager) -> AsyncGenerator[AsyncSession, None]:
    """Get database session for testing."""
    async with session_manager.session() as session:
        yield session

class Factory:
    """Create committed test rows with sensible defaults."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self._counter = 0

    def _next(self) -> int:
        self._counter += 1
        return self._counter

    async def _save(self, instance):
        self.session.add(instance)
        await self.session.commit()
        return instance

    async def user(
        self,
        first_name: str = "Binh",
        last_name: str = "Nguyen Van",
        username: Optional[str] = None,
        location: Location = Location.HA_NOI,
        role: Role = Role.STAFF,
        joined_date: date = date(2020, 1, 6),
        **kwargs
    ) -> User:
        number = self._next()
        return await self._save(User(
            first_name=first_name,
            last_name=last_name,
            username=username or f"user{number:03d}",
            staff_code=kwargs.pop("staff_code", f"SD{number:04d}"),
            password_hash="not-a-real-hash",
            date_of_birth=kwargs.pop("date_of_birth", date(1995, 2, 1)),
            joined_date=joined_date,
            gender=kwargs.pop("gender", Gender.MALE),
            role=role,
            location=location,
            **kwargs
        ))

    async def category(self, name: Optional[str] = None, prefix: Optional[str] = None) -> Category:
        number = self._next()
        return await self._save(Category(
            name=name or f"Category {number}",
            prefix=prefix or f"C{number}"
        ))

    async def asset(
        self,
        category: Category,
        asset_code: Optional[str] = None,
        asset_name: str = "Laptop",
        state: AssetState = AssetState.AVAILABLE,
        location: Location = Location.HA_NOI,
        installed_date: date = date(2021, 3, 1)
    ) -> Asset:
        number = self._next()
        return await self._save(Asset(
            asset_code=asset_code or f"{category.prefix}{number:06d}",
            asset_name=asset_name,
            specification="Core i5, 8GB RAM",
            installed_date=installed_date,
            state=state,
            location=location,
            category=category
        ))

    async def assignment(
        self,
        asset: Asset,
        assigned_to: User,
        assigned_by: User,
        state: AssignmentState = AssignmentState.WAITING_FOR_ACCEPTANCE,
        assigned_date: date = date(2024, 5, 2)
    ) -> Assignment:
        return await self._save(Assignment(
            asset=asset,
            assigned_to=assigned_to,
            assigned_by=assigned_by,
            assigned_date=assigned_date,
            state=state,
            note="",
            location=asset.location
        ))

    async def return_request(
        self,
        assignment: Assignment,
        requested_by: User,
        state: ReturnRequestState = ReturnRequestState.WAITING_FOR_RETURNING
    ) -> ReturnRequest:
        return await self._save(ReturnRequest(
            assignment=assignment,
            requested_by=requested_by,
            state=state,
            location=assignment.location
        ))

@pytest.fixture
def factory(db_session: AsyncSession) -> Factory:
    return Factory(db_session)

# Service fixtures
@pytest.fixture
def uri_service() -> UriService:
    return UriService(BASE_URL)

@pytest.fixture
def user_service(db_session, uri_service, settings) -> UserService:
    return UserService(db_session, UserRepository(db_session), uri_service, settings)

@pytest.fixture
def asset_service(db_session, uri_service, settings) -> AssetService:
    return AssetService(db_session, AssetRepository(db_session), uri_service, settings)

@pytest.fixture
def assignment_service(db_session, uri_service, settings) -> AssignmentService:
    return AssignmentService(
        db_session,
        AssignmentRepository(db_session),
        AssetRepository(db_session),
        UserRepository(db_session),
        uri_service,
        settings
    )

@pytest.fixture
def return_request_service(db_session, uri_service, settings) -> ReturnRequestService:
    return ReturnRequestService(
        db_session,
        ReturnRequestRepository(db_session),
        AssignmentRepository(db_session),
        AssetRepository(db_session),
        UserRepository(db_session),
        uri_service,
        settings
    )

# HTTP client fixtures
@pytest.fixture
def app(settings: Settings, session_manager: SessionManager, db_session: AsyncSession):
    """Application sharing the test session."""
    application = create_application(settings, session_manager)

    async def override_get_session():
        yield db_session

    application.dependency_overrides[get_session] = override_get_session
    yield application
    application.dependency_overrides.clear()

@pytest.fixture
async def async_client(app) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Get async HTTP client."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url=BASE_URL) as client:
        yield client
