"""Dependencies for FastAPI application.

This module defines dependencies used across API endpoints including:
- Configuration access
- Service instances built per request
- Case-insensitive list query parameters
- Paging link construction
"""

from typing import Callable, Dict, Type, TypeVar

from fastapi import Depends, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

# Internal imports
from app.core.config import Settings
from app.database.repositories.assets import AssetRepository
from app.database.repositories.assignments import AssignmentRepository, ReturnRequestRepository
from app.database.repositories.users import UserRepository
from app.database.session import get_session
from app.models.domain.common import Response
from app.services.asset_service import AssetService
from app.services.assignment_service import AssignmentService
from app.services.return_request_service import ReturnRequestService
from app.services.user_service import UserService
from app.utils.pagination import UriService

QueryModel = TypeVar("QueryModel", bound=BaseModel)

# Configuration Dependencies
def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings

def get_uri_service(
    request: Request,
    settings: Settings = Depends(get_app_settings)
) -> UriService:
    """Link builder rooted at ``BASE_URL``, or the request's own base URL."""
    return UriService(settings.BASE_URL or str(request.base_url))

def request_route(request: Request) -> str:
    """Path and query string of the current request."""
    route = request.url.path
    if request.url.query:
        route += "?" + request.url.query
    return route

# Service Dependencies
def get_user_service(
    session: AsyncSession = Depends(get_session),
    uri_service: UriService = Depends(get_uri_service),
    settings: Settings = Depends(get_app_settings)
) -> UserService:
    return UserService(session, UserRepository(session), uri_service, settings)

def get_asset_service(
    session: AsyncSession = Depends(get_session),
    uri_service: UriService = Depends(get_uri_service),
    settings: Settings = Depends(get_app_settings)
) -> AssetService:
    return AssetService(session, AssetRepository(session), uri_service, settings)

def get_assignment_service(
    session: AsyncSession = Depends(get_session),
    uri_service: UriService = Depends(get_uri_service),
    settings: Settings = Depends(get_app_settings)
) -> AssignmentService:
    return AssignmentService(
        session,
        AssignmentRepository(session),
        AssetRepository(session),
        UserRepository(session),
        uri_service,
        settings
    )

def get_return_request_service(
    session: AsyncSession = Depends(get_session),
    uri_service: UriService = Depends(get_uri_service),
    settings: Settings = Depends(get_app_settings)
) -> ReturnRequestService:
    return ReturnRequestService(
        session,
        ReturnRequestRepository(session),
        AssignmentRepository(session),
        AssetRepository(session),
        UserRepository(session),
        uri_service,
        settings
    )

# Common Query Parameters
def _normalize_key(key: str) -> str:
    return key.replace("_", "").lower()

def list_query(model: Type[QueryModel]) -> Callable[[Request], QueryModel]:
    """Build a dependency parsing query parameters into ``model``.

    Parameter names match the model's fields case-insensitively with
    underscores ignored, so ``pageNumber``, ``page_number`` and
    ``PAGENUMBER`` all fill ``page_number``. Blank values count as absent
    and unknown parameters are ignored.
    """
    lookup: Dict[str, str] = {}
    for name, field in model.model_fields.items():
        lookup[_normalize_key(name)] = name
        if field.alias:
            lookup[_normalize_key(field.alias)] = name

    def dependency(request: Request) -> QueryModel:
        values = {}
        for key, value in request.query_params.items():
            name = lookup.get(_normalize_key(key))
            if name is not None and value.strip():
                values[name] = value
        try:
            return model.model_validate(values)
        except ValidationError as e:
            raise RequestValidationError(e.errors(include_url=False))

    return dependency

# Responses
def envelope_response(response: Response, failure_status: int = 400):
    """Return a succeeded envelope as is, a failed one with ``failure_status``."""
    if response.succeeded:
        return response
    return JSONResponse(
        status_code=failure_status,
        content=jsonable_encoder(response.model_dump(by_alias=True))
    )
