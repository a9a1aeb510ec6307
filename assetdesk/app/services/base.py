"""Shared plumbing for domain services.

``service_boundary`` wraps every public service method so callers always get
an envelope back: business failures become non-succeeded responses and the
session is rolled back, leaving it usable for the next request.
"""

from functools import wraps
from typing import Type

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings
from app.core.exceptions import AppException, RequestValidationFailed
from app.core.logging import get_logger
from app.models.domain.common import Response
from app.utils.pagination import PaginationFilter, UriService

logger = get_logger(__name__)

def service_boundary(envelope: Type[Response] = Response):
    """Convert exceptions raised by a service method into ``envelope``.

    Args:
        envelope: Response class returned on failure (``Response`` or
            ``PagedResponse``)
    """
    def decorator(func):
        @wraps(func)
        async def wrapper(self: "BaseService", *args, **kwargs):
            try:
                return await func(self, *args, **kwargs)
            except RequestValidationFailed as e:
                await self.session.rollback()
                return envelope(succeeded=False, message=e.detail, errors=e.errors)
            except AppException as e:
                await self.session.rollback()
                return envelope(succeeded=False, message=e.detail)
            except Exception as e:
                logger.error(
                    f"{type(self).__name__}.{func.__name__} failed",
                    error=e
                )
                await self.session.rollback()
                return envelope(succeeded=False, errors=[str(e)])
        return wrapper
    return decorator

class BaseService:
    """Common constructor state for services."""

    def __init__(
        self,
        session: AsyncSession,
        uri_service: UriService,
        settings: Settings
    ):
        self.session = session
        self.uri_service = uri_service
        self.settings = settings

    def pagination_for(self, page_number: int, page_size: int) -> PaginationFilter:
        """Normalized paging using the configured default and maximum sizes."""
        return PaginationFilter(
            page_number,
            page_size,
            default_page_size=self.settings.PAGINATION.DEFAULT_PAGE_SIZE,
            max_page_size=self.settings.PAGINATION.MAX_PAGE_SIZE
        )

    async def commit(self):
        await self.session.commit()
