"""Base repository implementation for database operations.

This module provides a generic repository pattern implementation with common
database operations that can be inherited by specific repositories.

Features:
- Generic CRUD operations (soft delete)
- Specification-driven list queries with unpaged counts
- Per-repository base query for joins and eager loading

Repositories only ``flush``; committing is the caller's unit of work.
"""

from typing import Generic, TypeVar, Type, Optional, List, Any, Tuple
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from app.models.database.base import Base
from app.core.logging import get_logger
from app.database.session import with_tracing
from app.database.specification import QuerySpecification, SpecificationEvaluator

# Type variable for models
ModelType = TypeVar("ModelType", bound=Base)
logger = get_logger(__name__)

class BaseRepository(Generic[ModelType]):
    """Base repository providing common database operations."""

    def __init__(self, model: Type[ModelType], session: AsyncSession):
        """Initialize repository with model and session.

        Args:
            model: SQLAlchemy model class
            session: AsyncSession instance
        """
        self.model = model
        self.session = session

    def base_query(self) -> Select:
        """Query every list starts from; excludes soft-deleted rows."""
        return select(self.model).where(self.model.not_deleted())

    @with_tracing
    async def add(self, instance: ModelType) -> ModelType:
        """Add a new record.

        Args:
            instance: Transient model instance

        Returns:
            The same instance, flushed so its id is set
        """
        try:
            self.session.add(instance)
            await self.session.flush()
            return instance
        except Exception as e:
            logger.error(f"Add failed for {self.model.__name__}", error=e)
            raise

    @with_tracing
    async def get(self, id: Any) -> Optional[ModelType]:
        """Get record by ID.

        Args:
            id: Record ID

        Returns:
            Model instance if found, None otherwise
        """
        try:
            query = self.base_query().where(self.model.id == id)
            result = await self.session.execute(query)
            return result.scalars().unique().one_or_none()
        except Exception as e:
            logger.error(f"Get failed for {self.model.__name__}", error=e)
            raise

    @with_tracing
    async def update(self, instance: ModelType, **values) -> ModelType:
        """Apply field values to a loaded record and flush.

        Args:
            instance: Persistent model instance
            **values: Fields to update

        Returns:
            Updated model instance
        """
        try:
            for field_name, value in values.items():
                setattr(instance, field_name, value)
            await self.session.flush()
            return instance
        except Exception as e:
            logger.error(f"Update failed for {self.model.__name__}", error=e)
            raise

    @with_tracing
    async def delete(self, instance: ModelType, deleted_by: Optional[str] = None) -> None:
        """Soft delete a record."""
        try:
            instance.soft_delete()
            instance.last_modified_by = deleted_by
            await self.session.flush()
        except Exception as e:
            logger.error(f"Delete failed for {self.model.__name__}", error=e)
            raise

    @with_tracing
    async def list(self, spec: QuerySpecification) -> List[ModelType]:
        """Get the records selected by a specification, sorted and paged."""
        try:
            query = SpecificationEvaluator.get_query(self.base_query(), spec)
            result = await self.session.execute(query)
            return list(result.scalars().unique().all())
        except Exception as e:
            logger.error(f"List failed for {self.model.__name__}", error=e)
            raise

    @with_tracing
    async def count(self, spec: Optional[QuerySpecification] = None) -> int:
        """Get count of records matching a specification, ignoring paging.

        Args:
            spec: Optional specification; all live records when omitted

        Returns:
            Count of matching records
        """
        try:
            if spec is None:
                query = select(func.count()).select_from(self.base_query().subquery())
            else:
                query = SpecificationEvaluator.count_query(self.base_query(), spec)
            result = await self.session.execute(query)
            return result.scalar_one()
        except Exception as e:
            logger.error(f"Count failed for {self.model.__name__}", error=e)
            raise

    async def find(self, spec: QuerySpecification) -> Tuple[List[ModelType], int]:
        """Page of records plus the count of all records the page was cut from."""
        total = await self.count(spec)
        items = await self.list(spec)
        return items, total
