"""Database session management for the AssetDesk application.

This module handles all aspects of database connection management including:
- Async SQLAlchemy engine and session management
- Connection pooling configuration
- Transaction handling
- Slow query logging and simple metrics
- Schema creation on startup

The implementation uses SQLAlchemy 2.0 async patterns. A ``SessionManager``
is created by the application factory and kept on ``app.state``; nothing in
this module holds a process-wide engine.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional
from sqlalchemy.ext.asyncio import (
    create_async_engine,
    AsyncSession,
    AsyncEngine,
    async_sessionmaker
)
from sqlalchemy import event, text
from sqlalchemy.pool import StaticPool
import time
from functools import wraps
from fastapi import Request
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from app.core.config import Settings, get_settings
from app.core.logging import get_logger
from app.models.database.base import Base

# Initialize components
logger = get_logger(__name__)
tracer = trace.get_tracer(__name__)

class DatabaseMetrics:
    """Track database performance metrics."""

    def __init__(self, slow_query_threshold: float = 1.0):
        self.query_count = 0
        self.slow_queries = 0
        self.error_count = 0

        # seconds
        self.slow_query_threshold = slow_query_threshold

    def record_query(self, duration: float):
        """Record query execution metrics."""
        self.query_count += 1
        if duration > self.slow_query_threshold:
            self.slow_queries += 1

    def record_error(self):
        """Record database error."""
        self.error_count += 1

class SessionManager:
    """Manage database sessions and connections."""

    def __init__(self, settings: Optional[Settings] = None, engine: Optional[AsyncEngine] = None):
        """Initialize session manager with configuration.

        Args:
            settings: Application settings, defaults to the cached settings
            engine: Pre-built engine, mostly for tests
        """
        self.settings = settings or get_settings()
        self.engine = engine or self._create_engine()
        self.session_factory = self._create_session_factory()
        self.metrics = DatabaseMetrics(self.settings.DB.SLOW_QUERY_THRESHOLD)

        self._setup_engine_events()

    def _create_engine(self) -> AsyncEngine:
        """Create SQLAlchemy engine with proper configuration."""
        db = self.settings.DB
        if db.is_sqlite:
            # In-memory SQLite needs a single shared connection
            options = {"connect_args": {"check_same_thread": False}}
            if ":memory:" in db.url:
                options["poolclass"] = StaticPool
            return create_async_engine(db.url, echo=db.DB_ECHO, **options)

        return create_async_engine(
            db.url,
            echo=db.DB_ECHO,
            pool_size=db.DB_POOL_SIZE,
            max_overflow=db.DB_MAX_OVERFLOW,
            pool_timeout=db.DB_POOL_TIMEOUT,
            pool_recycle=db.DB_POOL_RECYCLE,
            pool_pre_ping=True,
            connect_args={
                "command_timeout": 60,
                "server_settings": {"application_name": "assetdesk"}
            }
        )

    def _create_session_factory(self) -> async_sessionmaker:
        """Create session factory with proper configuration."""
        return async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False
        )

    def _setup_engine_events(self):
        """Set up SQLAlchemy engine event listeners."""
        sync_engine = self.engine.sync_engine

        @event.listens_for(sync_engine, 'before_cursor_execute')
        def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
            conn.info.setdefault('query_start_time', []).append(time.time())

        @event.listens_for(sync_engine, 'after_cursor_execute')
        def after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
            start_time = conn.info['query_start_time'].pop()
            duration = time.time() - start_time
            self.metrics.record_query(duration)

            if duration > self.metrics.slow_query_threshold:
                logger.warning(
                    "Slow query detected",
                    duration=duration,
                    statement=statement
                )

    async def init_db(self):
        """Create all tables that don't exist yet."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ensured", url=self.engine.url.render_as_string(hide_password=True))

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Get database session with automatic cleanup."""
        session: AsyncSession = self.session_factory()
        try:
            yield session
        except Exception as e:
            self.metrics.record_error()
            logger.error("Session error", error=e)
            await session.rollback()
            raise
        finally:
            await session.close()

    def get_metrics(self) -> dict:
        """Get current database metrics."""
        return {
            "query_count": self.metrics.query_count,
            "slow_queries": self.metrics.slow_queries,
            "error_count": self.metrics.error_count,
        }

    async def healthcheck(self) -> bool:
        """Perform database health check."""
        try:
            async with self.session() as session:
                await session.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error("Database health check failed", error=e)
            return False

    async def dispose(self):
        await self.engine.dispose()

def get_session_manager(request: Request) -> SessionManager:
    """FastAPI dependency returning the manager created at startup."""
    return request.app.state.session_manager

async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    async with get_session_manager(request).session() as session:
        yield session

def with_tracing(func):
    """Decorator for database operation tracing."""
    @wraps(func)
    async def wrapper(*args, **kwargs):
        with tracer.start_as_current_span(
            f"db_{func.__qualname__}",
            kind=trace.SpanKind.CLIENT
        ) as span:
            try:
                result = await func(*args, **kwargs)
                span.set_status(Status(StatusCode.OK))
                return result
            except Exception as e:
                span.set_status(
                    Status(StatusCode.ERROR, str(e))
                )
                raise
    return wrapper
