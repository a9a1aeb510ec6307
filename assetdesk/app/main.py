"""Main FastAPI application entry point.

This module serves as the primary entry point for the AssetDesk application.
It handles all core application setup including:
- FastAPI application initialization and configuration
- Middleware setup for CORS, correlation ids and request logging
- Database session manager lifecycle and schema creation
- Route registration and API versioning
- Error handlers producing response envelopes
- Health check endpoint
"""

# Standard library imports
import time
from contextlib import asynccontextmanager
from typing import Optional

# FastAPI imports
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Internal imports
from app.api.v1.router import api_router
from app.core.config import Settings, get_settings
from app.core.exceptions import AppException
from app.core.logging import (
    CorrelationMiddleware,
    RequestLoggingMiddleware,
    get_logger,
    setup_logging
)
from app.database.session import SessionManager
from app.models.domain.common import Response

logger = get_logger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Handle application startup and shutdown events.
    This context manager ensures the database engine is released.
    """
    settings: Settings = app.state.settings
    session_manager: SessionManager = app.state.session_manager

    # Startup
    setup_logging()
    logger.info("Starting up application", environment=settings.ENVIRONMENT.value)
    try:
        if settings.DB.DB_AUTO_CREATE:
            await session_manager.init_db()
        yield  # Application runs here
    finally:
        logger.info("Shutting down application")
        await session_manager.dispose()

def _validation_messages(exc: RequestValidationError):
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query"))
        messages.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))
    return messages

def create_application(
    settings: Optional[Settings] = None,
    session_manager: Optional[SessionManager] = None
) -> FastAPI:
    """
    Create and configure the FastAPI application instance.
    Handles all application setup including middleware, routes, and error handlers.
    """
    settings = settings or get_settings()

    # Initialize FastAPI with custom configurations
    app = FastAPI(
        title=f"{settings.APP_NAME} API",
        description="Assets, assignments and return requests",
        version=settings.APP_VERSION,
        lifespan=lifespan,
        docs_url=settings.DOCS_URL if not settings.PROD else None,
        openapi_url=settings.OPENAPI_URL if not settings.PROD else None,
    )
    app.state.settings = settings
    app.state.session_manager = session_manager or SessionManager(settings)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add custom middleware
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    # Register exception handlers
    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException):
        """Handle custom application exceptions"""
        errors = getattr(exc, "errors", [])
        envelope = Response(succeeded=False, message=exc.detail, errors=errors)
        return JSONResponse(
            status_code=exc.status_code,
            content=jsonable_encoder(envelope.model_dump(by_alias=True))
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle request validation errors with clear messages"""
        envelope = Response(
            succeeded=False,
            message="Validation failed",
            errors=_validation_messages(exc)
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=jsonable_encoder(envelope.model_dump(by_alias=True))
        )

    # Register routers
    app.include_router(api_router, prefix=settings.API_V1_PREFIX)

    # Health check endpoint
    @app.get("/health", tags=["Health"])
    async def health_check():
        """
        Health check endpoint for monitoring systems.
        Checks the database connection and reports query metrics.
        """
        manager: SessionManager = app.state.session_manager
        healthy = await manager.healthcheck()
        content = {
            "status": "healthy" if healthy else "unhealthy",
            "timestamp": time.time(),
            "version": app.version,
            "database": manager.get_metrics(),
        }
        if not healthy:
            return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=content)
        return content

    return app

# Create the application instance
app = create_application()

# Only run the server directly in development
if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=not settings.PROD,
        log_level="debug" if not settings.PROD else "info"
    )
