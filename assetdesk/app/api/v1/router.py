"""Router configuration for the AssetDesk application.

This module combines the endpoint routers into the versioned API. Each
endpoint module carries its own prefix.
"""

from fastapi import APIRouter

# Import endpoint routers
from app.api.v1.endpoints import (
    assets,
    assignments,
    return_requests,
    users
)

# Create main router
api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(users.router)
api_router.include_router(assets.router)
api_router.include_router(assignments.router)
api_router.include_router(return_requests.router)
