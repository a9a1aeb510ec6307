"""Configuration management for the AssetDesk application.

This module handles all configuration aspects of the application including:
- Environment variable loading and validation using Pydantic
- Database connection settings
- Pagination defaults and limits
- Environment-specific configurations

The configuration system is designed to be:
1. Type-safe through Pydantic validation
2. Environment-aware (dev, staging, prod)
3. Flexible for testing and local development
"""

from functools import lru_cache
from typing import List, Optional
from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict
from enum import Enum

from app.models.enums import Location

class EnvironmentType(str, Enum):
    """Environment types for configuration management"""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"

class DatabaseSettings(BaseModel):
    """Database-specific configurations"""

    # Full URL wins over the individual parts when set
    DB_URL: Optional[str] = None
    DB_DRIVER: str = "postgresql+asyncpg"
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "assetdesk"
    DB_PASSWORD: str = ""
    DB_NAME: str = "assetdesk"
    DB_POOL_SIZE: int = 20
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800
    DB_ECHO: bool = False
    DB_AUTO_CREATE: bool = True
    SLOW_QUERY_THRESHOLD: float = 1.0

    @property
    def url(self) -> str:
        """Generate the async connection URL"""
        if self.DB_URL:
            return self.DB_URL
        return (
            f"{self.DB_DRIVER}://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

class PaginationSettings(BaseModel):
    """Paging limits applied to every list endpoint"""

    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100

class Settings(BaseSettings):
    """Main application settings with environment-specific configurations"""

    # Basic application settings
    APP_NAME: str = "AssetDesk"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: EnvironmentType = EnvironmentType.DEVELOPMENT

    # CORS
    ALLOWED_ORIGINS: List[str] = ["*"]

    # Database settings
    DB: DatabaseSettings = DatabaseSettings(DB_URL="sqlite+aiosqlite:///./assetdesk.db")

    # Pagination settings
    PAGINATION: PaginationSettings = PaginationSettings()

    # API settings
    API_V1_PREFIX: str = "/api/v1"
    DOCS_URL: Optional[str] = "/docs"
    OPENAPI_URL: Optional[str] = "/openapi.json"
    # Used to build paging links; falls back to the request's base URL
    BASE_URL: Optional[str] = None
    # Location used by admin list endpoints when none is supplied
    DEFAULT_LOCATION: Location = Location.HA_NOI

    @property
    def PROD(self) -> bool:
        """Check if environment is production"""
        return self.ENVIRONMENT == EnvironmentType.PRODUCTION

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=True,
        extra="ignore"
    )

@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings"""
    return Settings()
