"""
user_api/core/config.py

Purpose: Application configuration

- Loads environment variables
- Centralizes config values (listen address, DB URI, logging)
- Validates configuration on startup
- Environment-specific settings
"""

from pydantic import Field, validator
from pydantic_settings import BaseSettings
from typing import Literal

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Built once by the entry point and passed to the app factory.
    """

    # Environment
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # Listener
    HOST: str = Field(
        default="0.0.0.0",
        description="Interface the HTTP server binds to"
    )
    PORT: int = Field(
        default=3000,
        description="Port the HTTP server listens on"
    )

    # MongoDB
    MONGODB_URI: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection URI"
    )
    MONGODB_DB_NAME: str = Field(
        default="user_api",
        description="MongoDB database name"
    )
    MONGODB_USERS_COLLECTION: str = Field(
        default="users",
        description="Collection holding user documents"
    )
    MONGODB_CONNECT_RETRIES: int = Field(
        default=3,
        description="Startup connection attempts before giving up"
    )
    MONGODB_SERVER_SELECTION_TIMEOUT_MS: int = Field(
        default=5000,
        description="Driver server selection timeout in milliseconds"
    )
    STRICT_STARTUP: bool = Field(
        default=False,
        description="Abort startup when MongoDB is unreachable instead of serving degraded"
    )

    # Application
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    CORS_ORIGINS: list = Field(
        default=["*"],
        description="Allowed CORS origins"
    )

    @validator("LOG_LEVEL")
    def validate_log_level(cls, v):
        """Normalize and check the log level name."""
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}")
        return level

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"

    class Config:
        env_file = ".env"
        case_sensitive = True
        env_file_encoding = "utf-8"
        extra = "ignore"


def load_settings() -> Settings:
    """Reads settings from the environment and `.env`."""
    return Settings()


def validate_settings(settings: Settings):
    """
    Validates critical settings on application startup.
    Raises ValueError if any required setting is missing or invalid.
    """
    errors = []

    if not settings.MONGODB_URI:
        errors.append("MONGODB_URI is required")
    elif not settings.MONGODB_URI.startswith(("mongodb://", "mongodb+srv://")):
        errors.append("MONGODB_URI must start with mongodb:// or mongodb+srv://")

    if not settings.MONGODB_DB_NAME:
        errors.append("MONGODB_DB_NAME is required")

    if not 0 < settings.PORT < 65536:
        errors.append("PORT must be between 1 and 65535")

    if settings.MONGODB_CONNECT_RETRIES < 1:
        errors.append("MONGODB_CONNECT_RETRIES must be at least 1")

    if errors:
        raise ValueError(f"Configuration validation failed: {', '.join(errors)}")

    return True
