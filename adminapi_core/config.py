"""
Unified configuration for the ODS admin API.

This module provides a single Settings class that consolidates all
environment variables used by the admin API and its stores.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Determine project root for .env file loading (allows running from any CWD)
PROJECT_ROOT = Path(__file__).resolve().parent.parent


class DatabaseEngine(str, Enum):
    """Database engines an ODS instance connection string can target."""

    SQL_SERVER = "SqlServer"
    POSTGRESQL = "PostgreSQL"


class StoreBackend(str, Enum):
    """Where the admin and security stores live."""

    MEMORY = "memory"
    POSTGRES = "postgres"


class Settings(BaseSettings):
    """
    Settings for the admin API.

    Environment variables are loaded from .env file and can be overridden
    by actual environment variables.
    """

    # Service identification
    SERVICE_NAME: str = "ods-admin-api"

    # Engine used to validate ODS instance connection strings
    DATABASE_ENGINE: DatabaseEngine = DatabaseEngine.POSTGRESQL

    # Admin store (applications, ODS instances) and security store (claim sets)
    STORE_BACKEND: StoreBackend = StoreBackend.MEMORY
    ADMIN_DSN: str = "host=localhost port=5432 dbname=EdFi_Admin user=postgres password=postgres"
    SECURITY_DSN: str = "host=localhost port=5432 dbname=EdFi_Security user=postgres password=postgres"

    # Vendors that may never be modified or deleted
    RESERVED_VENDOR_NAMES: list[str] = ["EdFi", "Ed-Fi Alliance"]

    # Logging
    LOG_LEVEL: str = "INFO"

    # App host/port
    APP_HOST: str = "0.0.0.0"
    APP_PORT: int = 8081

    model_config = SettingsConfigDict(
        env_file=PROJECT_ROOT / ".env",
        extra="ignore"
    )


# Global settings instance
settings = Settings()  # type: ignore
