"""
Application configuration using Pydantic Settings.
"""
import logging
from functools import lru_cache
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Isolation levels accepted by SQLAlchemy's create_engine/execution_options
ISOLATION_LEVELS = {
    "SERIALIZABLE",
    "REPEATABLE READ",
    "READ COMMITTED",
    "READ UNCOMMITTED",
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Menu Import API"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./menu_import.db"

    # Imports
    MAX_IMPORT_FILE_SIZE: int = 10 * 1024 * 1024
    IMPORT_ISOLATION_LEVEL: Optional[str] = "SERIALIZABLE"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Accept only level names the logging module knows about."""
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"LOG_LEVEL must be a logging level name (got {v!r})")
        return level

    @field_validator("IMPORT_ISOLATION_LEVEL")
    @classmethod
    def validate_isolation_level(cls, v: Optional[str]) -> Optional[str]:
        """
        Validate the isolation level requested for import transactions.

        An empty value disables the override and leaves the driver default.
        """
        if v is None or not v.strip():
            return None

        level = " ".join(v.upper().replace("_", " ").split())
        if level not in ISOLATION_LEVELS:
            raise ValueError(
                f"IMPORT_ISOLATION_LEVEL must be one of {sorted(ISOLATION_LEVELS)} (got {v!r})"
            )
        return level

    @property
    def max_import_file_size_mb(self) -> int:
        return self.MAX_IMPORT_FILE_SIZE // (1024 * 1024)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
