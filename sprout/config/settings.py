"""
Configuration Management for Sprout

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The data layer never reads the environment directly; the orchestrator
reads these settings once and passes plain values into the components
it constructs.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sprout.models.finance import CurrencyCode


class DatabaseSettings(BaseSettings):
    """Embedded SQLite database configuration."""
    
    model_config = SettingsConfigDict(
        env_prefix="SPROUT_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    path: str = Field(
        default="data/sprout.db",
        description="Path to the SQLite file (':memory:' for an in-memory store)"
    )
    journal_mode: str = Field(
        default="WAL",
        description="SQLite journal mode applied on connect"
    )
    enforce_foreign_keys: bool = Field(
        default=False,
        description="Turn on PRAGMA foreign_keys (blocks deleting referenced rows)"
    )
    busy_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="How long SQLite waits on a locked database file"
    )
    connect_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts made when opening the database file"
    )
    
    @field_validator('journal_mode')
    @classmethod
    def validate_journal_mode(cls, v: str) -> str:
        """Only accept journal modes SQLite understands."""
        mode = v.strip().upper()
        allowed = {"DELETE", "TRUNCATE", "PERSIST", "MEMORY", "WAL", "OFF"}
        if mode not in allowed:
            raise ValueError(f"Unsupported journal mode: {v}")
        return mode


class AppSettings(BaseSettings):
    """
    Main application settings.
    
    Loads configuration from environment variables and .env file.
    """
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    # Logging
    log_level: str = Field(
        default="INFO",
        description="Standard logging level name"
    )
    
    # Data defaults
    default_currency: CurrencyCode = Field(
        default=CurrencyCode.USD,
        description="Currency used for a freshly created profile"
    )
    seed_demo_data: bool = Field(
        default=False,
        description="Insert the illustrative demo dataset on first launch"
    )
    audit_to_database: bool = Field(
        default=True,
        description="Persist audit events to the audit_log table"
    )
    
    # Query defaults
    default_page_size: int = Field(
        default=50,
        ge=1,
        le=1000,
        description="Default page size for transaction listings"
    )
    recent_transactions_limit: int = Field(
        default=5,
        ge=1,
        le=100,
        description="How many transactions count as 'recent'"
    )
    
    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class Settings(BaseSettings):
    """
    Root settings container.
    
    Aggregates all sub-settings for easy access.
    """
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    # Note: These are loaded lazily to allow partial configuration
    
    @property
    def database(self) -> DatabaseSettings:
        return DatabaseSettings()
    
    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).
    
    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings(settings: Optional[Settings] = None) -> dict[str, object]:
    """
    Validate all settings are properly configured.
    
    Returns a dict of {setting_name: is_valid} plus `<name>_error`
    entries for the sections that failed. Useful for startup checks.
    """
    results: dict[str, object] = {}
    
    settings = settings or get_settings()
    
    try:
        _ = settings.database
        results["database"] = True
    except Exception as e:
        results["database"] = False
        results["database_error"] = str(e)
    
    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)
    
    return results
