"""
Configuration Management for the Expense Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

All configuration is centralized here. Settings objects are built once at
startup and handed to the components that need them; nothing below reads
the environment on its own.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_SECRET_KEY = "secretKey"


class MongoSettings(BaseSettings):
    """MongoDB document store configuration."""

    model_config = SettingsConfigDict(
        env_prefix="MONGO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    uri: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection string"
    )
    database: str = Field(
        default="expense-tracker",
        description="Database holding the users and expenses collections"
    )
    users_collection: str = Field(
        default="users",
        description="Collection for registered users"
    )
    expenses_collection: str = Field(
        default="expenses",
        description="Collection for expense records"
    )
    server_selection_timeout_ms: int = Field(
        default=5000,
        ge=100,
        description="How long the driver waits for a reachable server"
    )


class AuthSettings(BaseSettings):
    """Password hashing and access token configuration."""

    model_config = SettingsConfigDict(
        env_prefix="AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    secret_key: str = Field(
        default=DEFAULT_SECRET_KEY,
        min_length=1,
        description="Shared secret used to sign access tokens"
    )
    algorithm: str = Field(
        default="HS256",
        description="JWT signing algorithm"
    )
    token_expire_minutes: int = Field(
        default=60,
        ge=1,
        description="Access token lifetime in minutes"
    )
    bcrypt_rounds: int = Field(
        default=10,
        ge=4,
        le=15,
        description="bcrypt cost factor (log2 of the work rounds)"
    )

    @property
    def uses_default_secret(self) -> bool:
        return self.secret_key == DEFAULT_SECRET_KEY


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

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum level for emitted log events"
    )

    # HTTP server
    host: str = Field(
        default="0.0.0.0",
        description="Interface the HTTP server binds to"
    )
    port: int = Field(
        default=5000,
        ge=1,
        le=65535,
        description="Port the HTTP server binds to"
    )
    cors_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed origins, or * for any"
    )

    # Storage and ownership
    storage_backend: Literal["mongo", "memory"] = Field(
        default="mongo",
        description="Which storage implementation to use"
    )
    enforce_expense_ownership: bool = Field(
        default=True,
        description=(
            "Require a bearer token on /expenses routes and take the owning "
            "user from it. When off, the owner comes from the request as-is."
        )
    )

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def cors_origins_list(self) -> list[str] | str:
        """Get allowed origins in the shape flask-cors expects."""
        if self.cors_origins.strip() == "*":
            return "*"
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings. Each group is loaded once, on first access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    mongo: MongoSettings = Field(default_factory=MongoSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    app: AppSettings = Field(default_factory=AppSettings)


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    for name, settings_cls in (
        ("mongo", MongoSettings),
        ("auth", AuthSettings),
        ("app", AppSettings),
    ):
        try:
            settings_cls()
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
