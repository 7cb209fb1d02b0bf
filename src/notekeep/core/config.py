"""Configuration management for NoteKeep.

Settings are loaded with Pydantic Settings from environment variables
(prefixed with ``NOTEKEEP_``) and an optional ``.env`` file. They are read
once at process start and are immutable while the application runs.
"""

import base64
import binascii
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Minimum decoded length of the HS256 signing key, in bytes.
MIN_SIGNING_KEY_BYTES = 32

# base64("notekeep-dev-signing-key-change-me")
DEV_JWT_SECRET_BASE64 = "bm90ZWtlZXAtZGV2LXNpZ25pbmcta2V5LWNoYW5nZS1tZQ=="


class Settings(BaseSettings):
    """Application configuration settings.

    All values are validated at startup; an invalid signing secret or an
    unsupported worker/database combination prevents the app from booting.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="NOTEKEEP_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Settings
    app_name: str = "NoteKeep"
    app_version: str = "0.1.0"
    environment: Literal["development", "production", "testing"] = "development"
    debug: bool = False

    # Server Settings
    host: str = "0.0.0.0"
    port: int = 8080
    workers: int = 1

    # Database Settings
    database_url: str = "sqlite+aiosqlite:///./nk_data/notekeep.db"
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    db_pool_recycle: int = 3600
    db_echo: bool = False

    # Security Settings
    jwt_secret_base64: str = Field(
        default=DEV_JWT_SECRET_BASE64,
        description="Base64-encoded symmetric key used to sign JWTs",
    )

    # Expired refresh tokens are swept on this period (0 disables the sweeper)
    token_purge_interval_seconds: int = Field(default=300, ge=0)

    # CORS Settings
    cors_origins: list[str] = Field(default=["http://localhost:3000"])

    # Logging Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str]) -> list[str]:
        """Parse CORS origins from comma-separated string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("jwt_secret_base64")
    @classmethod
    def validate_jwt_secret(cls, v: str) -> str:
        """Reject secrets that are not base64 or too short for HS256."""
        try:
            key = base64.b64decode(v, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError("jwt_secret_base64 must be valid base64") from e
        if len(key) < MIN_SIGNING_KEY_BYTES:
            raise ValueError(
                f"jwt_secret_base64 must decode to at least {MIN_SIGNING_KEY_BYTES} bytes"
            )
        return v

    @model_validator(mode="after")
    def validate_production_secret(self) -> "Settings":
        """Refuse to run production with the development signing key."""
        if self.is_production and self.jwt_secret_base64 == DEV_JWT_SECRET_BASE64:
            raise ValueError("NOTEKEEP_JWT_SECRET_BASE64 must be set in production")
        return self

    @model_validator(mode="after")
    def validate_sqlite_workers(self) -> "Settings":
        """Validate that SQLite is not used with multiple workers."""
        if self.workers > 1 and self.database_url.startswith("sqlite"):
            raise ValueError(
                "SQLite does not support multiple worker processes. "
                f"Requested {self.workers} workers, but SQLite requires workers=1."
            )
        return self

    @property
    def signing_key(self) -> bytes:
        """Decoded JWT signing key."""
        return base64.b64decode(self.jwt_secret_base64)

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        return self.environment == "testing"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: Application settings, loaded on first call.
    """
    return Settings()
