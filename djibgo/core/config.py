"""Application configuration using pydantic settings with structured sections.

Every field can be overridden from the environment or a ``.env`` file using
``__`` between section and field, e.g. ``ISSUANCE__VALIDITY_HOURS=12``.
"""

from datetime import timedelta
from functools import lru_cache
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False


class DatabaseSettings(BaseModel):
    url: str = "sqlite+aiosqlite:///./djibgo.db"
    echo: bool = False
    pool_size: Optional[int] = None
    max_overflow: Optional[int] = None
    # Run ``create_all`` on startup; turn off once Alembic owns the schema.
    create_tables: bool = True


class SecuritySettings(BaseModel):
    secret_key: str = Field(default="change-me", min_length=8)
    algorithm: str = "HS256"
    access_token_expire_minutes: int = Field(default=60 * 24, ge=1)
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)

    @property
    def access_token_lifetime(self) -> timedelta:
        return timedelta(minutes=self.access_token_expire_minutes)


class IssuanceSettings(BaseModel):
    """Knobs for temporary password issuance and reminders."""

    validity_hours: int = Field(default=24, ge=1)
    default_country_prefix: str = "+253"
    self_test_enabled: bool = True
    lease_seconds: int = Field(default=30, ge=1)
    read_back_attempts: int = Field(default=3, ge=1)
    read_back_initial_delay: float = Field(default=0.25, ge=0)
    read_back_multiplier: float = Field(default=2.0, ge=1)
    read_back_max_delay: float = Field(default=2.0, ge=0)
    reminder_window_minutes: int = Field(default=60, ge=1)

    @field_validator("default_country_prefix")
    @classmethod
    def _prefix_has_plus(cls, value: str) -> str:
        digits = value.strip().lstrip("+")
        if not digits.isdigit():
            raise ValueError("default_country_prefix must look like +253")
        return f"+{digits}"

    @property
    def validity(self) -> timedelta:
        return timedelta(hours=self.validity_hours)

    @property
    def reminder_window(self) -> timedelta:
        return timedelta(minutes=self.reminder_window_minutes)


class CorsSettings(BaseModel):
    allow_origins: list[str] = ["*"]
    allow_headers: list[str] = ["authorization", "x-client-info", "apikey", "content-type"]


class Settings(BaseSettings):
    """Top-level application settings with nested sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "staging", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"
    project_name: str = "DjibGo Credentials"
    api_prefix: str = "/functions/v1"

    server: ServerSettings = ServerSettings()
    database: DatabaseSettings = DatabaseSettings()
    security: SecuritySettings = SecuritySettings()
    issuance: IssuanceSettings = IssuanceSettings()
    cors: CorsSettings = CorsSettings()

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()

    @property
    def database_url(self) -> str:
        return self.database.url


@lru_cache()
def get_settings() -> Settings:
    return Settings()
