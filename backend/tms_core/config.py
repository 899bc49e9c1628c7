"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache) — single instance per process
    - Absent enhanced_service_url ⇒ every gateway call is NotConfigured
    - Empty-string env values for optional fields resolve to None

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support (ADR: developer UX)
    - Invalid values fail at startup, not on first heartbeat
"""

from functools import lru_cache

from pydantic import Field, HttpUrl, TypeAdapter, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_HTTP_URL = TypeAdapter(HttpUrl)


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://tms:tms@db:5432/tms"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Managed hosts provide postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Enhanced service
    enhanced_service_url: str | None = None
    enhanced_core_secret: str | None = Field(None, min_length=16)
    core_instance_id: str | None = Field(None, min_length=1)
    enhanced_timeout_seconds: float = Field(10.0, gt=0)

    # Scheduler
    cron_secret: str | None = Field(None, min_length=16)

    @field_validator(
        "enhanced_service_url", "enhanced_core_secret",
        "core_instance_id", "cron_secret", mode="before",
    )
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("enhanced_service_url")
    @classmethod
    def validate_service_url(cls, v: str | None) -> str | None:
        """Must be http(s); stored without trailing slash so paths join cleanly."""
        if v is None:
            return None
        _HTTP_URL.validate_python(v)
        return v.rstrip("/")

    # API
    cors_origins: list[str] = ["http://localhost:3000"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
