import logging

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Submission endpoint
    webhook_url: str = Field(default="http://localhost:5678/webhook/document-analysis")
    webhook_timeout_seconds: float = Field(default=120.0)

    # Staging
    accepted_media_type: str = Field(default="application/pdf")

    # Progress emulation
    progress_interval_seconds: float = Field(default=0.8)
    base_steps: int = Field(default=5)
    success_settle_seconds: float = Field(default=1.0)
    failure_settle_seconds: float = Field(default=1.5)

    # Identity: "manual" (typed email) or "authenticated" (signed-in principal)
    identity_mode: str = Field(default="manual")
    secret_key: str = Field(default="change-me-in-production")
    jwt_algorithm: str = Field(default="HS256")

    # Jurisdictions (empty = bundled country list)
    jurisdictions: list[str] = Field(default_factory=list)
    default_jurisdiction: str | None = Field(default=None)

    # Redis event publishing (unset = in-process only)
    redis_url: str | None = Field(default=None)
    events_channel: str = Field(default="submission_events")

    # App
    log_level: str = Field(default="INFO")


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def configure_logging(settings: Settings | None = None) -> None:
    settings = settings or get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
