"""Application configuration management."""
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


SUPPORTED_PROVIDERS = ("groq", "openai", "anthropic")


@dataclass(frozen=True)
class LLMConfig:
    """Resolved connection details for the active model provider."""

    provider: str
    api_key: str
    model: str
    base_url: str | None = None
    temperature: float = 0.4
    timeout_seconds: float = 20.0


class Settings(BaseSettings):
    """Centralised application settings derived from environment variables."""

    llm_provider: str = Field(default="groq")

    groq_api_key: str | None = None
    groq_base_url: str = Field(default="https://api.groq.com/openai/v1")
    groq_model: str = Field(default="llama-3.1-8b-instant")

    openai_api_key: str | None = None
    openai_base_url: str = Field(default="https://api.openai.com/v1")
    openai_model: str = Field(default="gpt-4o-mini")

    anthropic_api_key: str | None = None
    anthropic_model: str = Field(default="claude-sonnet-4-5-20250929")

    llm_temperature: float = Field(default=0.4, ge=0.0, le=2.0)
    request_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout applied to every outbound HTTP call.",
    )

    strava_client_id: str | None = None
    strava_client_secret: str | None = None
    strava_refresh_token: str | None = None
    strava_lookback_days: int = Field(default=42, ge=1)
    strava_per_page: int = Field(default=60, ge=1, le=200)

    prompt_config_path: Path = Field(
        default=Path(__file__).parent / "prompts" / "workout_prompt.yaml",
        description="YAML file holding the workout prompt template and examples.",
    )

    app_host: str = Field(default="0.0.0.0")
    app_port: int = Field(default=8000, ge=1, le=65535)
    debug: bool = Field(default=False)

    log_level: str = Field(default="INFO")
    services_log_level: str | None = Field(
        default=None,
        description="Level for run_planner.services loggers; defaults to LOG_LEVEL.",
    )
    log_dir: Path = Field(default=Path("logs"))
    log_max_bytes: int = Field(default=1_000_000, ge=0)
    log_backup_count: int = Field(default=5, ge=0)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator(
        "groq_api_key",
        "openai_api_key",
        "anthropic_api_key",
        "strava_client_id",
        "strava_client_secret",
        "strava_refresh_token",
    )
    @classmethod
    def blank_to_none(cls, value: str | None) -> str | None:
        """Treat empty credentials as missing."""

        if value is None or not value.strip():
            return None
        return value.strip()

    @field_validator("llm_provider")
    @classmethod
    def normalize_provider(cls, value: str) -> str:
        lower = value.strip().lower()
        if lower not in SUPPORTED_PROVIDERS:
            raise ValueError(f"LLM_PROVIDER must be one of {', '.join(SUPPORTED_PROVIDERS)}")
        return lower

    @field_validator("log_level", "services_log_level")
    @classmethod
    def normalize_log_level(cls, value: str | None, info: ValidationInfo) -> str | None:
        if value is None or not value.strip():
            return None if info.field_name == "services_log_level" else "INFO"
        valid = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
        upper = value.strip().upper()
        if upper not in valid:
            raise ValueError(f"log level must be one of {', '.join(sorted(valid))}")
        return upper

    @property
    def has_strava_credentials(self) -> bool:
        return bool(self.strava_client_id and self.strava_client_secret and self.strava_refresh_token)

    def llm_config(self) -> LLMConfig | None:
        """Return the active provider's config, or None when its API key is missing."""

        if self.llm_provider == "anthropic":
            api_key, model, base_url = self.anthropic_api_key, self.anthropic_model, None
        elif self.llm_provider == "openai":
            api_key, model, base_url = self.openai_api_key, self.openai_model, self.openai_base_url
        else:
            api_key, model, base_url = self.groq_api_key, self.groq_model, self.groq_base_url

        if not api_key:
            return None

        return LLMConfig(
            provider=self.llm_provider,
            api_key=api_key,
            model=model,
            base_url=base_url.rstrip("/") if base_url else None,
            temperature=self.llm_temperature,
            timeout_seconds=self.request_timeout_seconds,
        )


@lru_cache()
def get_settings() -> Settings:
    """Return cached settings instance so it can be reused across the app."""

    settings = Settings()
    settings.log_dir.mkdir(parents=True, exist_ok=True)
    return settings
