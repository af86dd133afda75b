"""Settings for the LocalLink backend with observability configuration."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _env_field(default, *env_names: str):
    if env_names:
        alias = AliasChoices(*env_names) if len(env_names) > 1 else env_names[0]
        return Field(default=default, validation_alias=alias)
    return Field(default=default)


class Settings(BaseSettings):
    redis_url: str = _env_field("redis://localhost:6379/0", "REDIS_URL")

    # Launch gate: the single persisted flag, namespaced per device in Redis
    first_launch_key: str = _env_field("first_launch", "FIRST_LAUNCH_KEY")

    # Home screen knobs
    roster_latency_seconds: float = _env_field(1.0, "ROSTER_LATENCY_SECONDS")
    map_zoom: float = _env_field(15.5, "MAP_ZOOM")
    location_accuracy: str = _env_field("high", "LOCATION_ACCURACY")
    location_interval_ms: int = _env_field(1000, "LOCATION_INTERVAL_MS")
    location_distance_filter_m: float = _env_field(10.0, "LOCATION_DISTANCE_FILTER_M")
    # How long a permission/service prompt waits for the device to answer
    location_prompt_timeout_seconds: float = _env_field(30.0, "LOCATION_PROMPT_TIMEOUT_SECONDS")
    fix_rate_limit_per_minute: int = _env_field(120, "FIX_RATE_LIMIT_PER_MINUTE")
    # Sessions without any request for this long are closed; 0 disables eviction
    home_session_idle_seconds: float = _env_field(300.0, "HOME_SESSION_IDLE_SECONDS")

    environment: str = _env_field("production", "ENV", "APP_ENV", "ENVIRONMENT")
    obs_enabled: bool = _env_field(True, "OBS_ENABLED")
    obs_metrics_public: bool = _env_field(False, "OBS_METRICS_PUBLIC")
    obs_log_level: str = _env_field("INFO", "LOG_LEVEL")
    obs_log_sampling_rate_info: float = _env_field(0.1, "LOG_SAMPLING_RATE_INFO")
    obs_admin_token: Optional[str] = _env_field(None, "OBS_ADMIN_TOKEN")
    service_name: str = _env_field("locallink-api", "SERVICE_NAME")
    git_commit: str = _env_field("unknown", "GIT_COMMIT", "COMMIT_SHA", "SOURCE_VERSION")

    cors_allow_origins: Any = _env_field((), "CORS_ALLOW_ORIGINS")

    def is_prod(self) -> bool:
        return self.environment.lower() in ("prod", "production", "live")

    def is_dev(self) -> bool:
        return self.environment.lower() in ("dev", "development")

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        case_sensitive=False,
        env_nested_delimiter="__",
    )

    @field_validator("cors_allow_origins", mode="before")
    def _split_cors(cls, value):  # type: ignore[override]
        if value in (None, ""):
            return ()
        if isinstance(value, str):
            return tuple(part.strip() for part in value.split(",") if part.strip())
        if isinstance(value, (list, tuple, set)):
            return tuple(str(item).strip() for item in value if str(item).strip())
        return ()


def _normalise_level(level: str) -> str:
    return level.upper()


settings = Settings()
settings.obs_log_level = _normalise_level(settings.obs_log_level)
