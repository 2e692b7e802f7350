"""Typed runtime settings with dotenv support and startup validation."""

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SettingsLoadError(RuntimeError):
    """Raised when runtime settings cannot be loaded or validated."""


_SUPPORTED_LOG_LEVELS = frozenset({"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"})


class AppSettings(BaseSettings):
    """Application settings for the gateway runtime and the virtual services.

    Environment variable names map directly to field names in uppercase.
    Example: `latency_scale` reads from `LATENCY_SCALE`.

    Attributes:
        environment_name: Runtime environment label.
        application_host: Host interface for web server binding.
        application_port: Web server port.
        health_poll_interval_seconds: Delay between orchestrator health polls.
        latency_scale: Multiplier applied to every simulated handler delay.
        log_level: Minimum loguru level written to the stderr sink.
        service_version: Version string reported by service health payloads.
        random_seed: Optional seed for reproducible randomized fields.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    environment_name: str = Field(default="development")
    application_host: str = Field(default="0.0.0.0")
    application_port: int = Field(default=8000, ge=1, le=65535)
    health_poll_interval_seconds: float = Field(default=30.0, gt=0)
    latency_scale: float = Field(default=1.0, ge=0)
    log_level: str = Field(default="INFO")
    service_version: str = Field(default="1.0.0", min_length=1)
    random_seed: int | None = Field(default=None)

    @field_validator("environment_name", "service_version")
    @classmethod
    def _validate_non_empty_string(cls, value: str) -> str:
        stripped_value = value.strip()
        if not stripped_value:
            raise ValueError("value must not be blank")
        return stripped_value

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        normalized_value = value.strip().upper()
        if normalized_value not in _SUPPORTED_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(_SUPPORTED_LOG_LEVELS)}")
        return normalized_value


def config_load_settings() -> AppSettings:
    """Load and validate runtime settings from environment and dotenv.

    Returns:
        AppSettings: Validated runtime settings object.

    Raises:
        SettingsLoadError: Raised when settings are missing or invalid.
    """

    try:
        return AppSettings()
    except ValidationError as error:
        raise SettingsLoadError(
            f"Startup configuration validation failed. Update .env or environment variables. Details: {error}"
        ) from error
