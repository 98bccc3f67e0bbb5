"""Application configuration using Pydantic Settings."""

from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file."""

    # Ambient Weather credentials (required)
    api_key: str = Field(min_length=1)
    app_key: str = Field(min_length=1)

    # Realtime API
    endpoint: str = "https://rt2.ambientweather.net"

    # Pressure trend
    trend_window_hours: float = Field(default=3.0, gt=0)
    trend_min_samples: int = Field(default=6, ge=2)
    trend_capacity: int = Field(default=500, ge=1)
    trend_threshold: float = Field(default=0.02, ge=0)

    # Subscribers
    subscriber_queue_size: int = Field(default=32, ge=1)

    # Static browser assets (empty = not served)
    public_dir: str = ""

    # Server
    host: str = "0.0.0.0"
    port: int = Field(
        default=3000,
        validation_alias=AliasChoices("AMBIENT_PORT", "PORT", "port"),
    )

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="AMBIENT_",
        env_file=str(_ENV_FILE),
        extra="ignore",
        populate_by_name=True,
    )


def load_settings(**overrides) -> Settings:
    """Build settings; raises pydantic.ValidationError on missing credentials."""
    return Settings(**overrides)
