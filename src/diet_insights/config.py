"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    default_target_duration: int = 1
    allowed_target_durations: str = "1,7,15,30"
    dataset_ttl_seconds: int = 3600
    max_upload_bytes: int = 20 * 1024 * 1024
    debug: bool = False
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_target_durations(raw: str | None) -> tuple[int, ...]:
    """Parse selectable target durations (in days) from env."""
    if raw is None:
        return (1, 7, 15, 30)
    durations: list[int] = []
    for chunk in raw.split(","):
        value = chunk.strip()
        if value.isdigit() and int(value) > 0 and int(value) not in durations:
            durations.append(int(value))
    return tuple(sorted(durations)) or (1,)
