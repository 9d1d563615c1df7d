"""Application settings using pydantic-settings."""

import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class VellumSettings(BaseSettings):
    """Settings for command handling around the repository.

    All settings can be configured via environment variables with the
    VELLUM_ prefix. For example:
    - VELLUM_LOG_LEVEL=DEBUG
    - VELLUM_RETRY_MAX_ATTEMPTS=3
    - VELLUM_RETRY_DELAY=0.05

    Attributes:
        log_level: Level at which received commands are logged.
        retry_max_attempts: Attempts per command when an optimistic locking
            conflict occurs. 1 disables retries.
        retry_delay: Seconds to wait between attempts.

    Example:
        >>> settings = VellumSettings(retry_max_attempts=3)
        >>> app = ApplicationBuilder().use_settings(settings).build()
    """

    model_config = SettingsConfigDict(env_prefix="VELLUM_")

    log_level: str = "INFO"
    retry_max_attempts: int = Field(default=1, ge=1)
    retry_delay: float = Field(default=0.0, ge=0)

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level {value!r}")
        return level
