"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings
from functools import lru_cache

from validation_worker.validators.reference_data import EMAIL_PATTERN


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Logging
    DEBUG: bool = False
    LOG_LEVEL: str = "info"

    # Default password policy
    PASSWORD_MIN_LENGTH: int = 8
    PASSWORD_MAX_LENGTH: int = 128
    PASSWORD_REQUIRED_CLASSES: list[str] = []
    PASSWORD_MINIMUM_TIER: int = 2
    PASSWORD_MIN_ENTROPY_BITS: float = 0.0
    PASSWORD_BANNED_VALUES_FILE: str = ""
    PASSWORD_USE_COMMON_DENYLIST: bool = True

    # Single-value worker checks
    EMAIL_PATTERN: str = EMAIL_PATTERN
    MINIMUM_BIRTHDAY_AGE: int = 13

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
