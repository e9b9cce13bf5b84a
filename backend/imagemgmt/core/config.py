"""
Application configuration using Pydantic Settings.
"""
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    # Application
    APP_NAME: str = "Image Management"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "info"
    DEBUG: bool = False

    # Database Schema
    DB_SCHEMA: str = "image_mgmt"

    # Database
    DATABASE_URL: str

    # Version resolution
    STORE_TIMEOUT_SECONDS: float = 30.0  # Upper bound for each batched store call
    # "deterministic" applies to keyed callers; keyless calls draw at random
    DEFAULT_SELECTION_STRATEGY: str = "random"
    # Raise on a corrupt stored plan instead of falling back to the latest active version
    STRICT_PLAN_INTEGRITY: bool = False

    # Job types whose images are pre-fetched under a dedicated proxy user.
    # Format: "jobtype1,user1;jobtype2,user2"
    JOBTYPE_PREFETCH_USER_MAP: str = ""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )

    @field_validator("DEFAULT_SELECTION_STRATEGY")
    @classmethod
    def validate_strategy(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in {"random", "deterministic"}:
            raise ValueError(f"Unknown selection strategy: {value}")
        return normalized

    @field_validator("STORE_TIMEOUT_SECONDS")
    @classmethod
    def validate_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("STORE_TIMEOUT_SECONDS must be positive")
        return value


settings = Settings()
