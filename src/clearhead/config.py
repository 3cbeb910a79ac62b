"""Configuration management for clearhead.

Typed settings built on pydantic-settings. Values are read from
``CLEARHEAD_*`` environment variables with optional ``.env`` support.
"""

from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = [
    "ClearHeadConfig",
    "LogSettings",
    "MongoSettings",
]


class MongoSettings(BaseSettings):
    """MongoDB connection settings."""

    model_config = SettingsConfigDict(
        env_prefix="CLEARHEAD_MONGO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    uri: SecretStr = SecretStr("mongodb://localhost:27017")
    database: str = "clearhead"
    collection_prefix: str = ""


class LogSettings(BaseSettings):
    """Logging output settings."""

    model_config = SettingsConfigDict(
        env_prefix="CLEARHEAD_LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    level: str = "INFO"
    json_output: bool = False


class ClearHeadConfig(BaseSettings):
    """Scheduling and planner policy.

    The defaults reproduce the canonical behavior: level-based review
    intervals, mastery at level 5, a 15 point integrity penalty for a
    missed revision and a recovery task on every skip.

    Example usage:
        config = ClearHeadConfig()
        if config.scheduling_model == "level":
            ...
    """

    model_config = SettingsConfigDict(
        env_prefix="CLEARHEAD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    mongo: MongoSettings = Field(default_factory=MongoSettings)

    # Spaced repetition
    scheduling_model: Literal["level", "confidence"] = "level"
    mastery_level: int = Field(default=5, ge=1)
    missed_revision_penalty: int = Field(default=15, ge=0, le=100)
    daily_integrity_decay: int = Field(default=2, ge=0, le=100)

    # Planner
    recovery_on_skip: bool = True
    recovery_decay_step: int = Field(default=2, ge=0)
    recovery_time_factor: float = Field(default=1.25, ge=1.0)
