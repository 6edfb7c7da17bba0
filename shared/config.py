"""
Shared configuration management for the rule-tree engine.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="RULE_TREE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")


class EngineConfig(BaseConfig):
    """Engine-specific configuration."""

    # Transport form of results (RULE_TREE_ENABLE_SERIALIZATION)
    enable_serialization: bool = Field(default=False)

    # Reject NumberOf thresholds outside [0, len(children)] at build time
    strict_thresholds: bool = Field(default=True)


def get_config(**overrides) -> EngineConfig:
    """Get engine configuration."""
    return EngineConfig(**overrides)
