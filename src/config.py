"""
Configuration management using Pydantic for the Image Editor.
Provides type-safe configuration with validation and environment variable support.
"""

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from common.constants import APIConstants, EditorConstants, SystemConstants, WorkerConstants
from common.enums import OutputFormat

logger = logging.getLogger(__name__)


class EditorConfig(BaseSettings):
    """Editing pipeline configuration."""

    decode_max_width: int = Field(
        default=EditorConstants.DEFAULT_DECODE_MAX_WIDTH,
        ge=EditorConstants.MIN_DECODE_DIMENSION,
        le=EditorConstants.MAX_DECODE_DIMENSION,
        description="Bounding box width used to pick the decode sample size",
    )
    decode_max_height: int = Field(
        default=EditorConstants.DEFAULT_DECODE_MAX_HEIGHT,
        ge=EditorConstants.MIN_DECODE_DIMENSION,
        le=EditorConstants.MAX_DECODE_DIMENSION,
        description="Bounding box height used to pick the decode sample size",
    )
    default_format: OutputFormat = Field(
        default=OutputFormat(EditorConstants.DEFAULT_FORMAT),
        description="Output format when a request has no fmt (0 = PNG, 1 = JPEG)",
    )
    default_quality: int = Field(
        default=EditorConstants.DEFAULT_QUALITY,
        ge=EditorConstants.MIN_QUALITY,
        le=EditorConstants.MAX_QUALITY,
        description="Output quality when a request has no fmt",
    )

    @property
    def bounding_box(self) -> Tuple[int, int]:
        return (self.decode_max_width, self.decode_max_height)

    model_config = SettingsConfigDict(env_prefix="IE_EDITOR_", extra="ignore")


class WorkerConfig(BaseSettings):
    """Worker pool configuration."""

    max_workers: int = Field(
        default=WorkerConstants.DEFAULT_MAX_WORKERS,
        ge=1,
        le=WorkerConstants.MAX_WORKERS_LIMIT,
        description="Number of worker threads",
    )
    queue_size: int = Field(
        default=WorkerConstants.DEFAULT_QUEUE_SIZE,
        ge=0,
        le=WorkerConstants.MAX_QUEUE_SIZE,
        description="Requests allowed to wait for a worker",
    )
    submit_timeout: float = Field(
        default=WorkerConstants.DEFAULT_SUBMIT_TIMEOUT_SECONDS,
        ge=0,
        description="Seconds a request waits for a queue slot before it is rejected",
    )

    model_config = SettingsConfigDict(env_prefix="IE_WORKER_", extra="ignore")


class APIConfig(BaseSettings):
    """API configuration."""

    host: str = Field(default="0.0.0.0", description="API host address")
    port: int = Field(default=8000, ge=1, le=65535, description="API port")
    api_version: str = Field(default=APIConstants.API_VERSION, description="API version")
    cors_enabled: bool = Field(default=True, description="Enable CORS")
    cors_origins: List[str] = Field(default=["*"], description="CORS allowed origins")
    max_upload_size_mb: int = Field(
        default=APIConstants.MAX_UPLOAD_SIZE_MB,
        ge=1,
        le=500,
        description="Maximum request body size in MB",
    )
    request_timeout: int = Field(
        default=APIConstants.REQUEST_TIMEOUT_SECONDS,
        ge=1,
        le=300,
        description="Request timeout in seconds",
    )

    model_config = SettingsConfigDict(env_prefix="IE_API_", extra="ignore")


class SystemConfig(BaseSettings):
    """System configuration."""

    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default=SystemConstants.LOG_LEVEL_DEFAULT, description="Logging level")
    cache_dir: str = Field(
        default=SystemConstants.CACHE_DIR, description="Directory for merge output files"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper

    @field_validator("cache_dir")
    @classmethod
    def create_directories(cls, v):
        """Ensure directories exist."""
        path = Path(v)
        path.mkdir(parents=True, exist_ok=True)
        return str(path.absolute())

    model_config = SettingsConfigDict(env_prefix="IE_SYSTEM_", extra="ignore")


class Settings(BaseSettings):
    """Main application settings."""

    # Sub-configurations
    editor: EditorConfig = Field(default_factory=EditorConfig)
    worker: WorkerConfig = Field(default_factory=WorkerConfig)
    api: APIConfig = Field(default_factory=APIConfig)
    system: SystemConfig = Field(default_factory=SystemConfig)

    # Environment
    environment: str = Field(
        default="production", description="Environment (development, staging, production)"
    )

    # Config file support
    config_file: Optional[str] = Field(default=None, description="Path to YAML config file")

    @model_validator(mode="before")
    @classmethod
    def load_config_file(cls, values):
        """Load configuration from YAML file if specified."""
        if not isinstance(values, dict):
            return values

        config_file = values.get("config_file") or os.getenv("IE_CONFIG_FILE")

        if config_file and Path(config_file).exists():
            import yaml

            try:
                with open(config_file, "r") as f:
                    file_config = yaml.safe_load(f)
                    if file_config:
                        # Merge file config with values (env vars take precedence)
                        for key, value in file_config.items():
                            if key not in values or values[key] is None:
                                values[key] = value
            except (OSError, yaml.YAMLError) as e:
                logger.warning(f"Failed to load config file {config_file}: {e}")

        return values

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment value."""
        valid_envs = ["development", "staging", "production", "test"]
        if v not in valid_envs:
            raise ValueError(f"Invalid environment: {v}. Must be one of {valid_envs}")
        return v

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary."""
        return self.model_dump(mode="json", exclude_none=True)

    def save_to_file(self, path: str) -> None:
        """Save current configuration to YAML file."""
        import yaml

        config_dict = self.to_dict()
        with open(path, "w") as f:
            yaml.dump(config_dict, f, default_flow_style=False)

    model_config = SettingsConfigDict(
        env_prefix="IE_",
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings object with validated configuration
    """
    return Settings()


# Convenience function to reload settings (clears cache)
def reload_settings() -> Settings:
    """
    Reload settings, clearing the cache.

    Returns:
        Fresh Settings object
    """
    get_settings.cache_clear()
    return get_settings()
