"""Configuration management for netstr."""

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

DEFAULT_READ_SIZE = 4096
DEFAULT_MAX_FRAME_SIZE = 64 * 1024 * 1024
DEFAULT_POOL_MAX_FREE = 64


class CodecConfig(BaseModel):
    """Encoder/decoder settings."""

    # Largest single read issued against a source while filling a payload
    read_size: int = DEFAULT_READ_SIZE
    # Reject frames declaring more bytes than this; None disables the check
    max_frame_size: int | None = DEFAULT_MAX_FRAME_SIZE
    # Idle header buffers kept by the process-wide pool of this size, shared
    # by every encoder created from a config with the same value
    pool_max_free: int = DEFAULT_POOL_MAX_FREE

    @field_validator("read_size")
    @classmethod
    def validate_read_size(cls, v: int) -> int:
        """Validate read_size value."""
        if v <= 0:
            raise ValueError("read_size must be positive")
        return v

    @field_validator("max_frame_size")
    @classmethod
    def validate_max_frame_size(cls, v: int | None) -> int | None:
        """Validate max_frame_size value."""
        if v is not None and v < 0:
            raise ValueError("max_frame_size must be non-negative")
        return v

    @field_validator("pool_max_free")
    @classmethod
    def validate_pool_max_free(cls, v: int) -> int:
        """Validate pool_max_free value."""
        if v < 0:
            raise ValueError("pool_max_free must be non-negative")
        return v


class LogConfig(BaseModel):
    """Logging configuration."""

    level: str = "WARNING"
    log_dir: Path | None = None
    environment: str = "development"

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        if v not in ["development", "production"]:
            raise ValueError("environment must be one of: development, production")
        return v


class NetstrConfig(BaseModel):
    """Main netstr configuration."""

    codec: CodecConfig = Field(default_factory=CodecConfig)
    logging: LogConfig = Field(default_factory=LogConfig)

    @classmethod
    def from_file(cls, config_file: Path) -> "NetstrConfig":
        """Load configuration from TOML file."""
        import rtoml

        with open(config_file, encoding="utf-8") as f:
            config_data = rtoml.load(f)

        return cls(**config_data)

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "NetstrConfig":
        """Load configuration from dictionary."""
        return cls(**config_dict)

    def save_to_file(self, config_file: Path) -> None:
        """Save configuration to TOML file."""
        import rtoml

        with open(config_file, "w", encoding="utf-8") as f:
            rtoml.dump(self.model_dump(mode="json", exclude_none=True), f)
