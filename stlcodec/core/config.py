"""Configuration management for stlcodec using Pydantic."""

from pathlib import Path
from typing import Literal, Optional

import numpy as np
import tomli
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from stlcodec.core.exceptions import ConfigurationError

# Length of the b"solid " prefix the prober looks for
ASCII_PREFIX_LENGTH = 6


class DecodeConfig(BaseModel):
    """Configuration for format probing and decoding."""

    model_config = ConfigDict(frozen=True)

    probe_line_limit: int = Field(
        4096,
        ge=ASCII_PREFIX_LENGTH,
        description="Maximum number of bytes read while probing the first line",
    )
    check_binary_size: bool = Field(
        False,
        description="Treat 'solid '-prefixed sources as binary when their size matches the binary layout",
    )
    show_progress: bool = Field(False, description="Show a progress bar while indexing")


class ValidationConfig(BaseModel):
    """Configuration for manifold validation."""

    model_config = ConfigDict(frozen=True)

    area_epsilon: float = Field(
        float(np.finfo(np.float32).eps),
        ge=0,
        description="Faces with an area below this threshold are degenerate",
    )


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    model_config = ConfigDict(frozen=True)

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        "INFO", description="Logging level"
    )
    format: Literal["json", "console", "plain"] = Field(
        "console", description="Log format"
    )
    colorize: bool = Field(True, description="Colorize console output on a TTY")
    add_caller_info: bool = Field(False, description="Add file, line and function to events")
    timestamp_format: str = Field("iso", description="structlog TimeStamper format")


class CodecConfig(BaseModel):
    """Main configuration for stlcodec."""

    model_config = ConfigDict(frozen=True)

    decode: DecodeConfig = Field(
        default_factory=DecodeConfig, description="Decoding configuration"
    )
    validation: ValidationConfig = Field(
        default_factory=ValidationConfig, description="Validation configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )

    @classmethod
    def from_toml(cls, path: Path | str) -> "CodecConfig":
        """Load configuration from TOML file.

        Args:
            path: Path to TOML configuration file

        Returns:
            CodecConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ConfigurationError: If the TOML or its values are invalid
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, "rb") as f:
            try:
                data = tomli.load(f)
            except tomli.TOMLDecodeError as e:
                raise ConfigurationError(
                    f"Invalid TOML in {path}: {e}", details={"path": str(path)}
                ) from e

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> "CodecConfig":
        """Create configuration from dictionary.

        Args:
            data: Configuration dictionary

        Returns:
            CodecConfig instance

        Raises:
            ConfigurationError: If a value fails validation
        """
        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid configuration: {e.error_count()} error(s)",
                details={"errors": e.errors()},
            ) from e

    def to_dict(self) -> dict:
        """Convert configuration to dictionary."""
        return self.model_dump()


def get_default_config() -> CodecConfig:
    """Get default configuration."""
    return CodecConfig()


def load_config(path: Optional[Path | str] = None) -> CodecConfig:
    """Load configuration from file or return defaults.

    Args:
        path: Optional path to configuration file

    Returns:
        CodecConfig instance
    """
    if path:
        return CodecConfig.from_toml(path)
    return get_default_config()
