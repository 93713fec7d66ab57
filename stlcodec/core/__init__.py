"""Core functionality for stlcodec."""

from stlcodec.core.config import (
    CodecConfig,
    DecodeConfig,
    LoggingConfig,
    ValidationConfig,
    get_default_config,
    load_config,
)
from stlcodec.core.exceptions import (
    ConfigurationError,
    DecodeError,
    DegenerateFaceError,
    EncodeError,
    InvalidNumericError,
    MalformedStructureError,
    MeshValidationError,
    StlCodecError,
    TruncatedInputError,
    UnmatchedEdgeError,
)

__all__ = [
    # Config classes
    "CodecConfig",
    "DecodeConfig",
    "ValidationConfig",
    "LoggingConfig",
    # Config functions
    "get_default_config",
    "load_config",
    # Exceptions
    "StlCodecError",
    "ConfigurationError",
    "DecodeError",
    "TruncatedInputError",
    "MalformedStructureError",
    "InvalidNumericError",
    "EncodeError",
    "MeshValidationError",
    "DegenerateFaceError",
    "UnmatchedEdgeError",
]
