"""Utility functions for stlcodec."""

from stlcodec.utils.logging import (
    setup_logging,
    get_logger,
    log_mesh_summary,
    TriangleOperationLog,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "log_mesh_summary",
    "TriangleOperationLog",
]
