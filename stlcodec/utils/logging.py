"""Structured logging configuration using structlog."""

import logging
import sys
import time
from pathlib import Path
from typing import Any, Optional

import structlog
from structlog.processors import CallsiteParameter

from stlcodec.core.config import LoggingConfig

# Parent of every module logger in the package
LOGGER_NAME = "stlcodec"


def setup_logging(
    config: Optional[LoggingConfig] = None,
    log_file: Optional[Path] = None,
) -> structlog.stdlib.BoundLogger:
    """Route stlcodec's structlog events through the ``stlcodec`` stdlib logger.

    Handlers are attached to the package logger only, and it stops
    propagating, so an application's root logging setup is left alone.

    Args:
        config: Logging configuration
        log_file: Optional file receiving the same events as JSON lines

    Returns:
        Logger bound to the package name
    """
    if config is None:
        config = LoggingConfig()

    shared_processors = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt=config.timestamp_format),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    if config.add_caller_info:
        shared_processors.append(
            structlog.processors.CallsiteParameterAdder(
                parameters=[
                    CallsiteParameter.FILENAME,
                    CallsiteParameter.LINENO,
                    CallsiteParameter.FUNC_NAME,
                ],
            ),
        )

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    package_logger = logging.getLogger(LOGGER_NAME)
    for handler in package_logger.handlers:
        handler.close()
    package_logger.handlers.clear()
    package_logger.propagate = False
    package_logger.setLevel(getattr(logging, config.level))

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_formatter(shared_processors, _renderer(config)))
    package_logger.addHandler(handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(
            _formatter(shared_processors, structlog.processors.JSONRenderer())
        )
        package_logger.addHandler(file_handler)

    return structlog.get_logger(LOGGER_NAME)


def _renderer(config: LoggingConfig) -> Any:
    if config.format == "json":
        return structlog.processors.JSONRenderer()
    if config.format == "console":
        return structlog.dev.ConsoleRenderer(
            colors=config.colorize and sys.stdout.isatty(),
            exception_formatter=structlog.dev.plain_traceback,
        )
    return structlog.processors.KeyValueRenderer(
        key_order=["timestamp", "level", "logger", "event"],
        drop_missing=True,
    )


def _formatter(shared_processors: list, renderer: Any) -> logging.Formatter:
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a logger instance.

    Args:
        name: Logger name

    Returns:
        Logger instance
    """
    return structlog.get_logger(name)


def log_mesh_summary(
    logger: structlog.stdlib.BoundLogger,
    mesh: Any,  # IndexedMesh
) -> None:
    """Log the size of an indexed mesh.

    Args:
        logger: Logger instance
        mesh: Indexed mesh
    """
    logger.info(
        "mesh_indexed",
        vertex_count=len(mesh.vertices),
        face_count=len(mesh.faces),
    )


class TriangleOperationLog:
    """Context manager timing a pass over triangles.

    Emits ``{operation}_started`` on entry and ``{operation}_completed`` or
    ``{operation}_failed`` on exit, each carrying the number of triangles
    counted so far.
    """

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger,
        operation: str,
        **context: Any,
    ):
        """Initialize the operation log.

        Args:
            logger: Logger instance
            operation: Event name prefix, such as ``stl_write``
            **context: Fields added to every event
        """
        self.logger = logger
        self.operation = operation
        self.context = context
        self.triangle_count = 0
        self._start_time: Optional[float] = None

    def count(self, triangles: int = 1) -> None:
        """Record triangles handled by the operation."""
        self.triangle_count += triangles

    def __enter__(self) -> "TriangleOperationLog":
        self._start_time = time.perf_counter()
        self.logger.debug(f"{self.operation}_started", **self.context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        duration = time.perf_counter() - self._start_time
        fields = dict(
            self.context,
            triangle_count=self.triangle_count,
            duration_ms=round(duration * 1000, 2),
        )

        if exc_type is None:
            if duration > 0:
                fields["triangles_per_second"] = round(self.triangle_count / duration)
            self.logger.info(f"{self.operation}_completed", **fields)
        else:
            self.logger.error(
                f"{self.operation}_failed",
                error=str(exc_val),
                error_type=exc_type.__name__,
                **fields,
            )
