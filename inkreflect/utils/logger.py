"""Logging configuration using Loguru."""

import sys
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from inkreflect.config import LoggingConfig

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"


def setup_logging(config: "LoggingConfig | None" = None, **overrides) -> None:
    """
    Configure Loguru sinks for the reflection service.

    Console output is always enabled. File output (JSON lines when
    ``serialize`` is set) is rotated and compressed by Loguru.

    Args:
        config: Logging section of the service configuration
        **overrides: Field overrides applied on top of ``config``
    """
    from inkreflect.config import LoggingConfig

    settings = (config or LoggingConfig()).model_copy(update=overrides)

    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.level,
        format=CONSOLE_FORMAT,
        colorize=True,
        serialize=False,
    )

    if settings.log_to_file:
        log_path = Path(settings.log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_path / "inkreflect_{time:YYYY-MM-DD}.log",
            level=settings.level,
            format=FILE_FORMAT,
            rotation=settings.file_rotation,
            retention=settings.file_retention,
            compression=settings.compression,
            serialize=settings.serialize,
            enqueue=True,
        )


def get_logger(name: str, **context):
    """Get a logger bound to a module name and optional extra context."""
    return logger.bind(module=name, **context)
