"""Loguru sinks for the workload CLI and HTTP surfaces.

Engine modules only call ``logger.debug``/``logger.info``; sinks are attached
here, once, by whichever surface starts the process.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from app.config.settings import Settings

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"


def setup_logger(
    level: str = "INFO",
    log_file: str | None = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
    serialize: bool = False,
) -> None:
    """Replace loguru's default handler with console and optional file sinks.

    Args:
        level: Minimum level for every sink
        log_file: Optional file path; rotated and zipped when set
        rotation: File rotation trigger (e.g., "10 MB", "1 day")
        retention: How long rotated files are kept
        serialize: Write JSON lines to the file sink instead of text
    """
    logger.remove()
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path,
            format=FILE_FORMAT,
            level=level,
            rotation=rotation,
            retention=retention,
            compression="zip",
            serialize=serialize,
        )

    logger.debug(f"Logger initialized with level={level} file={log_file}")


def configure_from_settings(config: Settings) -> None:
    setup_logger(level=config.log_level, log_file=config.log_file, serialize=config.log_serialize)
