"""Logger configuration for the coaching engine.

Library modules only call ``logger.<level>(message, **context)``; the keyword
context lands in ``extra`` and is rendered after the message (or as fields of
the JSON record when ``serialize`` is on). Sinks are configured once, by the
application entry point.
"""

import sys
from pathlib import Path

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level> {extra}"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message} {extra}"


def setup_logger(
    level: str = "INFO",
    log_file: str | None = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
    serialize: bool = False,
) -> None:
    """Replace loguru's sinks with a stderr sink and an optional rotating file.

    Args:
        level: Minimum level for every sink
        log_file: Optional log file path; parent directories are created
        rotation: File rotation threshold (e.g. "10 MB", "1 day")
        retention: How long rotated files are kept (e.g. "7 days")
        serialize: Emit one JSON record per line on stderr instead of text
    """
    logger.remove()

    if serialize:
        logger.add(sys.stderr, level=level, serialize=True)
    else:
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
            backtrace=True,
        )

    logger.debug("Logger initialized", level=level, log_file=log_file, serialize=serialize)
