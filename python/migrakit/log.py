"""Console logging setup for the migrakit CLI."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import colorlog

LOG_FORMAT = "%(asctime)s %(levelname)8s %(message)s (%(name)s)"
COLOR_LOG_FORMAT = "%(asctime)s %(log_color)s%(levelname)8s%(reset)s %(message)s \033[90m(%(name)s)\033[0m"
DATE_FORMAT = "%m-%d %H:%M:%S"

LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red,bg_white",
}


def parse_level(level: int | str) -> int:
    """Convert a level name such as ``"debug"`` to its logging constant.

    Raises:
        ValueError: If the name is not a logging level
    """
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return value


def setup_logging(
    level: int | str = logging.INFO,
    use_colors: bool = True,
    stream: TextIO | None = None,
) -> None:
    """Configure the root logger with one console handler.

    Args:
        level: Logging level or level name
        use_colors: Whether to use colored output
        stream: Stream to write to (default: stderr)
    """
    handler = logging.StreamHandler(stream or sys.stderr)
    if use_colors:
        formatter: logging.Formatter = colorlog.ColoredFormatter(
            COLOR_LOG_FORMAT,
            datefmt=DATE_FORMAT,
            log_colors=LOG_COLORS,
            style="%",
        )
    else:
        formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handler.setFormatter(formatter)

    logging.basicConfig(level=parse_level(level), handlers=[handler], force=True)
