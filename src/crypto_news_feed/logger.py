"""
Application logging.

All modules log through loguru. Diagnostics go to stderr so they never mix
with the article listing printed on stdout, and optionally to a rotating file.
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger as _logger

from crypto_news_feed.config import get_config


def setup_logger(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    rotation: Optional[str] = None,
    retention: Optional[str] = None,
    format: Optional[str] = None,
) -> None:
    """Install the stderr and file sinks, replacing any existing ones.

    Arguments left as None come from ``LoggingConfig`` (``LOG_*`` variables).

    Args:
        level: Minimum level for both sinks
        log_file: Log file path
        rotation: When to start a new file, e.g. "10 MB"
        retention: How long rotated files are kept, e.g. "7 days"
        format: loguru format string
    """
    settings = get_config().logging
    sink_options = {
        "format": format or settings.format,
        "level": level or settings.level,
        "backtrace": True,
        "diagnose": False,
    }

    _logger.remove()

    if settings.console_enabled:
        _logger.add(sys.stderr, colorize=True, **sink_options)

    if settings.file_enabled:
        log_path = Path(log_file or settings.file_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        # enqueue: refresh cycles log from APScheduler worker threads
        _logger.add(
            str(log_path),
            rotation=rotation or settings.rotation,
            retention=retention or settings.retention,
            compression="zip",
            encoding="utf-8",
            enqueue=True,
            **sink_options,
        )


def get_logger(name: Optional[str] = None):
    """Return the shared logger, bound to ``name`` when given."""
    return _logger.bind(name=name) if name else _logger


logger = _logger

__all__ = [
    "setup_logger",
    "get_logger",
    "logger",
]
