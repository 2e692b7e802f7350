"""Loguru sink configuration for runtime entrypoints."""

from __future__ import annotations

import sys

from loguru import logger

from .settings import AppSettings

_LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {name} | {message}"


def config_configure_logging(settings: AppSettings) -> None:
    """Replace loguru default sinks with one stderr sink at the configured level.

    Args:
        settings: Validated settings providing `log_level`.

    Returns:
        None: Global loguru configuration is updated as side effect.

    Raises:
        ValueError: Raised when settings is None.
    """

    if settings is None:
        raise ValueError("settings must not be None")

    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format=_LOG_FORMAT,
        backtrace=False,
        diagnose=False,
    )
    logger.debug("logging configured level={}", settings.log_level)
