"""Logging setup for CLI commands."""

import logging
from pathlib import Path

from expbundle.core.exceptions import ConfigurationError

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "warning", log_file: Path | None = None) -> None:
    """Configure the root logger for one CLI invocation.

    Log records go to stderr, or to ``log_file`` when given. The root logger
    is reconfigured on every call so that repeated invocations in one
    process (tests, batch scripts) do not stack handlers.

    Args:
        level: One of debug, info, warning, error (case-insensitive)
        log_file: Optional file receiving log records instead of stderr

    Raises:
        ConfigurationError: If ``level`` is not a known level name
    """
    key = level.lower()
    if key not in LOG_LEVELS:
        raise ConfigurationError(
            f"Unknown log level '{level}'. Available: {', '.join(LOG_LEVELS)}",
            option="log_level",
        )

    handlers: list[logging.Handler]
    if log_file is not None:
        handlers = [logging.FileHandler(log_file, encoding="utf-8")]
    else:
        handlers = [logging.StreamHandler()]

    logging.basicConfig(
        level=LOG_LEVELS[key],
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
        handlers=handlers,
        force=True,
    )
