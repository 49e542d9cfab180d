"""Logging setup for the VideoTube application."""

import logging
import sys
from typing import Literal

from videotube.config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Third-party loggers that are too chatty below WARNING
QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access", "sqlalchemy.engine", "passlib")


def setup_logging(
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] | None = None
) -> None:
    """Configure the root logger once at startup.

    Args:
        level: Override log level (default: INFO in production, DEBUG otherwise)
    """
    if level is None:
        level = "INFO" if get_settings().is_production else "DEBUG"

    logging.basicConfig(
        level=getattr(logging, level),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class LogContext(logging.LoggerAdapter):
    """Logger that prefixes every message with ``[key=value]`` pairs.

    Used where several log lines describe one session or upload, e.g.
    ``LogContext(logger, user_id=7).warning("Refresh token reused")``.
    """

    def __init__(self, logger: logging.Logger, **context: object) -> None:
        super().__init__(logger, context)
        self.prefix = " ".join(f"[{k}={v}]" for k, v in context.items())

    def process(self, msg, kwargs):
        return f"{self.prefix} {msg}", kwargs
