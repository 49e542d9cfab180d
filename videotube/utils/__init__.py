"""Utility modules for the VideoTube application."""

from videotube.utils.logging import get_logger, LogContext, setup_logging
from videotube.utils.pagination import page_offset, total_pages

__all__ = [
    # Logging
    "get_logger",
    "LogContext",
    "setup_logging",
    # Pagination
    "page_offset",
    "total_pages",
]
