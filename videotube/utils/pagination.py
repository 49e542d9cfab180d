"""Offset pagination helpers shared by the listing endpoints."""


def page_offset(page: int, limit: int) -> int:
    """Row offset for a 1-based page number."""
    return (max(page, 1) - 1) * limit


def total_pages(total: int, limit: int) -> int:
    """Number of pages needed to show ``total`` rows, ``limit`` per page."""
    return (total + limit - 1) // limit if total > 0 else 0
