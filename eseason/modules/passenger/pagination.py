"""Pagination helpers for admin listings."""
from typing import Optional, Tuple

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIST_LIMIT = 100
MAX_SEARCH_LIMIT = 50
# Keeps (page - 1) * limit well inside a 64-bit OFFSET
MAX_PAGE = 1_000_000


def parse_int(value: Optional[str], default: int) -> int:
    """
    Parse a query parameter leniently.

    Missing values take the default; unparseable values become 0 so the
    clamping rules below apply instead of an error.
    """
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def clamp_pagination(page: int, limit: int, max_limit: int = MAX_LIST_LIMIT) -> Tuple[int, int]:
    """
    Pages below 1 become 1 and pages above MAX_PAGE become MAX_PAGE;
    a limit outside [1, max_limit] becomes the default.
    """
    if page < 1:
        page = DEFAULT_PAGE
    elif page > MAX_PAGE:
        page = MAX_PAGE
    if limit < 1 or limit > max_limit:
        limit = DEFAULT_LIMIT
    return page, limit


def total_pages(total_count: int, limit: int) -> int:
    return (total_count + limit - 1) // limit
