"""
Offset pagination for store listings.

Listings are ordered by lexical id before slicing, so the same store state
and the same options always produce the same page.
"""

import re
from typing import Sequence, TypeVar

from faux_packet.exceptions import InvalidListOptionsError
from faux_packet.models.common import ListOptions

T = TypeVar("T")

# optional sign followed by ASCII digits
_INT_PATTERN = re.compile(r"[+-]?[0-9]+")


def calculate_slice(
    total: int,
    page: int | None = None,
    per_page: int | None = None,
) -> tuple[int, int]:
    """
    Compute the ``[start, end)`` bounds of a page.

    Args:
        total: Number of entries in the ordered collection
        page: Start offset; unset means 0
        per_page: Page size; unset or <= 0 means no limit

    Returns:
        Tuple of (start, end) with ``0 <= start <= end <= total``
    """
    count = per_page if per_page is not None and per_page > 0 else total
    start = page or 0

    # asked to start past the end: start at the last entry
    if start >= total:
        start = total - 1
    if start < 0:
        start = 0

    end = min(start + count, total)
    return start, end


def paginate(items: Sequence[T], options: ListOptions | None = None) -> list[T]:
    """Slice an already ordered sequence according to ``options``."""
    if options is None:
        return list(items)
    start, end = calculate_slice(len(items), options.page, options.per_page)
    return list(items[start:end])


def _parse_int(name: str, raw: str | None) -> int | None:
    if raw is None or raw == "":
        return None
    if not _INT_PATTERN.fullmatch(raw):
        raise InvalidListOptionsError(
            f"error converting {name} {raw} to int: invalid syntax"
        )
    return int(raw)


def parse_list_options(page: str | None = None, per_page: str | None = None) -> ListOptions:
    """
    Build ``ListOptions`` from raw query string values.

    Empty values are treated as unset.

    Raises:
        InvalidListOptionsError: If a value is not an integer
    """
    return ListOptions(
        per_page=_parse_int("per_page", per_page),
        page=_parse_int("page", page),
    )
