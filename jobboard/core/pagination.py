"""
Pagination and sorting helpers shared by the list endpoints.
"""

import math
import sys
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

from jobboard.core.config import settings

RawParam = Union[str, int, None]


@dataclass(frozen=True)
class PaginationParams:
    page: int
    limit: int
    skip: int


@dataclass(frozen=True)
class SortSpec:
    field: str
    descending: bool


def _parse_positive_int(value: RawParam, default: int) -> int:
    """Parse a query value the lenient way: anything unusable falls back to default."""
    if value is None or isinstance(value, bool):
        return default
    try:
        parsed = int(str(value).strip())
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def get_pagination_params(
    page: RawParam = None,
    limit: RawParam = None,
    default_limit: Optional[int] = None,
    max_limit: Optional[int] = None,
) -> PaginationParams:
    """
    Calculate page, limit and skip from raw query parameters.

    Defaults to page 1 with 12 items per page; limit is capped at 100.
    """
    default_limit = default_limit or settings.DEFAULT_PAGE_SIZE
    max_limit = max_limit or settings.MAX_PAGE_SIZE

    page_number = _parse_positive_int(page, 1)
    page_size = min(_parse_positive_int(limit, default_limit), max_limit)
    # OFFSET must fit a signed 64-bit integer
    page_number = min(page_number, sys.maxsize // page_size)

    return PaginationParams(page=page_number, limit=page_size, skip=(page_number - 1) * page_size)


def get_pagination_metadata(page: int, limit: int, total_items: int) -> Dict[str, Any]:
    """
    Build the pagination block returned alongside every list response.

    >>> get_pagination_metadata(2, 10, 25)["totalPages"]
    3
    """
    total_pages = math.ceil(total_items / limit) if limit > 0 else 0

    return {
        "currentPage": page,
        "totalPages": total_pages,
        "totalItems": total_items,
        "itemsPerPage": limit,
        "hasNextPage": page < total_pages,
        "hasPrevPage": page > 1,
    }


def parse_sort(
    sort_param: Optional[str],
    default: str,
    allowed: Optional[Mapping[str, str]] = None,
) -> SortSpec:
    """
    Parse a single-field sort parameter.

    ``-datePosted`` sorts descending, ``datePosted`` or ``+datePosted``
    ascending. When ``allowed`` is given it maps API field names to model
    attribute names; unknown fields fall back to ``default``.
    """
    spec = _split_sort(sort_param) if sort_param and sort_param.strip() else None

    if spec is None or (allowed is not None and spec.field not in allowed):
        spec = _split_sort(default)

    if allowed is not None:
        spec = SortSpec(field=allowed.get(spec.field, spec.field), descending=spec.descending)

    return spec


def _split_sort(value: str) -> Optional[SortSpec]:
    value = value.strip()
    descending = value.startswith("-")
    field = value.lstrip("+-")
    if not field:
        return None
    return SortSpec(field=field, descending=descending)
