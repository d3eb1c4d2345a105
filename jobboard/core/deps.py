"""
Shared FastAPI dependencies and request helpers for the endpoints.
"""

import uuid
from typing import Optional
from uuid import UUID

from fastapi import Query

from jobboard.core.exceptions import RequestValidationFailed
from jobboard.core.pagination import PaginationParams, get_pagination_params


def pagination_params(
    page: Optional[str] = Query(None, description="Page number, starting at 1"),
    limit: Optional[str] = Query(None, description="Items per page (default 12, max 100)"),
) -> PaginationParams:
    """
    Query values are taken as strings and parsed leniently: a malformed page
    or limit falls back to its default instead of failing the request.
    """
    return get_pagination_params(page, limit)


def parse_id(value: str, field: str, message: str) -> UUID:
    """
    Validate an identifier from the URL before it reaches the database.

    Raises:
        RequestValidationFailed: 400 if the value is not a UUID
    """
    try:
        return uuid.UUID(value)
    except (TypeError, ValueError):
        raise RequestValidationFailed.for_field(field, message)
