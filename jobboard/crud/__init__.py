"""
CRUD operations (Create, Read) for database models.

This layer provides a clean separation between API routes and database operations,
following the Repository pattern.
"""

from jobboard.crud import job, application

__all__ = ["job", "application"]
