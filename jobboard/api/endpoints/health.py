"""
Health check endpoints.

Provides liveness and dependency status for the database and upload storage.
"""

import logging
from typing import Dict, Any
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from sqlalchemy import text
from datetime import datetime, timezone

from jobboard.core.database import get_db
from jobboard.core.storage import LocalStorage, get_storage

router = APIRouter(tags=["Health"])
logger = logging.getLogger(__name__)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check() -> Dict[str, str]:
    """
    Basic liveness probe.

    Returns 200 OK if the service is running.
    """
    return {
        "status": "OK",
        "message": "Server is running",
        "timestamp": _timestamp(),
    }


@router.get("/health/detailed", status_code=status.HTTP_200_OK)
def detailed_health_check(
    db: Session = Depends(get_db),
    storage: LocalStorage = Depends(get_storage),
) -> Dict[str, Any]:
    """
    Health check with dependency status.

    Checks:
    - Database connectivity
    - Upload directory is writable
    """
    health_status = {
        "status": "healthy",
        "timestamp": _timestamp(),
        "checks": {}
    }

    try:
        db.execute(text("SELECT 1"))
        health_status["checks"]["database"] = {
            "status": "healthy",
            "message": "Database connection successful"
        }
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        health_status["status"] = "unhealthy"
        health_status["checks"]["database"] = {
            "status": "unhealthy",
            "message": f"Database error: {str(e)}"
        }

    if storage.is_writable():
        health_status["checks"]["storage"] = {
            "status": "healthy",
            "message": f"Upload directory '{storage.base_dir}' is writable"
        }
    else:
        logger.error(f"Storage health check failed: {storage.base_dir} is not writable")
        health_status["status"] = "unhealthy"
        health_status["checks"]["storage"] = {
            "status": "unhealthy",
            "message": f"Upload directory '{storage.base_dir}' is not writable"
        }

    return health_status
