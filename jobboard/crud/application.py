"""
CRUD operations for Application model.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session, joinedload
from jobboard.core.pagination import SortSpec
from jobboard.models.application import Application

# API field name -> Application attribute
SORTABLE_FIELDS = {
    "appliedAt": "applied_at",
    "name": "name",
    "email": "email",
    "createdAt": "created_at",
}
DEFAULT_SORT = "-appliedAt"


def create(
    db: Session,
    job_id: UUID,
    name: str,
    email: str,
    cv_path: str,
    original_filename: str,
) -> Application:
    """
    Insert a new application.

    The (email, job_id) unique constraint is enforced by the database, so a
    concurrent duplicate surfaces here as ``sqlalchemy.exc.IntegrityError``.
    The caller owns rollback and file cleanup.
    """
    application = Application(
        job_id=job_id,
        name=name,
        email=email.lower(),
        cv_path=cv_path,
        original_filename=original_filename,
    )

    db.add(application)
    db.commit()
    db.refresh(application)

    return application


def get_by_id(db: Session, application_id: UUID, with_job: bool = False) -> Optional[Application]:
    query = db.query(Application)
    if with_job:
        query = query.options(joinedload(Application.job))
    return query.filter(Application.id == application_id).first()


def get_by_email_and_job(db: Session, email: str, job_id: UUID) -> Optional[Application]:
    """Find an earlier application from the same email for the same job."""
    return db.query(Application).filter(
        Application.email == email.lower(),
        Application.job_id == job_id,
    ).first()


def get_multi_for_job(
    db: Session,
    job_id: UUID,
    skip: int = 0,
    limit: int = 12,
    sort: Optional[SortSpec] = None,
) -> List[Application]:
    column = getattr(Application, sort.field) if sort else Application.applied_at
    descending = sort.descending if sort else True

    order = column.desc() if descending else column.asc()
    tiebreak = Application.id.desc() if descending else Application.id.asc()

    return (
        db.query(Application)
        .filter(Application.job_id == job_id)
        .order_by(order, tiebreak)
        .offset(skip)
        .limit(limit)
        .all()
    )


def count(db: Session, job_id: Optional[UUID] = None, since: Optional[datetime] = None) -> int:
    """
    Count applications, optionally for one job and/or since a cutoff.
    """
    query = db.query(Application)
    if job_id is not None:
        query = query.filter(Application.job_id == job_id)
    if since is not None:
        query = query.filter(Application.applied_at >= since)
    return query.count()
