"""
CRUD operations for Job model.

Implements the Repository pattern to encapsulate all database operations
for jobs, providing a clean interface for the API layer.
"""

from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID
from sqlalchemy.orm import Session
from jobboard.core.pagination import SortSpec
from jobboard.models.job import Job
from jobboard.schemas.job import JobCreateRequest

# API field name -> Job attribute
SORTABLE_FIELDS = {
    "datePosted": "date_posted",
    "title": "title",
    "company": "company",
    "location": "location",
    "createdAt": "created_at",
}
DEFAULT_SORT = "-datePosted"


def create(db: Session, job_data: JobCreateRequest) -> Job:
    """
    Create a new job in the database.

    Args:
        db: Database session
        job_data: Validated job creation data

    Returns:
        Created Job instance with id
    """
    db_job = Job(
        title=job_data.title,
        company=job_data.company,
        description=job_data.description,
        location=job_data.location,
        salary=job_data.salary,
    )

    db.add(db_job)
    db.commit()
    db.refresh(db_job)

    return db_job


def get_by_id(db: Session, job_id: UUID) -> Optional[Job]:
    """
    Retrieve a job by its ID.

    Returns:
        Job instance if found, None otherwise
    """
    return db.query(Job).filter(Job.id == job_id).first()


def get_multi(
    db: Session,
    skip: int = 0,
    limit: int = 12,
    sort: Optional[SortSpec] = None,
) -> List[Job]:
    """
    Retrieve one page of jobs.

    Args:
        db: Database session
        skip: Number of records to skip (offset)
        limit: Maximum number of records to return
        sort: Column and direction; newest posting first when omitted

    Returns:
        List of Job instances
    """
    column = getattr(Job, sort.field) if sort else Job.date_posted
    descending = sort.descending if sort else True

    order = column.desc() if descending else column.asc()
    # Secondary key keeps page boundaries stable when the sort column ties
    tiebreak = Job.id.desc() if descending else Job.id.asc()

    return db.query(Job).order_by(order, tiebreak).offset(skip).limit(limit).all()


def get_page(
    db: Session,
    skip: int,
    limit: int,
    sort: Optional[SortSpec] = None,
) -> Tuple[List[Job], int]:
    """Return one page of jobs together with the total job count."""
    return get_multi(db, skip=skip, limit=limit, sort=sort), count(db)


def count(db: Session, since: Optional[datetime] = None) -> int:
    """
    Count jobs, optionally only those posted at or after ``since``.
    """
    query = db.query(Job)
    if since is not None:
        query = query.filter(Job.date_posted >= since)
    return query.count()
