import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from jobboard.core.config import settings
from jobboard.core.database import get_db
from jobboard.core.deps import pagination_params, parse_id
from jobboard.core.exceptions import JobBoardError, NotFoundError
from jobboard.core.pagination import PaginationParams, get_pagination_metadata, parse_sort
from jobboard.crud import job as job_crud
from jobboard.schemas.job import JobCreateRequest, JobDetailResponse, JobListResponse, JobResponse

router = APIRouter(prefix="/jobs", tags=["Jobs"])
logger = logging.getLogger(__name__)


@router.get("", response_model=JobListResponse)
def list_jobs(
    params: PaginationParams = Depends(pagination_params),
    sort: Optional[str] = Query(None, description="Sort field, prefix with '-' for descending (default: -datePosted)"),
    db: Session = Depends(get_db)
):
    """
    List job postings, newest first by default.

    Args:
        page: Page number (default: 1)
        limit: Items per page (default: 12, max: 100)
        sort: datePosted, title, company, location or createdAt, optionally prefixed with '-'
    """
    sort_spec = parse_sort(sort, job_crud.DEFAULT_SORT, job_crud.SORTABLE_FIELDS)
    jobs, total_items = job_crud.get_page(db, skip=params.skip, limit=params.limit, sort=sort_spec)

    return JobListResponse(
        count=len(jobs),
        pagination=get_pagination_metadata(params.page, params.limit, total_items),
        data=[JobResponse.model_validate(job) for job in jobs],
    )


@router.get("/{job_id}", response_model=JobDetailResponse)
def get_job(job_id: str, db: Session = Depends(get_db)):
    """
    Retrieve a job by ID.

    Raises:
        400: If the ID is malformed
        404: If the job doesn't exist
    """
    job = job_crud.get_by_id(db, parse_id(job_id, "id", "Invalid job ID format"))

    if not job:
        raise NotFoundError("Job not found")

    return JobDetailResponse(data=JobResponse.model_validate(job))


@router.post("", status_code=201, response_model=JobDetailResponse)
def create_job(
    request: JobCreateRequest,
    db: Session = Depends(get_db)
):
    """
    Create a new job posting.

    Title and company must be non-empty and the description at least 50
    characters; violations are rejected with 400 before anything is stored.
    """
    try:
        new_job = job_crud.create(db, request)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error creating job: {e}")
        raise JobBoardError("Error creating job", error=str(e) if settings.is_development else None)

    logger.info(f"Created job {new_job.id}: {new_job.title} at {new_job.company}")

    return JobDetailResponse(
        message="Job created successfully",
        data=JobResponse.model_validate(new_job),
    )
