"""
Employer dashboard endpoints.

Statistics, jobs with applicant counts, applicant lists and CV downloads.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from jobboard.core.database import get_db
from jobboard.core.deps import pagination_params, parse_id
from jobboard.core.exceptions import NotFoundError
from jobboard.core.pagination import PaginationParams, get_pagination_metadata, parse_sort
from jobboard.core.storage import LocalStorage, content_type_for, get_storage
from jobboard.crud import application as application_crud
from jobboard.crud import job as job_crud
from jobboard.schemas.application import ApplicationDetail, ApplicationDetailResponse, ApplicationResponse
from jobboard.schemas.dashboard import DashboardStatsResponse, JobApplicationsResponse, JobsWithStatsResponse
from jobboard.schemas.job import JobSummary
from jobboard.services import dashboard as dashboard_service

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])
logger = logging.getLogger(__name__)


@router.get("/stats", response_model=DashboardStatsResponse)
def get_dashboard_stats(db: Session = Depends(get_db)):
    """
    Overall statistics: totals, activity in the last 7 days and the top 5
    jobs by application count.
    """
    return DashboardStatsResponse(data=dashboard_service.get_dashboard_stats(db))


@router.get("/jobs", response_model=JobsWithStatsResponse)
def list_jobs_with_stats(
    params: PaginationParams = Depends(pagination_params),
    sort: Optional[str] = Query(None, description="Sort field, prefix with '-' for descending (default: -datePosted)"),
    db: Session = Depends(get_db)
):
    """
    Paginated jobs, each with its application count and latest application time.
    """
    sort_spec = parse_sort(sort, job_crud.DEFAULT_SORT, job_crud.SORTABLE_FIELDS)
    jobs, total_items = dashboard_service.get_jobs_with_stats(db, params, sort_spec)

    return JobsWithStatsResponse(
        pagination=get_pagination_metadata(params.page, params.limit, total_items),
        data=jobs,
    )


@router.get("/jobs/{job_id}/applications", response_model=JobApplicationsResponse)
def list_applications_for_job(
    job_id: str,
    params: PaginationParams = Depends(pagination_params),
    sort: Optional[str] = Query(None, description="Sort field, prefix with '-' for descending (default: -appliedAt)"),
    db: Session = Depends(get_db)
):
    """
    Paginated applications for one job, newest first by default, with a job summary.

    Raises:
        400: If the job ID is malformed
        404: If the job doesn't exist
    """
    job_uuid = parse_id(job_id, "jobId", "Invalid job ID format")
    sort_spec = parse_sort(sort, application_crud.DEFAULT_SORT, application_crud.SORTABLE_FIELDS)

    job, applications, total_items = dashboard_service.get_applications_for_job(
        db, job_uuid, params, sort_spec
    )

    return JobApplicationsResponse(
        pagination=get_pagination_metadata(params.page, params.limit, total_items),
        job=JobSummary.model_validate(job),
        data=[ApplicationResponse.model_validate(application) for application in applications],
    )


@router.get("/applications/{application_id}", response_model=ApplicationDetailResponse)
def get_application_details(application_id: str, db: Session = Depends(get_db)):
    """
    Single application with its job populated.
    """
    application = application_crud.get_by_id(
        db, parse_id(application_id, "id", "Invalid application ID format"), with_job=True
    )

    if not application:
        raise NotFoundError("Application not found")

    return ApplicationDetailResponse(data=ApplicationDetail.model_validate(application))


@router.get("/applications/{application_id}/cv")
def download_application_cv(
    application_id: str,
    db: Session = Depends(get_db),
    storage: LocalStorage = Depends(get_storage),
):
    """
    Download the CV attached to an application.

    Returns:
        FileResponse: The CV streamed with an attachment Content-Disposition
        carrying the original filename

    Raises:
        404: If the application or its file doesn't exist
    """
    application = application_crud.get_by_id(
        db, parse_id(application_id, "id", "Invalid application ID format")
    )

    if not application:
        raise NotFoundError("Application not found")

    if not storage.file_exists(application.cv_path):
        logger.error(f"CV file missing for application {application.id}: {application.cv_path}")
        raise NotFoundError("CV file not found on server")

    return FileResponse(
        path=application.cv_path,
        filename=application.original_filename,
        media_type=content_type_for(application.original_filename or application.cv_path),
    )
