"""
Employer dashboard aggregates.

Application counts per job, overall activity numbers and the most-applied
jobs, all computed with GROUP BY queries over the applications table.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from jobboard.core.config import settings
from jobboard.core.exceptions import NotFoundError
from jobboard.core.pagination import PaginationParams, SortSpec
from jobboard.crud import application as application_crud
from jobboard.crud import job as job_crud
from jobboard.models.application import Application
from jobboard.models.job import Job
from jobboard.schemas.dashboard import DashboardOverview, DashboardStats, JobWithStats, TopJob

logger = logging.getLogger(__name__)


def application_counts_for_jobs(
    db: Session,
    job_ids: Sequence[UUID],
) -> Dict[UUID, Tuple[int, Optional[datetime]]]:
    """
    Count applications and find the latest ``applied_at`` for the given jobs only.

    Returns:
        Mapping of job id to (count, latest applied timestamp). Jobs without
        applications are absent.
    """
    if not job_ids:
        return {}

    rows = (
        db.query(
            Application.job_id,
            func.count(Application.id),
            func.max(Application.applied_at),
        )
        .filter(Application.job_id.in_(list(job_ids)))
        .group_by(Application.job_id)
        .all()
    )
    return {job_id: (count, latest) for job_id, count, latest in rows}


def get_jobs_with_stats(
    db: Session,
    params: PaginationParams,
    sort: Optional[SortSpec] = None,
) -> Tuple[List[JobWithStats], int]:
    """
    One page of jobs, each annotated with its application count and latest
    application time.

    Returns:
        (jobs on the page, total job count)
    """
    jobs, total_items = job_crud.get_page(db, skip=params.skip, limit=params.limit, sort=sort)
    counts = application_counts_for_jobs(db, [job.id for job in jobs])

    jobs_with_stats = []
    for job in jobs:
        count, latest = counts.get(job.id, (0, None))
        item = JobWithStats.model_validate(job)
        item.application_count = count
        item.latest_application = latest
        jobs_with_stats.append(item)

    return jobs_with_stats, total_items


def get_top_jobs(db: Session, limit: Optional[int] = None) -> List[TopJob]:
    """
    Jobs ranked by number of applications, highest first.

    Ties are ordered by most recent posting, then id, so the ranking is stable.
    """
    limit = limit or settings.TOP_JOBS_LIMIT
    application_count = func.count(Application.id).label("application_count")

    rows = (
        db.query(Job.id, Job.title, Job.company, application_count)
        .join(Application, Application.job_id == Job.id)
        .group_by(Job.id, Job.title, Job.company, Job.date_posted)
        .order_by(application_count.desc(), Job.date_posted.desc(), Job.id.asc())
        .limit(limit)
        .all()
    )

    return [
        TopJob(id=job_id, title=title, company=company, application_count=count)
        for job_id, title, company, count in rows
    ]


def get_dashboard_stats(db: Session, now: Optional[datetime] = None) -> DashboardStats:
    """
    Overall totals, activity within the recent window and the top jobs.
    """
    now = now or datetime.now(timezone.utc)
    since = now - timedelta(days=settings.RECENT_ACTIVITY_DAYS)

    overview = DashboardOverview(
        total_jobs=job_crud.count(db),
        total_applications=application_crud.count(db),
        recent_jobs=job_crud.count(db, since=since),
        recent_applications=application_crud.count(db, since=since),
    )

    return DashboardStats(overview=overview, top_jobs=get_top_jobs(db))


def get_applications_for_job(
    db: Session,
    job_id: UUID,
    params: PaginationParams,
    sort: Optional[SortSpec] = None,
) -> Tuple[Job, List[Application], int]:
    """
    Applications for one job, paginated.

    Raises:
        NotFoundError: If the job does not exist

    Returns:
        (job, applications on the page, total applications for the job)
    """
    job = job_crud.get_by_id(db, job_id)
    if not job:
        raise NotFoundError("Job not found")

    total_items = application_crud.count(db, job_id=job_id)
    applications = application_crud.get_multi_for_job(
        db, job_id, skip=params.skip, limit=params.limit, sort=sort
    )

    logger.debug(f"Loaded {len(applications)} of {total_items} applications for job {job_id}")
    return job, applications, total_items
