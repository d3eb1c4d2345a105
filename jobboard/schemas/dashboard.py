from datetime import datetime
from typing import List, Optional
from uuid import UUID

from jobboard.schemas.common import CamelModel, Envelope, PaginationMeta
from jobboard.schemas.job import JobResponse, JobSummary
from jobboard.schemas.application import ApplicationResponse


class JobWithStats(JobResponse):
    application_count: int = 0
    latest_application: Optional[datetime] = None


class JobsWithStatsResponse(Envelope):
    pagination: PaginationMeta
    data: List[JobWithStats]


class JobApplicationsResponse(Envelope):
    pagination: PaginationMeta
    job: JobSummary
    data: List[ApplicationResponse]


class DashboardOverview(CamelModel):
    total_jobs: int
    total_applications: int
    recent_jobs: int
    recent_applications: int


class TopJob(CamelModel):
    id: UUID
    title: str
    company: str
    application_count: int


class DashboardStats(CamelModel):
    overview: DashboardOverview
    top_jobs: List[TopJob]


class DashboardStatsResponse(Envelope):
    data: DashboardStats
