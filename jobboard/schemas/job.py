from pydantic import Field, field_validator
from pydantic_core import PydanticCustomError
from typing import List, Optional
from datetime import datetime
from uuid import UUID

from jobboard.schemas.common import CamelModel, Envelope, PaginationMeta

MIN_DESCRIPTION_LENGTH = 50
MAX_TITLE_LENGTH = 200


def _require_text(value: Optional[str], message: str) -> str:
    if value is None or not str(value).strip():
        raise PydanticCustomError("required", message)
    return str(value).strip()


class JobCreateRequest(CamelModel):
    """Schema for creating a new job"""
    title: str = Field(..., description="Job title (max 200 characters)")
    company: str = Field(..., description="Hiring company name")
    description: str = Field(..., description=f"Full description, at least {MIN_DESCRIPTION_LENGTH} characters")
    location: Optional[str] = None
    salary: Optional[str] = Field(None, description="Free-text salary, e.g. '$120k - $150k'")

    @field_validator("title", mode="before")
    @classmethod
    def validate_title(cls, v):
        title = _require_text(v, "Job title is required")
        if len(title) > MAX_TITLE_LENGTH:
            raise PydanticCustomError("too_long", f"Title must be less than {MAX_TITLE_LENGTH} characters")
        return title

    @field_validator("company", mode="before")
    @classmethod
    def validate_company(cls, v):
        return _require_text(v, "Company name is required")

    @field_validator("description", mode="before")
    @classmethod
    def validate_description(cls, v):
        description = _require_text(v, "Job description is required")
        if len(description) < MIN_DESCRIPTION_LENGTH:
            raise PydanticCustomError(
                "too_short", f"Description must be at least {MIN_DESCRIPTION_LENGTH} characters"
            )
        return description

    @field_validator("location", "salary", mode="before")
    @classmethod
    def strip_optional(cls, v):
        """Blank optional fields are stored as null"""
        if v is None:
            return None
        v = str(v).strip()
        return v or None


class JobResponse(CamelModel):
    """Schema for job response"""
    id: UUID
    title: str
    company: str
    description: str
    location: Optional[str] = None
    salary: Optional[str] = None
    date_posted: datetime
    created_at: datetime
    updated_at: Optional[datetime] = None


class JobDetailResponse(Envelope):
    data: JobResponse


class JobListResponse(Envelope):
    count: int
    pagination: PaginationMeta
    data: List[JobResponse]


class JobSummary(CamelModel):
    """Compact job info returned next to a job's applications"""
    id: UUID
    title: str
    company: str
    location: Optional[str] = None
    date_posted: datetime
