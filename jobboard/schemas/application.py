"""
Pydantic schemas for Application API requests/responses.
"""

import uuid
from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import EmailStr, Field, field_validator
from pydantic_core import PydanticCustomError

from jobboard.schemas.common import CamelModel, Envelope

MIN_NAME_LENGTH = 2


def parse_identifier(value, message: str = "Invalid ID format") -> UUID:
    """Parse a UUID identifier, raising a pydantic error with ``message`` if malformed."""
    if isinstance(value, UUID):
        return value
    try:
        return uuid.UUID(str(value).strip())
    except (TypeError, ValueError, AttributeError):
        raise PydanticCustomError("invalid_id", message)


class ApplicationCreateForm(CamelModel):
    """Multipart form fields submitted alongside the CV file."""
    name: str = Field(..., description="Applicant full name")
    email: EmailStr = Field(..., description="Applicant email, stored lowercased")
    job_id: UUID = Field(..., description="Job the applicant is applying for")

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v):
        if v is None or not str(v).strip():
            raise PydanticCustomError("required", "Name is required")
        name = str(v).strip()
        if len(name) < MIN_NAME_LENGTH:
            raise PydanticCustomError("too_short", f"Name must be at least {MIN_NAME_LENGTH} characters")
        return name

    @field_validator("email", mode="before")
    @classmethod
    def require_email(cls, v):
        if v is None or not str(v).strip():
            raise PydanticCustomError("required", "Email is required")
        return str(v).strip()

    @field_validator("email", mode="after")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("job_id", mode="before")
    @classmethod
    def validate_job_id(cls, v):
        if v is None or not str(v).strip():
            raise PydanticCustomError("required", "Job ID is required")
        return parse_identifier(v, "Invalid job ID format")


class ApplicationResponse(CamelModel):
    """Application as listed on the dashboard."""
    id: UUID
    job_id: UUID
    name: str
    email: str
    cv_path: str
    original_filename: str
    applied_at: datetime
    created_at: datetime
    updated_at: Optional[datetime] = None


class ApplicationCreateResponse(Envelope):
    data: ApplicationResponse


class ApplicationJobDetail(CamelModel):
    """Job fields populated into an application detail view."""
    id: UUID
    title: str
    company: str
    location: Optional[str] = None
    salary: Optional[str] = None
    description: str
    date_posted: datetime


class ApplicationDetail(ApplicationResponse):
    job: ApplicationJobDetail


class ApplicationDetailResponse(Envelope):
    data: ApplicationDetail
