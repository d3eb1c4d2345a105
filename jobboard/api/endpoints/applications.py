"""
API endpoint for job applications.

Handles the public apply flow: CV upload, duplicate prevention and cleanup of
the stored file whenever a submission is rejected.
"""

import logging
from typing import Optional
from fastapi import APIRouter, UploadFile, File, Form, Depends
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobboard.core.config import settings
from jobboard.core.database import get_db
from jobboard.core.exceptions import (
    ConflictError,
    JobBoardError,
    NotFoundError,
    RequestValidationFailed,
    format_validation_errors,
)
from jobboard.core.storage import LocalStorage, get_storage
from jobboard.crud import application as application_crud
from jobboard.crud import job as job_crud
from jobboard.schemas.application import (
    ApplicationCreateForm,
    ApplicationCreateResponse,
    ApplicationResponse,
)

router = APIRouter(prefix="/applications", tags=["Applications"])
logger = logging.getLogger(__name__)

DUPLICATE_MESSAGE = "You have already applied to this job"


@router.post("", status_code=201, response_model=ApplicationCreateResponse)
def create_application(
    cv: Optional[UploadFile] = File(None, description="CV file (PDF, DOC or DOCX, max 5MB)"),
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    job_id: Optional[str] = Form(None, alias="jobId"),
    db: Session = Depends(get_db),
    storage: LocalStorage = Depends(get_storage),
):
    """
    Submit an application with a CV for a job.

    Flow:
    1. Reject if no CV file is attached (400)
    2. Validate file extension and MIME type (415) and form fields (400)
    3. Stream the file to disk, rejecting anything over 5MB (413)
    4. Verify the job exists (404)
    5. Check for an earlier application from the same email (409)
    6. Insert the record; a concurrent duplicate hits the unique constraint (409)

    The stored file is deleted on every failure after step 3, so a rejected
    submission never leaves a CV behind.
    """
    # 1. CV is mandatory
    if cv is None or not cv.filename:
        raise RequestValidationFailed.for_field("cv", "CV file is required")

    # 2. Validate before anything is written
    storage.validate_type(cv.filename, cv.content_type)

    try:
        form = ApplicationCreateForm.model_validate({"name": name, "email": email, "jobId": job_id})
    except ValidationError as e:
        raise RequestValidationFailed(format_validation_errors(e.errors()))

    # 3. Persist the file (removed again by save_upload if it is too large)
    cv_path = storage.save_upload(cv.file, cv.filename)

    try:
        # 4. Job must exist
        job = job_crud.get_by_id(db, form.job_id)
        if not job:
            logger.info(f"Rejected application from {form.email}: job {form.job_id} not found")
            raise NotFoundError("Job not found")

        # 5. Application-level duplicate check
        existing = application_crud.get_by_email_and_job(db, form.email, form.job_id)
        if existing:
            logger.info(f"Rejected duplicate application from {form.email} for job {form.job_id}")
            raise ConflictError(DUPLICATE_MESSAGE, appliedAt=existing.applied_at)

        # 6. Insert; the unique constraint settles races with a concurrent submission
        try:
            application = application_crud.create(
                db,
                job_id=form.job_id,
                name=form.name,
                email=form.email,
                cv_path=cv_path,
                original_filename=cv.filename,
            )
        except IntegrityError:
            db.rollback()
            existing = application_crud.get_by_email_and_job(db, form.email, form.job_id)
            if existing is None:
                raise
            logger.warning(
                f"Concurrent duplicate application from {form.email} for job {form.job_id} "
                f"rejected by unique constraint"
            )
            raise ConflictError(DUPLICATE_MESSAGE, appliedAt=existing.applied_at)

    except JobBoardError:
        storage.delete_file(cv_path)
        raise
    except Exception as e:
        db.rollback()
        storage.delete_file(cv_path)
        logger.error(f"Failed to create application record: {e}")
        raise JobBoardError(
            "Error submitting application",
            error=str(e) if settings.is_development else None,
        ) from e

    logger.info(f"Created application {application.id} for job {form.job_id}")

    return ApplicationCreateResponse(
        message="Application submitted successfully",
        data=ApplicationResponse.model_validate(application),
    )
