"""
Unit tests for the application submission endpoint.

Tests:
- Successful CV upload
- Upload validation (missing file, type, size, form fields)
- Job existence and duplicate prevention, including the unique-constraint race
- No CV file is left on disk after any rejected submission
"""

import io
import os
import uuid

import pytest
from sqlalchemy.exc import SQLAlchemyError

from jobboard.crud import application as application_crud
from jobboard.models.application import Application

PDF_CONTENT = b"%PDF-1.4\nFake PDF content for testing"
DOCX_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def cv_upload(filename="resume.pdf", content=PDF_CONTENT, content_type="application/pdf"):
    """Build the ``files`` argument for a CV upload"""
    return {"cv": (filename, io.BytesIO(content), content_type)}


def uploaded_files(upload_dir):
    """Names of the files currently in the upload directory"""
    if not os.path.isdir(upload_dir):
        return set()
    return set(os.listdir(upload_dir))


def apply(client, job_id, email="jane@example.com", name="Jane Doe", files=None):
    return client.post(
        "/api/applications",
        data={"name": name, "email": email, "jobId": str(job_id)},
        files=files if files is not None else cv_upload(),
    )


class TestApplicationSubmit:
    """Test the happy path"""

    def test_submit_pdf(self, client, db_session, make_job, upload_dir):
        job = make_job()

        response = apply(client, job.id)

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Application submitted successfully"
        data = body["data"]
        assert data["jobId"] == str(job.id)
        assert data["name"] == "Jane Doe"
        assert data["originalFilename"] == "resume.pdf"
        assert "appliedAt" in data

        stored = uploaded_files(upload_dir)
        assert len(stored) == 1
        with open(os.path.join(upload_dir, stored.pop()), "rb") as fh:
            assert fh.read() == PDF_CONTENT

    def test_submit_docx(self, client, make_job):
        job = make_job()

        response = apply(client, job.id, files=cv_upload("resume.docx", b"PK\x03\x04", DOCX_TYPE))

        assert response.status_code == 201
        assert response.json()["data"]["originalFilename"] == "resume.docx"

    def test_email_is_lowercased(self, client, db_session, make_job):
        job = make_job()

        response = apply(client, job.id, email="  Jane.Doe@Example.COM ")

        assert response.status_code == 201
        assert response.json()["data"]["email"] == "jane.doe@example.com"
        assert db_session.query(Application).one().email == "jane.doe@example.com"

    def test_stored_filename_is_sanitized(self, client, make_job, upload_dir):
        job = make_job()

        apply(client, job.id, files=cv_upload("my resume (final) v2.pdf"))

        (stored,) = uploaded_files(upload_dir)
        assert stored.endswith("-my_resume__final__v2.pdf")
        assert " " not in stored


class TestUploadValidation:
    """Rejections that happen before the job and duplicate checks"""

    def test_missing_cv(self, client, make_job, upload_dir):
        job = make_job()

        response = client.post(
            "/api/applications",
            data={"name": "Jane Doe", "email": "jane@example.com", "jobId": str(job.id)},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "CV file is required"
        assert uploaded_files(upload_dir) == set()

    @pytest.mark.parametrize("filename,content_type", [
        ("resume.txt", "text/plain"),
        ("resume.exe", "application/pdf"),
        ("resume.pdf", "image/png"),
    ])
    def test_disallowed_type_rejected_before_job_lookup(self, client, upload_dir, filename, content_type):
        # The job does not exist: type validation must win over the 404
        response = apply(client, uuid.uuid4(), files=cv_upload(filename, b"data", content_type))

        assert response.status_code == 415
        assert "Only PDF" in response.json()["message"]
        assert uploaded_files(upload_dir) == set()

    def test_oversized_file_rejected_before_job_lookup(self, client, upload_dir):
        too_big = b"0" * (5 * 1024 * 1024 + 1)

        response = apply(client, uuid.uuid4(), files=cv_upload(content=too_big))

        assert response.status_code == 413
        assert response.json()["message"] == "File size exceeds 5MB limit"
        assert uploaded_files(upload_dir) == set()

    def test_file_of_exactly_5mb_accepted(self, client, make_job):
        job = make_job()

        response = apply(client, job.id, files=cv_upload(content=b"0" * (5 * 1024 * 1024)))

        assert response.status_code == 201

    def test_invalid_form_fields(self, client, make_job, upload_dir):
        job = make_job()

        response = apply(client, job.id, email="not-an-email", name="J")

        assert response.status_code == 400
        body = response.json()
        fields = {error["field"] for error in body["errors"]}
        assert fields == {"name", "email"}
        assert uploaded_files(upload_dir) == set()

    def test_malformed_job_id(self, client, upload_dir):
        response = apply(client, "12345")

        assert response.status_code == 400
        assert {"field": "jobId", "message": "Invalid job ID format"} in response.json()["errors"]
        assert uploaded_files(upload_dir) == set()


class TestJobAndDuplicateChecks:
    """Rejections after the file has been written; each must remove it"""

    def test_nonexistent_job(self, client, db_session, upload_dir):
        response = apply(client, uuid.uuid4())

        assert response.status_code == 404
        assert response.json()["message"] == "Job not found"
        assert uploaded_files(upload_dir) == set()
        assert db_session.query(Application).count() == 0

    def test_duplicate_application(self, client, db_session, make_job, upload_dir):
        job = make_job()

        first = apply(client, job.id)
        files_after_first = uploaded_files(upload_dir)
        second = apply(client, job.id, email="JANE@example.com")

        assert first.status_code == 201
        assert second.status_code == 409
        body = second.json()
        assert body["message"] == "You have already applied to this job"
        assert body["appliedAt"] is not None
        assert uploaded_files(upload_dir) == files_after_first
        assert db_session.query(Application).count() == 1

    def test_same_email_may_apply_to_different_jobs(self, client, make_job):
        job_a = make_job(title="Job A")
        job_b = make_job(title="Job B")

        assert apply(client, job_a.id).status_code == 201
        assert apply(client, job_b.id).status_code == 201

    def test_unique_constraint_race(self, client, db_session, make_job, make_application, upload_dir, monkeypatch):
        """
        A concurrent submission slips past the duplicate check; the database
        constraint rejects the insert and the uploaded file is removed.
        """
        job = make_job()
        existing = make_application(job, email="jane@example.com")
        files_before = uploaded_files(upload_dir)

        real_lookup = application_crud.get_by_email_and_job
        calls = []

        def lookup_misses_first_time(db, email, job_id):
            calls.append(email)
            if len(calls) == 1:
                return None
            return real_lookup(db, email, job_id)

        monkeypatch.setattr(application_crud, "get_by_email_and_job", lookup_misses_first_time)

        response = apply(client, job.id)

        assert response.status_code == 409
        assert response.json()["message"] == "You have already applied to this job"
        assert response.json()["appliedAt"] is not None
        assert uploaded_files(upload_dir) == files_before
        assert db_session.query(Application).one().id == existing.id

    def test_other_persistence_failure(self, client, db_session, make_job, upload_dir, monkeypatch):
        job = make_job()

        def failing_create(*args, **kwargs):
            raise SQLAlchemyError("connection lost")

        monkeypatch.setattr(application_crud, "create", failing_create)

        response = apply(client, job.id)

        assert response.status_code == 500
        assert response.json()["message"] == "Error submitting application"
        assert uploaded_files(upload_dir) == set()

    def test_cleanup_failure_is_logged_not_raised(self, client, make_job, upload_dir, monkeypatch, caplog):
        def failing_remove(path):
            raise PermissionError("read-only filesystem")

        monkeypatch.setattr("jobboard.core.storage.os.remove", failing_remove)

        with caplog.at_level("ERROR"):
            response = apply(client, uuid.uuid4())

        assert response.status_code == 404
        assert "Error deleting file" in caplog.text
