"""
Tests for the typed API client, driven through the FastAPI test client.
"""

import io
import uuid

import pytest

from jobboard.client import JobBoardAPIError, JobBoardClient
from jobboard.schemas.job import JobListResponse

DESCRIPTION = "Design, build and operate the services behind our public job board API."


@pytest.fixture
def api(client):
    return JobBoardClient(base_url="http://testserver", http_client=client)


def test_create_and_fetch_job(api):
    created = api.create_job("Backend Engineer", "Acme Corp", DESCRIPTION, location="Remote")

    assert created.success is True
    fetched = api.get_job(created.data.id)
    assert fetched.data.title == "Backend Engineer"
    assert fetched.data.location == "Remote"


def test_list_jobs_returns_typed_page(api):
    for i in range(3):
        api.create_job(f"Engineer {i}", "Acme Corp", DESCRIPTION)

    page = api.list_jobs(page=1, limit=2, sort="title")

    assert isinstance(page, JobListResponse)
    assert [job.title for job in page.data] == ["Engineer 0", "Engineer 1"]
    assert page.pagination.total_pages == 2
    assert page.pagination.has_next_page is True


def test_apply_and_review(api, tmp_path):
    job = api.create_job("Backend Engineer", "Acme Corp", DESCRIPTION).data
    cv_path = tmp_path / "Jane_Doe.pdf"
    cv_path.write_bytes(b"%PDF-1.4 jane")

    submitted = api.submit_application(job.id, "Jane Doe", "jane@example.com", str(cv_path))
    application_id = submitted.data.id

    stats = api.get_dashboard_stats().data
    assert stats.overview.total_applications == 1
    assert stats.top_jobs[0].application_count == 1

    jobs = api.list_dashboard_jobs().data
    assert jobs[0].application_count == 1

    applications = api.list_job_applications(job.id)
    assert applications.job.id == job.id
    assert [app.email for app in applications.data] == ["jane@example.com"]

    detail = api.get_application(application_id).data
    assert detail.job.title == "Backend Engineer"

    filename, content = api.download_cv(application_id)
    assert filename == "Jane_Doe.pdf"
    assert content == b"%PDF-1.4 jane"


def test_submit_from_file_object(api):
    job = api.create_job("Backend Engineer", "Acme Corp", DESCRIPTION).data

    response = api.submit_application(
        job.id, "Jane Doe", "jane@example.com", io.BytesIO(b"%PDF-1.4"), filename="cv.pdf"
    )

    assert response.data.original_filename == "cv.pdf"


def test_errors_carry_server_message(api):
    with pytest.raises(JobBoardAPIError) as exc_info:
        api.get_job(uuid.uuid4())

    assert exc_info.value.status_code == 404
    assert exc_info.value.message == "Job not found"


def test_duplicate_application_error(api):
    job = api.create_job("Backend Engineer", "Acme Corp", DESCRIPTION).data
    api.submit_application(job.id, "Jane Doe", "jane@example.com", io.BytesIO(b"%PDF"), filename="cv.pdf")

    with pytest.raises(JobBoardAPIError) as exc_info:
        api.submit_application(job.id, "Jane Doe", "jane@example.com", io.BytesIO(b"%PDF"), filename="cv.pdf")

    assert exc_info.value.status_code == 409
    assert "appliedAt" in exc_info.value.payload


def test_validation_error(api):
    with pytest.raises(JobBoardAPIError) as exc_info:
        api.create_job("Backend Engineer", "Acme Corp", "too short")

    assert exc_info.value.status_code == 400
    assert exc_info.value.payload["errors"][0]["field"] == "description"


def test_health(api):
    assert api.health()["status"] == "OK"


def test_close_leaves_injected_client_open(api, client):
    api.close()
    assert client.get("/health").status_code == 200
