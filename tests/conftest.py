"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown (in-memory SQLite)
- CV storage in a temporary upload directory
- FastAPI test client
- Sample jobs and applications
"""

import os
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from jobboard.core.database import Database, get_db
from jobboard.core.storage import LocalStorage, get_storage
from jobboard.models.application import Application
from jobboard.models.job import Job
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

SAMPLE_DESCRIPTION = (
    "We are looking for a Senior Python Developer with 5+ years of experience "
    "building web APIs with FastAPI and PostgreSQL."
)


@pytest.fixture
def database():
    """
    A fresh database per test. StaticPool keeps the single in-memory
    connection alive across sessions.
    """
    db = Database(
        SQLALCHEMY_TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    db.create_tables()
    yield db
    db.drop_tables()
    db.dispose()


@pytest.fixture
def db_session(database):
    db = database.session()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def storage(upload_dir):
    return LocalStorage(base_dir=str(upload_dir))


@pytest.fixture
def client(database, db_session, storage):
    """
    FastAPI test client with overridden database and storage dependencies.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage
    app.state.database = database
    app.state.storage = storage

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    app.state.database = None
    app.state.storage = None


@pytest.fixture
def sample_job_data():
    """Sample job data for testing"""
    return {
        "title": "Senior Python Developer",
        "company": "Acme Corp",
        "description": SAMPLE_DESCRIPTION,
        "location": "San Francisco, CA (Remote)",
        "salary": "$150k - $180k",
    }


@pytest.fixture
def make_job(db_session):
    """Insert a job directly; ``days_ago`` shifts its posting date into the past."""
    def _make_job(title="Senior Python Developer", company="Acme Corp", days_ago=0, **kwargs):
        posted = datetime.now(timezone.utc) - timedelta(days=days_ago)
        job = Job(
            title=title,
            company=company,
            description=kwargs.pop("description", SAMPLE_DESCRIPTION),
            date_posted=posted,
            **kwargs
        )
        db_session.add(job)
        db_session.commit()
        db_session.refresh(job)
        return job

    return _make_job


@pytest.fixture
def make_application(db_session, upload_dir):
    """Insert an application (and a CV file on disk) directly."""
    def _make_application(job, email="jane@example.com", name="Jane Doe", days_ago=0, content=b"%PDF-1.4 cv"):
        os.makedirs(upload_dir, exist_ok=True)
        cv_path = os.path.join(str(upload_dir), f"seed-{email.replace('@', '_at_')}-{job.id}.pdf")
        with open(cv_path, "wb") as fh:
            fh.write(content)

        application = Application(
            job_id=job.id,
            name=name,
            email=email.lower(),
            cv_path=cv_path,
            original_filename="jane_doe_cv.pdf",
            applied_at=datetime.now(timezone.utc) - timedelta(days=days_ago),
        )
        db_session.add(application)
        db_session.commit()
        db_session.refresh(application)
        return application

    return _make_application

