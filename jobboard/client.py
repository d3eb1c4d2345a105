"""
Typed HTTP client for the Job Board API.

Wraps every endpoint in a method that returns the same pydantic response
models the server renders, so callers (scripts, other services, tests) get
parsed objects instead of raw JSON.

Usage:
    with JobBoardClient("http://localhost:8000") as client:
        page = client.list_jobs(page=1, limit=12)
        for job in page.data:
            print(job.title, job.company)
"""

import logging
import mimetypes
import os
from typing import Any, BinaryIO, Dict, Optional, Tuple, Type, TypeVar, Union
from urllib.parse import unquote
from uuid import UUID

import httpx
from pydantic import BaseModel

from jobboard.schemas.application import ApplicationCreateResponse, ApplicationDetailResponse
from jobboard.schemas.dashboard import DashboardStatsResponse, JobApplicationsResponse, JobsWithStatsResponse
from jobboard.schemas.job import JobDetailResponse, JobListResponse

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)
Identifier = Union[str, UUID]


class JobBoardAPIError(Exception):
    """Raised for any non-2xx response from the API."""

    def __init__(self, status_code: int, message: str, payload: Optional[Dict[str, Any]] = None):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.payload = payload or {}


class JobBoardClient:
    """
    Synchronous client built on ``httpx``.

    Args:
        base_url: Server root, e.g. ``http://localhost:8000``
        api_prefix: Prefix the API routers are mounted under
        timeout: Timeout in seconds for regular requests
        upload_timeout: Timeout in seconds for CV uploads
        http_client: Pre-configured client to use instead of creating one
            (FastAPI's ``TestClient`` works here); it is not closed by ``close()``
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        api_prefix: str = "/api",
        timeout: float = 10.0,
        upload_timeout: float = 60.0,
        http_client: Optional[httpx.Client] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_prefix = "/" + api_prefix.strip("/") if api_prefix.strip("/") else ""
        self.timeout = timeout
        self.upload_timeout = upload_timeout
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(timeout=timeout)

    def __enter__(self) -> "JobBoardClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    # Jobs

    def list_jobs(self, page: int = 1, limit: int = 12, sort: Optional[str] = None) -> JobListResponse:
        return self._get(JobListResponse, "/jobs", params=self._page_params(page, limit, sort))

    def get_job(self, job_id: Identifier) -> JobDetailResponse:
        return self._get(JobDetailResponse, f"/jobs/{job_id}")

    def create_job(
        self,
        title: str,
        company: str,
        description: str,
        location: Optional[str] = None,
        salary: Optional[str] = None,
    ) -> JobDetailResponse:
        body = {"title": title, "company": company, "description": description}
        if location is not None:
            body["location"] = location
        if salary is not None:
            body["salary"] = salary

        response = self._request("POST", "/jobs", json=body)
        return JobDetailResponse.model_validate(response.json())

    # Applications

    def submit_application(
        self,
        job_id: Identifier,
        name: str,
        email: str,
        cv: Union[str, os.PathLike, BinaryIO],
        filename: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> ApplicationCreateResponse:
        """
        Upload a CV and apply for a job.

        ``cv`` is a path or an open binary file. The content type is guessed
        from the filename when not given. Uses ``upload_timeout``.
        """
        if isinstance(cv, (str, os.PathLike)):
            filename = filename or os.path.basename(os.fspath(cv))
            with open(cv, "rb") as fh:
                return self._submit(job_id, name, email, fh, filename, content_type)

        filename = filename or os.path.basename(getattr(cv, "name", "") or "cv")
        return self._submit(job_id, name, email, cv, filename, content_type)

    def _submit(self, job_id, name, email, fh, filename, content_type) -> ApplicationCreateResponse:
        content_type = content_type or mimetypes.guess_type(filename)[0] or "application/octet-stream"
        response = self._request(
            "POST",
            "/applications",
            data={"name": name, "email": email, "jobId": str(job_id)},
            files={"cv": (filename, fh, content_type)},
            timeout=self.upload_timeout,
        )
        return ApplicationCreateResponse.model_validate(response.json())

    # Dashboard

    def get_dashboard_stats(self) -> DashboardStatsResponse:
        return self._get(DashboardStatsResponse, "/dashboard/stats")

    def list_dashboard_jobs(self, page: int = 1, limit: int = 12, sort: Optional[str] = None) -> JobsWithStatsResponse:
        return self._get(JobsWithStatsResponse, "/dashboard/jobs", params=self._page_params(page, limit, sort))

    def list_job_applications(
        self,
        job_id: Identifier,
        page: int = 1,
        limit: int = 12,
        sort: Optional[str] = None,
    ) -> JobApplicationsResponse:
        return self._get(
            JobApplicationsResponse,
            f"/dashboard/jobs/{job_id}/applications",
            params=self._page_params(page, limit, sort),
        )

    def get_application(self, application_id: Identifier) -> ApplicationDetailResponse:
        return self._get(ApplicationDetailResponse, f"/dashboard/applications/{application_id}")

    def download_cv(self, application_id: Identifier) -> Tuple[str, bytes]:
        """
        Returns:
            (filename from Content-Disposition, file bytes)
        """
        response = self._request("GET", f"/dashboard/applications/{application_id}/cv")
        return _attachment_filename(response.headers.get("content-disposition", "")), response.content

    # Health

    def health(self) -> Dict[str, Any]:
        response = self._request("GET", "/health", prefixed=False)
        return response.json()

    # Internals

    @staticmethod
    def _page_params(page: int, limit: int, sort: Optional[str]) -> Dict[str, Any]:
        params: Dict[str, Any] = {"page": page, "limit": limit}
        if sort:
            params["sort"] = sort
        return params

    def _get(self, model: Type[ModelT], path: str, params: Optional[Dict[str, Any]] = None) -> ModelT:
        response = self._request("GET", path, params=params)
        return model.model_validate(response.json())

    def _request(self, method: str, path: str, prefixed: bool = True, timeout: Optional[float] = None, **kwargs) -> httpx.Response:
        url = f"{self.base_url}{self.api_prefix if prefixed else ''}{path}"
        response = self._client.request(method, url, timeout=timeout or self.timeout, **kwargs)

        if response.is_error:
            raise _api_error(response)
        return response


def _api_error(response: httpx.Response) -> JobBoardAPIError:
    payload: Dict[str, Any] = {}
    try:
        body = response.json()
        if isinstance(body, dict):
            payload = body
    except ValueError:
        pass

    message = payload.get("message") or response.reason_phrase or "An error occurred"
    logger.error(f"API Error: {response.request.method} {response.request.url} -> {response.status_code}: {message}")
    return JobBoardAPIError(response.status_code, message, payload)


def _attachment_filename(content_disposition: str) -> str:
    """Read the filename from a Content-Disposition header, preferring the RFC 5987 ``filename*`` form."""
    plain = ""
    for part in content_disposition.split(";"):
        key, _, value = part.strip().partition("=")
        key = key.lower()
        if key == "filename*":
            _charset, _, encoded = value.strip().partition("''")
            return unquote(encoded, encoding=_charset or "utf-8")
        if key == "filename":
            plain = value.strip().strip('"')
    return plain
