"""
Error taxonomy and the FastAPI handlers that render it.

Every error leaves the API in the same envelope:
``{"success": false, "message": "...", ...extra}``.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from jobboard.core.config import settings

logger = logging.getLogger(__name__)


class JobBoardError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, **extra: Any):
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_content(self) -> Dict[str, Any]:
        content: Dict[str, Any] = {"success": False, "message": self.message}
        content.update({k: v for k, v in self.extra.items() if v is not None})
        return content


class RequestValidationFailed(JobBoardError):
    """Input rejected before any persistence happened."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, errors: List[Dict[str, str]], message: str = "Validation failed"):
        super().__init__(message, errors=errors)
        self.errors = errors

    @classmethod
    def for_field(cls, field: str, message: str) -> "RequestValidationFailed":
        return cls([{"field": field, "message": message}], message=message)


class NotFoundError(JobBoardError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(JobBoardError):
    status_code = status.HTTP_409_CONFLICT


class PayloadTooLargeError(JobBoardError):
    status_code = 413


class UnsupportedMediaTypeError(JobBoardError):
    status_code = status.HTTP_415_UNSUPPORTED_MEDIA_TYPE


def format_validation_errors(errors: List[Dict[str, Any]]) -> List[Dict[str, str]]:
    """
    Flatten pydantic error dicts into ``{"field", "message"}`` pairs.

    The leading location segment ("body", "query", "path") is dropped so the
    field name matches what the client sent.
    """
    formatted = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in ("body", "query", "path", "header", "form"):
            loc = loc[1:]
        formatted.append({
            "field": ".".join(loc) or "request",
            "message": error.get("msg", "Invalid value"),
        })
    return formatted


async def jobboard_error_handler(request: Request, exc: JobBoardError) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.info
    log(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_content()))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = format_validation_errors(exc.errors())
    logger.info(f"Rejected {request.method} {request.url.path}: {errors}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "message": "Validation failed", "errors": errors},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        content = {"success": False, "message": "Route not found", "path": request.url.path}
    else:
        content = {"success": False, "message": str(exc.detail)}
    return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    content: Dict[str, Optional[str]] = {"success": False, "message": "Internal server error"}
    if settings.is_development:
        content["message"] = str(exc) or content["message"]
        content["error"] = type(exc).__name__
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(JobBoardError, jobboard_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
