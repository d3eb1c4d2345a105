"""
CV upload storage on the local filesystem.

Validates uploads (extension, declared MIME type, size), writes them under
``UPLOAD_DIR`` with sanitized collision-resistant names and removes them again
when a submission is rejected.
"""

import logging
import os
import random
import re
import time
from typing import BinaryIO, Optional

from fastapi import Request

from jobboard.core.config import settings
from jobboard.core.exceptions import PayloadTooLargeError, UnsupportedMediaTypeError

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = {
    "application/pdf",
    "application/msword",  # .doc
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",  # .docx
}
ALLOWED_EXTENSIONS = {".pdf", ".doc", ".docx"}

CONTENT_TYPES_BY_EXTENSION = {
    ".pdf": "application/pdf",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}

CHUNK_SIZE = 64 * 1024
MAX_SANITIZED_NAME_LENGTH = 50
_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9.-]")


def sanitize_filename(filename: str) -> str:
    """Replace anything outside [A-Za-z0-9.-] with '_' and cap the length."""
    return _UNSAFE_CHARS.sub("_", os.path.basename(filename or ""))[:MAX_SANITIZED_NAME_LENGTH]


def content_type_for(filename: str) -> str:
    """Determine content type based on file extension"""
    extension = os.path.splitext(filename)[1].lower()
    return CONTENT_TYPES_BY_EXTENSION.get(extension, "application/octet-stream")


class LocalStorage:
    """Local filesystem storage for uploaded CVs"""

    def __init__(self, base_dir: str = "uploads", max_size_bytes: int = 5 * 1024 * 1024):
        self.base_dir = base_dir
        self.max_size_bytes = max_size_bytes
        os.makedirs(self.base_dir, exist_ok=True)

    @property
    def max_size_mb(self) -> float:
        return self.max_size_bytes / (1024 * 1024)

    def validate_type(self, filename: Optional[str], content_type: Optional[str]) -> None:
        """
        Both the extension and the declared MIME type must be allowed.

        Raises:
            UnsupportedMediaTypeError: If either check fails
        """
        file_ext = os.path.splitext(filename or "")[1].lower()

        if file_ext not in ALLOWED_EXTENSIONS or content_type not in ALLOWED_CONTENT_TYPES:
            raise UnsupportedMediaTypeError(
                "Invalid file type or extension. Only PDF, DOC, and DOCX files are allowed."
            )

    def generate_filename(self, original_filename: str) -> str:
        unique_suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"
        return f"{unique_suffix}-{sanitize_filename(original_filename)}"

    def save_upload(self, file: BinaryIO, original_filename: str) -> str:
        """
        Stream an upload to disk and return its path.

        The file is written in chunks; once it grows past the size limit the
        partial file is removed and the upload is rejected.

        Raises:
            PayloadTooLargeError: If the file exceeds the size limit
        """
        file_path = os.path.join(self.base_dir, self.generate_filename(original_filename))
        written = 0

        try:
            with open(file_path, "wb") as buffer:
                while True:
                    chunk = file.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if written > self.max_size_bytes:
                        raise PayloadTooLargeError(f"File size exceeds {self.max_size_mb:g}MB limit")
                    buffer.write(chunk)
        except Exception:
            self.delete_file(file_path)
            raise

        logger.info(f"Saved CV to {file_path} ({written} bytes)")
        return file_path

    def delete_file(self, file_path: Optional[str]) -> bool:
        """
        Best-effort delete. Failures are logged, never raised.

        Returns:
            True if a file was removed
        """
        if not file_path:
            return False
        try:
            if os.path.exists(file_path):
                os.remove(file_path)
                logger.info(f"Deleted uploaded file {file_path}")
                return True
            return False
        except OSError as e:
            logger.error(f"Error deleting file {file_path}: {e}")
            return False

    def file_exists(self, file_path: str) -> bool:
        """Check if file exists on local filesystem"""
        return bool(file_path) and os.path.isfile(file_path)

    def is_writable(self) -> bool:
        return os.path.isdir(self.base_dir) and os.access(self.base_dir, os.W_OK)


def create_storage() -> LocalStorage:
    return LocalStorage(base_dir=settings.UPLOAD_DIR, max_size_bytes=settings.MAX_UPLOAD_SIZE_BYTES)


def get_storage(request: Request) -> LocalStorage:
    """Dependency returning the storage created at startup"""
    storage: Optional[LocalStorage] = getattr(request.app.state, "storage", None)
    if storage is None:
        raise RuntimeError("Storage has not been initialized for this application")
    return storage
