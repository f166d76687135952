"""
VCFolio Exceptions

Domain errors raised by the CRUD, storage and auth layers, plus the
FastAPI handlers that render them as JSON.

Every error body has the shape:
    {"detail": "<message>", "code": "<ERROR_CODE>", "details": {...}}

Status mapping:
    - 400: missing/invalid input, disallowed file type
    - 403: admin token missing, invalid or expired
    - 404: project, document or stored file not found
    - 413: upload over the configured ceiling
    - 500: disk or database failure (logged server-side)
"""

import logging
from typing import Any, Optional

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger("vcfolio.errors")


class VCFolioException(Exception):
    """Base exception carrying an HTTP status and machine-readable code."""

    def __init__(
        self,
        message: str,
        code: str = "VCFOLIO_ERROR",
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        result = {"detail": self.message, "code": self.code}
        if self.details:
            result["details"] = self.details
        return result


# ---------------------------------------------------------------------------
# NOT FOUND
# ---------------------------------------------------------------------------

class ProjectNotFoundError(VCFolioException):
    def __init__(self, project_id: int):
        super().__init__(
            message=f"Project {project_id} not found",
            code="PROJECT_NOT_FOUND",
            status_code=404,
            details={"project_id": project_id},
        )


class DocumentNotFoundError(VCFolioException):
    def __init__(self, document_id: int):
        super().__init__(
            message=f"Document {document_id} not found",
            code="DOCUMENT_NOT_FOUND",
            status_code=404,
            details={"document_id": document_id},
        )


class StoredFileNotFoundError(VCFolioException):
    """The requested path has no backing file in the upload directory."""

    def __init__(self, path: str):
        super().__init__(
            message="File not found",
            code="FILE_NOT_FOUND",
            status_code=404,
            details={"path": path},
        )


# ---------------------------------------------------------------------------
# VALIDATION
# ---------------------------------------------------------------------------

class MissingFieldError(VCFolioException):
    def __init__(self, fields: list[str]):
        super().__init__(
            message=f"Missing required fields: {', '.join(fields)}",
            code="MISSING_FIELDS",
            status_code=400,
            details={"fields": fields},
        )


class InvalidFileTypeError(VCFolioException):
    def __init__(self, filename: str, allowed: list[str]):
        super().__init__(
            message=f"File type not allowed: {filename}",
            code="INVALID_FILE_TYPE",
            status_code=400,
            details={"filename": filename, "allowed_extensions": allowed},
        )


class FileTooLargeError(VCFolioException):
    def __init__(self, max_mb: int):
        super().__init__(
            message=f"File exceeds the {max_mb}MB upload limit",
            code="FILE_TOO_LARGE",
            status_code=413,
            details={"max_size_mb": max_mb},
        )


# ---------------------------------------------------------------------------
# AUTH / STORAGE
# ---------------------------------------------------------------------------

class AdminAuthError(VCFolioException):
    def __init__(self, reason: str = "Administrator token required"):
        super().__init__(
            message=reason,
            code="ADMIN_AUTH_REQUIRED",
            status_code=403,
        )


class StorageWriteError(VCFolioException):
    def __init__(self, filename: str):
        super().__init__(
            message="Failed to save file to server",
            code="STORAGE_WRITE_FAILED",
            status_code=500,
            details={"filename": filename},
        )


# ---------------------------------------------------------------------------
# HANDLERS
# ---------------------------------------------------------------------------

async def vcfolio_exception_handler(request: Request, exc: VCFolioException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s rejected (%s): %s", request.method, request.url.path, exc.code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render request validation failures as 400 with the offending fields."""
    return JSONResponse(
        status_code=400,
        content={
            "detail": "Validation error",
            "code": "VALIDATION_ERROR",
            "errors": jsonable_encoder(exc.errors()),
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "code": "INTERNAL_ERROR"},
    )
