"""Error kinds raised by the file store and their JSON rendering.

Every failure leaves the service as ``{"success": false, "error": "..."}``
with the status code carried by the exception.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class FileStoreError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class RequestValidationFailure(FileStoreError):
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidAlbumId(RequestValidationFailure):
    pass


class MissingTrackNumber(RequestValidationFailure):
    pass


class InvalidTrackNumber(RequestValidationFailure):
    pass


class MissingExtension(RequestValidationFailure):
    pass


class UploadTooLarge(FileStoreError):
    status_code = status.HTTP_413_CONTENT_TOO_LARGE


class StorageIOError(FileStoreError):
    """Raised when a directory, write or delete call fails on disk."""


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message},
    )


def _describe_validation_error(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = [str(item) for item in err.get("loc", ()) if item not in ("body", "query", "path")]
        field = ".".join(loc)
        parts.append(f"{field}: {err.get('msg')}" if field else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(FileStoreError)
    async def file_store_error_handler(request: Request, exc: FileStoreError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s failed: %s", request.url.path, exc.message)
        else:
            logger.warning("Rejected %s: %s", request.url.path, exc.message)
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        message = _describe_validation_error(exc)
        logger.warning("Rejected %s: %s", request.url.path, message)
        return error_response(status.HTTP_400_BAD_REQUEST, message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request,
        exc: StarletteHTTPException,
    ) -> JSONResponse:
        return error_response(exc.status_code, str(exc.detail))
