from app.schemas.storage import (
    DeleteRequest,
    DeleteResponse,
    ErrorResponse,
    HealthResponse,
    UploadResponse,
)

__all__ = [
    "HealthResponse",
    "UploadResponse",
    "DeleteRequest",
    "DeleteResponse",
    "ErrorResponse",
]
