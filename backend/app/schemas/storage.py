from pydantic import BaseModel, Field

from app.services.paths import FileType


class HealthResponse(BaseModel):
    status: str = "ok"
    service: str
    version: str


class UploadResponse(BaseModel):
    success: bool = True
    url: str
    path: str
    filename: str


class DeleteRequest(BaseModel):
    album_id: str = Field(..., min_length=1)
    file_type: FileType


class DeleteResponse(BaseModel):
    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
