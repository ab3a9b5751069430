import logging

from fastapi import APIRouter, Depends, File, Form, UploadFile

from app.api.deps import get_file_store
from app.core.config import get_settings
from app.core.errors import UploadTooLarge
from app.schemas import DeleteRequest, DeleteResponse, ErrorResponse, UploadResponse
from app.services.paths import Category, FileType, resolve_upload_location
from app.services.storage import LocalFileStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["files"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={**ERROR_RESPONSES, 413: {"model": ErrorResponse}},
)
async def upload_file(
    file: UploadFile = File(...),
    album_id: str = Form(...),
    file_type: FileType = Form(...),
    category: Category = Form(...),
    track_number: str | None = Form(None),
    store: LocalFileStore = Depends(get_file_store),
) -> UploadResponse:
    """Store one album asset and return where it landed.

    Re-uploading the same album/category/track replaces the previous file.
    """
    location = resolve_upload_location(
        file_type=file_type,
        album_id=album_id,
        category=category,
        track_number=track_number,
        original_filename=file.filename,
    )
    logger.info(
        "Upload received: %r (from %r)", location.relative_path.as_posix(), file.filename
    )

    max_bytes = get_settings().max_upload_bytes
    try:
        data = await file.read(max_bytes + 1)
    finally:
        await file.close()
    if len(data) > max_bytes:
        raise UploadTooLarge(f"File exceeds the {max_bytes} byte upload limit")
    logger.info("File bytes read: %d bytes", len(data))

    stored = await store.put(location, data)
    return UploadResponse(url=stored.url, path=str(stored.path), filename=stored.filename)


@router.post("/delete", response_model=DeleteResponse, responses=ERROR_RESPONSES)
async def delete_album(
    payload: DeleteRequest,
    store: LocalFileStore = Depends(get_file_store),
) -> DeleteResponse:
    """Remove an album's whole directory; repeating the call is harmless."""
    deleted = await store.delete_tree(payload.file_type, payload.album_id)
    return DeleteResponse(message=deleted.message)
