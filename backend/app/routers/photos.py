from typing import Optional, Tuple

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
import logging

from app.core.config import Settings, get_settings
from app.schemas.media import ErrorResponse, PhotoUploadResponse, PhotosResponse, UploadedFile, ValidationResult
from app.services.cosmic_client import CosmicClient, get_cosmic_client
from app.services.photo_service import PhotoServiceError, get_photos, upload_photo
from app.utils.instrumentation import log_event
from app.utils.validators import MAX_IMAGE_SIZE_BYTES, check_image_constraints, validate_image_file

logger = logging.getLogger(__name__)

router = APIRouter(tags=["photos"])


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
    )


async def read_image_upload(
    file: Optional[UploadFile],
) -> Tuple[Optional[UploadedFile], ValidationResult]:
    """
    Validate and read a multipart image upload.

    The declared content type and size are checked before any bytes are read,
    and at most one byte past the limit is ever pulled into memory.
    """
    if file is None:
        return None, validate_image_file(None)

    declared = check_image_constraints(file.content_type, file.size)
    if not declared.valid:
        return None, declared

    data = await file.read(MAX_IMAGE_SIZE_BYTES + 1)
    uploaded = UploadedFile(
        filename=file.filename or "upload",
        content_type=file.content_type or "",
        data=data,
    )
    return uploaded, validate_image_file(uploaded)


@router.post(
    "/upload",
    response_model=PhotoUploadResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def upload(
    file: Optional[UploadFile] = File(None),
    client: CosmicClient = Depends(get_cosmic_client),
    settings: Settings = Depends(get_settings),
):
    uploaded, validation = await read_image_upload(file)
    if not validation.valid:
        return error_response(400, validation.error)

    try:
        photo = await run_in_threadpool(upload_photo, client, uploaded, settings.PHOTOS_FOLDER)
    except PhotoServiceError as e:
        logger.error("Upload error: %s", e.__cause__ or e)
        return error_response(500, "Failed to upload photo")

    log_event("photo_uploaded", {"media_id": photo.id, "size": uploaded.size})
    return PhotoUploadResponse(success=True, photo=photo)


@router.get(
    "/photos",
    response_model=PhotosResponse,
    responses={500: {"model": ErrorResponse}},
)
async def list_photos(
    client: CosmicClient = Depends(get_cosmic_client),
    settings: Settings = Depends(get_settings),
):
    try:
        photos = await run_in_threadpool(get_photos, client, settings.PHOTOS_FOLDER)
    except PhotoServiceError as e:
        logger.error("Error fetching photos: %s", e.__cause__ or e)
        return error_response(500, "Failed to fetch photos")

    return PhotosResponse(success=True, photos=photos)
