from typing import Optional
import uuid as uuid_lib

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import JSONResponse
import logging

from app.core.config import Settings, get_settings
from app.routers.photos import read_image_upload
from app.schemas.media import ErrorResponse
from app.schemas.recommendation import RecommendationResponse
from app.services.bookshelf_analyzer import analyze_bookshelf
from app.services.cosmic_client import CosmicClient, get_cosmic_client
from app.utils.instrumentation import log_event

logger = logging.getLogger(__name__)

router = APIRouter(tags=["analyze"])

ANALYSIS_FAILED = "Failed to analyze books. Please try again with a clearer photo of your bookshelf."


def _failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
    )


@router.post(
    "/analyze",
    response_model=RecommendationResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
@router.post(
    "/analyze-books",
    response_model=RecommendationResponse,
    response_model_exclude_none=True,
    include_in_schema=False,
)
async def analyze_books(
    file: Optional[UploadFile] = File(None),
    client: CosmicClient = Depends(get_cosmic_client),
    settings: Settings = Depends(get_settings),
):
    """
    Upload a bookshelf photo, analyze it and return book recommendations.

    Recommendation failures are reported as success with an empty list and an
    advisory ``error``; upload or analysis failures are a 500.
    """
    request_id = str(uuid_lib.uuid4())

    uploaded, validation = await read_image_upload(file)
    if not validation.valid:
        return _failure(400, validation.error)

    try:
        result = await analyze_bookshelf(client, uploaded, settings)
    except Exception:
        logger.exception("[POST /api/analyze ERROR] req_id=%s filename=%s", request_id, uploaded.filename)
        return _failure(500, ANALYSIS_FAILED)

    log_event(
        "bookshelf_analyzed",
        {
            "media_id": result.analysis.photo.id,
            "recommendation_count": len(result.recommendations),
            "partial": result.error is not None,
        },
        request_id=request_id,
    )
    return result
