"""
Upload-and-recommend flow for bookshelf photos.

Steps: upload the photo once, ask the AI to describe the shelf (retried),
parse the description, ask for recommendations (retried), normalize them and
attach purchase links. The upload is never retried because it is not
idempotent; the two AI calls are.
"""
import asyncio
import logging
from typing import Awaitable, Callable, Optional

from fastapi.concurrency import run_in_threadpool

from app.core.config import Settings
from app.schemas.media import StoredMedia, UploadedFile
from app.schemas.recommendation import BookAnalysis, RecommendationResponse, RecommendationSet
from app.services.analysis_parser import parse_analysis_text
from app.services.cosmic_client import CosmicAPIError, CosmicClient
from app.services.photo_service import PhotoServiceError, upload_photo
from app.services.prompts import (
    build_analysis_prompt,
    build_fallback_analysis_prompt,
    build_recommendation_prompt,
)
from app.services.recommendation_normalizer import normalize_recommendations
from app.utils.affiliate import build_purchase_link
from app.utils.retry import with_retry
from app.utils.timing import StepTimer
from app.utils.validators import is_non_empty_string

logger = logging.getLogger(__name__)

RECOMMENDATIONS_UNAVAILABLE = (
    "Your bookshelf was analyzed, but we couldn't generate recommendations right now. Please try again."
)


class UploadError(Exception):
    """The bookshelf photo could not be stored; nothing else was attempted."""
    pass


class AnalysisError(Exception):
    """The AI analysis of the uploaded photo failed after all retries."""
    pass


def request_analysis(client: CosmicClient, image_url: str) -> str:
    """
    One analysis attempt: the detailed image prompt, then the general prompt
    if the first call fails. An empty answer counts as a failure.
    """
    try:
        text = client.generate_text(build_analysis_prompt(image_url), media_url=image_url)
    except CosmicAPIError as e:
        logger.info("Detailed analysis prompt failed, trying general prompt: %s", e)
        text = client.generate_text(build_fallback_analysis_prompt(image_url), media_url=image_url)

    if not is_non_empty_string(text):
        raise AnalysisError("AI analysis returned empty response")
    return text


async def _generate_recommendations(
    client: CosmicClient,
    analysis_text: str,
    settings: Settings,
    sleep: Callable[[float], Awaitable[None]],
) -> Optional[RecommendationSet]:
    prompt = build_recommendation_prompt(analysis_text)
    try:
        response_text = await with_retry(
            lambda: run_in_threadpool(client.generate_text, prompt),
            settings.retry_policy(),
            label="recommendation generation",
            sleep=sleep,
        )
    except Exception:
        logger.exception("Error generating recommendations")
        return None
    return normalize_recommendations(response_text)


async def analyze_bookshelf(
    client: CosmicClient,
    file: UploadedFile,
    settings: Settings,
    *,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> RecommendationResponse:
    """
    Run the full flow for one validated upload.

    Raises:
        UploadError: the photo could not be stored
        AnalysisError: the AI analysis failed after retries

    A recommendation failure does not raise: the response still succeeds with
    the analysis, an empty list and an advisory ``error`` message. The same
    happens when the model returns an empty list or output that could not be
    parsed, rather than serving placeholder or fixed fallback books.
    """
    timer = StepTimer("bookshelf")

    try:
        photo: StoredMedia = await run_in_threadpool(upload_photo, client, file, None)
    except PhotoServiceError as e:
        raise UploadError(str(e)) from e
    timer.context = f"bookshelf media_id={photo.id}"
    timer.mark("upload")

    try:
        analysis_text = await with_retry(
            lambda: run_in_threadpool(request_analysis, client, photo.display_url),
            settings.retry_policy(),
            label="bookshelf analysis",
            sleep=sleep,
        )
    except Exception as e:
        logger.error("Error analyzing bookshelf media_id=%s: %s", photo.id, e)
        raise AnalysisError(f"Failed to analyze bookshelf: {e}") from e
    timer.mark("analysis")

    parsed = parse_analysis_text(analysis_text)
    analysis = BookAnalysis(
        photo=photo,
        books_identified=parsed.books_identified,
        genres=parsed.genres,
        themes=parsed.themes,
        reader_profile=parsed.reader_profile,
        raw_analysis=analysis_text,
    )

    rec_set = await _generate_recommendations(client, analysis_text, settings, sleep)
    timer.mark("recommendations")
    logger.info("bookshelf pipeline media_id=%s steps=%s total=%.2fms", photo.id, timer.steps, timer.total_ms)

    # Generation failed, the model returned no records, or its output was unusable
    if rec_set is None or not rec_set.is_usable:
        if rec_set is not None:
            logger.warning(
                "Unusable recommendations for media_id=%s (fallback=%s, returned=%d)",
                photo.id,
                rec_set.used_fallback,
                rec_set.source_count,
            )
        return RecommendationResponse(
            success=True,
            analysis=analysis,
            recommendations=[],
            error=RECOMMENDATIONS_UNAVAILABLE,
        )

    enriched = [
        rec.model_copy(update={"purchase_url": build_purchase_link(rec.isbn, settings.AMAZON_AFFILIATE_TAG)})
        for rec in rec_set.items
    ]
    return RecommendationResponse(
        success=True,
        analysis=analysis,
        recommendations=enriched,
        strategy=rec_set.strategy,
    )
