"""
Normalize the model's recommendation output into a RecommendationSet.

The model is asked for strict JSON but routinely wraps it in prose, trims it,
or drops fields. This module never raises: anything unusable becomes the fixed
fallback list, and anything partial is padded and backfilled.
"""
import json
import logging
import re
from typing import Any, Dict, List, Optional

from app.schemas.recommendation import RecommendationRecord, RecommendationSet

logger = logging.getLogger(__name__)

MIN_RECOMMENDATIONS = 3
MAX_RECOMMENDATIONS = 5

# First "{" to last "}" across lines
_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")

FIELD_DEFAULTS: Dict[str, Any] = {
    "title": "Unknown Title",
    "author": "Unknown Author",
    "genre": "General",
    "reasoning": "A great book that matches your reading preferences.",
    "isbn": "9781234567890",
    "purchase_url": "",
    "connection_strength": "moderate",
    "fills_gap": False,
}

PLACEHOLDER_RECOMMENDATION: Dict[str, Any] = {
    "title": "The Book You Need",
    "author": "Great Author",
    "genre": "Fiction",
    "reasoning": "A wonderful read that matches your interests.",
    "isbn": "9781234567890",
}

FALLBACK_RECOMMENDATIONS: List[Dict[str, Any]] = [
    {
        "title": "The Midnight Library",
        "author": "Matt Haig",
        "genre": "Contemporary Fiction",
        "reasoning": "A thought-provoking novel about choices and possibilities that appeals to readers who enjoy literary fiction with depth.",
        "isbn": "9780525559474",
    },
    {
        "title": "Atomic Habits",
        "author": "James Clear",
        "genre": "Self-Help",
        "reasoning": "A practical guide to building better habits, perfect for readers interested in personal development and productivity.",
        "isbn": "9780735211292",
    },
    {
        "title": "The Seven Husbands of Evelyn Hugo",
        "author": "Taylor Jenkins Reid",
        "genre": "Historical Fiction",
        "reasoning": "A captivating story with rich characters and emotional depth that appeals to readers who enjoy character-driven narratives.",
        "isbn": "9781501161933",
    },
]


def fallback_recommendations() -> RecommendationSet:
    """The fixed set returned whenever the model output cannot be used."""
    return RecommendationSet(
        items=[_to_record(rec) for rec in FALLBACK_RECOMMENDATIONS],
        used_fallback=True,
    )


def extract_json_object(text: str) -> Optional[Dict[str, Any]]:
    """Parse the outermost {...} span of ``text``; None if absent or invalid."""
    if not text:
        return None
    match = _JSON_OBJECT.search(text)
    candidate = match.group(0) if match else text
    try:
        parsed = json.loads(candidate)
    except (json.JSONDecodeError, TypeError, ValueError):
        return None
    return parsed if isinstance(parsed, dict) else None


def _text_or_default(value: Any, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return default


def _evidence(value: Any) -> List[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return []
    return [str(item).strip() for item in value if item is not None and str(item).strip()]


def _to_record(raw: Any) -> RecommendationRecord:
    """Backfill every field of one raw recommendation with its default."""
    rec = raw if isinstance(raw, dict) else {}
    fills_gap = rec.get("fills_gap", rec.get("fillsGap"))
    return RecommendationRecord(
        title=_text_or_default(rec.get("title"), FIELD_DEFAULTS["title"]),
        author=_text_or_default(rec.get("author"), FIELD_DEFAULTS["author"]),
        genre=_text_or_default(rec.get("genre"), FIELD_DEFAULTS["genre"]),
        reasoning=_text_or_default(rec.get("reasoning"), FIELD_DEFAULTS["reasoning"]),
        isbn=_text_or_default(rec.get("isbn"), FIELD_DEFAULTS["isbn"]),
        purchase_url=_text_or_default(
            rec.get("purchase_url", rec.get("amazonUrl")), FIELD_DEFAULTS["purchase_url"]
        ),
        connection_strength=_text_or_default(
            rec.get("connection_strength", rec.get("connectionStrength")),
            FIELD_DEFAULTS["connection_strength"],
        ).lower(),
        fills_gap=fills_gap if isinstance(fills_gap, bool) else FIELD_DEFAULTS["fills_gap"],
        evidence=_evidence(rec.get("evidence")),
    )


def normalize_recommendations(response_text: str) -> RecommendationSet:
    """
    Build 3-5 complete recommendation records from raw model output.

    Args:
        response_text: Raw text returned by the AI generation call

    Returns:
        RecommendationSet with between MIN_RECOMMENDATIONS and MAX_RECOMMENDATIONS
        items. ``used_fallback`` is set when the fixed list had to be used and
        ``source_count`` holds how many records the model really returned.
    """
    try:
        parsed = extract_json_object(response_text)
        raw_items = parsed.get("recommendations") if parsed else None
        if not isinstance(raw_items, list):
            logger.error(
                "Failed to parse recommendations JSON; using fallback list. Raw response: %.500s",
                response_text,
            )
            return fallback_recommendations()

        items = list(raw_items)
        if len(items) != MIN_RECOMMENDATIONS:
            logger.warning("Expected %d recommendations, got %d", MIN_RECOMMENDATIONS, len(items))
        while len(items) < MIN_RECOMMENDATIONS:
            items.append(dict(PLACEHOLDER_RECOMMENDATION))
        items = items[:MAX_RECOMMENDATIONS]

        strategy = parsed.get("recommendation_strategy", parsed.get("recommendationStrategy"))
        return RecommendationSet(
            items=[_to_record(item) for item in items],
            strategy=strategy.strip() if isinstance(strategy, str) and strategy.strip() else None,
            source_count=len(raw_items),
        )
    except Exception:
        logger.exception("Unexpected error normalizing recommendations; using fallback list")
        return fallback_recommendations()
