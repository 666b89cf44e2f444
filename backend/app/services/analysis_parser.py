"""
Turn the model's bookshelf analysis text into a ParsedAnalysis.

The text is expected to follow the section layout requested in the analysis
prompt (BOOKS IDENTIFIED / GENRES / THEMES / READER PROFILE) but the model is
free to reorder, skip or decorate sections, so parsing is line based and
tolerant. Anything missing is filled with defaults.
"""
import logging
import re
from typing import Dict, List, Optional, Tuple

from app.schemas.recommendation import ParsedAnalysis

logger = logging.getLogger(__name__)

BOOKS = "books"
GENRES = "genres"
THEMES = "themes"
PROFILE = "profile"
IGNORED = "ignored"

# Checked in order; first substring hit wins
SECTION_HEADERS: List[Tuple[str, str]] = [
    ("BOOKS IDENTIFIED", BOOKS),
    ("GENRES", GENRES),
    ("THEMES", THEMES),
    ("READER PROFILE", PROFILE),
    ("READING PATTERNS", IGNORED),
    ("COLLECTION INSIGHTS", IGNORED),
    ("KEY INSIGHTS", IGNORED),
    ("READING GAPS", IGNORED),
    ("OBSERVATIONS", IGNORED),
]

# Keyword of the section that normally follows; lines containing it are not data
NEXT_SECTION_GUARDS: Dict[str, str] = {
    BOOKS: "GENRES",
    GENRES: "THEMES",
    THEMES: "READER",
}

DEFAULT_BOOKS = ["Collection of books visible on shelf"]
DEFAULT_GENRES = ["Mixed genres", "Fiction", "Non-fiction"]
DEFAULT_THEMES = ["Diverse reading interests", "Personal growth", "Entertainment"]
DEFAULT_READER_PROFILE = (
    "This reader has diverse interests and enjoys exploring various genres and topics through reading."
)

_BULLET = re.compile(r"^[-•*]\s*")
_NUMBERED = re.compile(r"^\d+\.\s*")


def match_section_header(line: str) -> Optional[str]:
    """Return the section a header line switches to, or None for data lines."""
    upper = line.upper()
    for keyword, section in SECTION_HEADERS:
        if keyword in upper:
            return section
    return None


def strip_list_marker(line: str) -> str:
    """Strip a leading bullet (-, •, *) and then a numeric "1." prefix."""
    return _NUMBERED.sub("", _BULLET.sub("", line)).strip()


def parse_analysis_text(analysis_text: str) -> ParsedAnalysis:
    lists: Dict[str, List[str]] = {BOOKS: [], GENRES: [], THEMES: []}
    profile_parts: List[str] = []
    current: Optional[str] = None

    for line in (analysis_text or "").splitlines():
        trimmed = line.strip()
        if not trimmed:
            continue

        header = match_section_header(trimmed)
        if header is not None:
            current = header
            continue

        if current in lists:
            guard = NEXT_SECTION_GUARDS[current]
            if guard in trimmed.upper():
                continue
            cleaned = strip_list_marker(trimmed)
            if cleaned:
                lists[current].append(cleaned)
        elif current == PROFILE:
            profile_parts.append(trimmed)

    books = [b for b in lists[BOOKS] if b] or list(DEFAULT_BOOKS)
    genres = [g for g in lists[GENRES] if g] or list(DEFAULT_GENRES)
    themes = [t for t in lists[THEMES] if t] or list(DEFAULT_THEMES)
    reader_profile = " ".join(profile_parts).strip() or DEFAULT_READER_PROFILE

    if current is None:
        logger.info("Analysis text had no recognizable section headers; using defaults")

    return ParsedAnalysis(
        books_identified=books,
        genres=genres,
        themes=themes,
        reader_profile=reader_profile,
    )
