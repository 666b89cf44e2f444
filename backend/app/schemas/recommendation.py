from pydantic import BaseModel, Field
from typing import Optional, List
from app.schemas.media import StoredMedia


class RecommendationRecord(BaseModel):
    title: str
    author: str
    genre: str
    reasoning: str
    isbn: str
    purchase_url: str = ""
    connection_strength: str = "moderate"  # strong | moderate | exploratory
    fills_gap: bool = False  # True when the book covers something missing from the shelf
    evidence: List[str] = Field(default_factory=list)  # Shelf observations backing the pick


class RecommendationSet(BaseModel):
    """Normalized recommendations plus the narrative shared by all of them."""
    items: List[RecommendationRecord]
    strategy: Optional[str] = None
    used_fallback: bool = False  # Model output unusable; items are the fixed fallback list
    source_count: int = 0  # Records the model actually returned, before padding/truncation

    @property
    def is_usable(self) -> bool:
        return not self.used_fallback and self.source_count > 0


class ParsedAnalysis(BaseModel):
    books_identified: List[str]
    genres: List[str]
    themes: List[str]
    reader_profile: str


class BookAnalysis(ParsedAnalysis):
    photo: StoredMedia
    raw_analysis: str


class RecommendationResponse(BaseModel):
    success: bool
    analysis: Optional[BookAnalysis] = None
    recommendations: List[RecommendationRecord] = Field(default_factory=list)
    strategy: Optional[str] = None
    error: Optional[str] = None
