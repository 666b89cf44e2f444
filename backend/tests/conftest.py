"""Pytest configuration for backend tests."""
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional
import pytest

# Add backend directory to Python path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

from fastapi.testclient import TestClient

from app.core.config import Settings, get_settings
from app.main import app
from app.schemas.media import UploadedFile
from app.services.cosmic_client import CosmicAPIError, get_cosmic_client


SAMPLE_MEDIA: Dict[str, Any] = {
    "id": "65f1c0ffee",
    "name": "a1b2-shelf.jpg",
    "original_name": "shelf.jpg",
    "size": 2048,
    "type": "image/jpeg",
    "bucket": "bookshelf-test",
    "url": "https://cdn.cosmicjs.com/a1b2-shelf.jpg",
    "imgix_url": "https://imgix.cosmicjs.com/a1b2-shelf.jpg",
    "created_at": "2026-01-01T00:00:00.000Z",
    "modified_at": "2026-01-01T00:00:00.000Z",
}

SAMPLE_ANALYSIS = """BOOKS IDENTIFIED:
- Dune by Frank Herbert
- The Hobbit

GENRES:
- Science Fiction
- Fantasy

THEMES:
- Epic journeys
- Power and politics

READER PROFILE:
This reader loves expansive imaginary worlds.
They enjoy long series."""

SAMPLE_RECOMMENDATIONS = """Here you go:
{
  "recommendation_strategy": "Lean into epic world-building.",
  "recommendations": [
    {"title": "Hyperion", "author": "Dan Simmons", "genre": "Science Fiction",
     "reasoning": "Layered epic.", "isbn": "9780553283686", "connection_strength": "strong",
     "fills_gap": false, "evidence": ["Dune on shelf"]},
    {"title": "The Name of the Wind", "author": "Patrick Rothfuss", "genre": "Fantasy",
     "reasoning": "Immersive fantasy.", "isbn": "978-0-7564-0474-1"},
    {"title": "Mystery Pick", "author": "Someone", "genre": "Mystery",
     "reasoning": "Something new.", "isbn": "not-an-isbn", "fills_gap": true}
  ]
}"""


class FakeCosmicClient:
    """In-memory stand-in for CosmicClient that records calls.

    ``text_responses`` is consumed in order by generate_text; an Exception
    instance in the list is raised instead of returned.
    """

    def __init__(
        self,
        media: Optional[List[Dict[str, Any]]] = None,
        text_responses: Optional[List[Any]] = None,
        list_error: Optional[Exception] = None,
        upload_error: Optional[Exception] = None,
    ):
        self.media = media if media is not None else [dict(SAMPLE_MEDIA)]
        self.text_responses = list(text_responses or [])
        self.list_error = list_error
        self.upload_error = upload_error
        self.uploads: List[Dict[str, Any]] = []
        self.prompts: List[Dict[str, Any]] = []

    def list_media(self, folder=None):
        if self.list_error:
            raise self.list_error
        return self.media

    def upload_media(self, file: UploadedFile, folder=None):
        self.uploads.append({"filename": file.filename, "folder": folder, "size": file.size})
        if self.upload_error:
            raise self.upload_error
        return dict(SAMPLE_MEDIA, original_name=file.filename, size=file.size)

    def generate_text(self, prompt, media_url=None):
        self.prompts.append({"prompt": prompt, "media_url": media_url})
        if not self.text_responses:
            raise CosmicAPIError("no scripted response", status_code=503)
        response = self.text_responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def test_settings() -> Settings:
    """Settings isolated from backend/.env with zero retry delays."""
    return Settings(
        _env_file=None,
        COSMIC_BUCKET_SLUG="bookshelf-test",
        COSMIC_READ_KEY="read-key",
        COSMIC_WRITE_KEY="write-key",
        ACCESS_CODE="open-sesame",
        AMAZON_AFFILIATE_TAG="shelf-20",
        RETRY_MAX_ATTEMPTS=3,
        RETRY_INITIAL_DELAY_SECONDS=0.0,
        RETRY_MAX_DELAY_SECONDS=0.0,
    )


@pytest.fixture
def fake_cosmic() -> FakeCosmicClient:
    return FakeCosmicClient()


@pytest.fixture
def client(test_settings: Settings, fake_cosmic: FakeCosmicClient):
    """TestClient with settings and the Cosmic client overridden."""
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_cosmic_client] = lambda: fake_cosmic
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def make_upload(
    data: bytes = b"\xff\xd8\xff\xe0fake-jpeg",
    content_type: str = "image/jpeg",
    filename: str = "shelf.jpg",
) -> UploadedFile:
    return UploadedFile(filename=filename, content_type=content_type, data=data)
