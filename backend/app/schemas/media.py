from dataclasses import dataclass
from pydantic import BaseModel, ConfigDict
from typing import Optional, List


@dataclass(frozen=True)
class UploadedFile:
    """An uploaded file held in memory for the duration of one request."""
    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


class ValidationResult(BaseModel):
    valid: bool
    error: Optional[str] = None


class StoredMedia(BaseModel):
    """A media object as returned by the Cosmic media API."""
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    original_name: Optional[str] = None
    size: Optional[int] = None
    type: Optional[str] = None
    bucket: Optional[str] = None
    url: str
    imgix_url: Optional[str] = None
    created_at: Optional[str] = None
    modified_at: Optional[str] = None
    folder: Optional[str] = None

    @property
    def display_url(self) -> str:
        """Prefer the transform-capable imgix URL when the backend provides one."""
        return self.imgix_url or self.url


class PhotoUploadResponse(BaseModel):
    success: bool
    photo: StoredMedia


class PhotosResponse(BaseModel):
    success: bool
    photos: List[StoredMedia]


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
