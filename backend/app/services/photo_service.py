"""Gallery operations on top of the Cosmic media library."""
import logging
from typing import List, Optional

from pydantic import ValidationError

from app.schemas.media import StoredMedia, UploadedFile
from app.services.cosmic_client import CosmicAPIError, CosmicClient

logger = logging.getLogger(__name__)


class PhotoServiceError(Exception):
    """User-safe failure for gallery operations; the cause is chained."""
    pass


def get_photos(client: CosmicClient, folder: Optional[str] = "photos") -> List[StoredMedia]:
    """
    List gallery photos. A 404 from Cosmic means the folder is empty.
    """
    try:
        media = client.list_media(folder=folder)
    except CosmicAPIError as e:
        if e.status_code == 404:
            return []
        logger.error("Error fetching photos: %s", e)
        raise PhotoServiceError("Failed to fetch photos") from e

    try:
        return [StoredMedia.model_validate(item) for item in media]
    except ValidationError as e:
        logger.error("Cosmic returned malformed media objects: %s", e)
        raise PhotoServiceError("Failed to fetch photos") from e


def upload_photo(client: CosmicClient, file: UploadedFile, folder: Optional[str] = "photos") -> StoredMedia:
    try:
        media = client.upload_media(file, folder=folder)
        return StoredMedia.model_validate(media)
    except Exception as e:
        logger.error("Error uploading photo %s: %s", file.filename, e)
        raise PhotoServiceError("Failed to upload photo") from e
