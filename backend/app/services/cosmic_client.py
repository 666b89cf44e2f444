"""
Thin HTTP client for the Cosmic bucket APIs (media library + AI text).

One client is built from settings at startup, stored on ``app.state`` and
handed to route handlers through the ``get_cosmic_client`` dependency.
"""
import json
import logging
from typing import Any, Dict, List, Optional

import requests
from fastapi import Depends, Request

from app.core.config import Settings, get_settings
from app.schemas.media import UploadedFile
from app.utils.timing import now_ms

logger = logging.getLogger(__name__)


class CosmicAPIError(Exception):
    """Raised when a Cosmic call fails at the transport or HTTP level."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class CosmicClient:
    def __init__(
        self,
        bucket_slug: str,
        read_key: str,
        write_key: str,
        api_url: str = "https://api.cosmicjs.com/v3",
        workers_url: str = "https://workers.cosmicjs.com/v3",
        timeout: float = 60.0,
        session: Optional[requests.Session] = None,
    ):
        self.bucket_slug = bucket_slug
        self.read_key = read_key
        self.write_key = write_key
        self.api_url = api_url.rstrip("/")
        self.workers_url = workers_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings: Settings) -> "CosmicClient":
        settings.require_cosmic()
        return cls(
            bucket_slug=settings.COSMIC_BUCKET_SLUG,
            read_key=settings.COSMIC_READ_KEY,
            write_key=settings.COSMIC_WRITE_KEY,
            api_url=settings.COSMIC_API_URL,
            workers_url=settings.COSMIC_WORKERS_URL,
            timeout=settings.COSMIC_TIMEOUT_SECONDS,
        )

    def _bucket_url(self, base: str, path: str) -> str:
        return f"{base}/buckets/{self.bucket_slug}/{path}"

    def _request(self, method: str, url: str, **kwargs) -> Dict[str, Any]:
        start = now_ms()
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise CosmicAPIError(f"Cosmic request failed: {e}") from e
        finally:
            logger.debug("cosmic %s %s: %.2fms", method, url, now_ms() - start)

        if resp.status_code >= 400:
            # Cosmic error bodies look like {"status": 404, "message": "..."}
            try:
                message = resp.json().get("message") or resp.text
            except ValueError:
                message = resp.text
            raise CosmicAPIError(
                f"Cosmic returned {resp.status_code}: {message}",
                status_code=resp.status_code,
            )

        try:
            return resp.json()
        except ValueError as e:
            raise CosmicAPIError("Cosmic returned a non-JSON response", status_code=resp.status_code) from e

    def list_media(self, folder: Optional[str] = None) -> List[Dict[str, Any]]:
        params: Dict[str, Any] = {"read_key": self.read_key}
        if folder:
            params["query"] = json.dumps({"folder": folder})
        data = self._request("GET", self._bucket_url(self.api_url, "media"), params=params)
        return data.get("media") or []

    def upload_media(self, file: UploadedFile, folder: Optional[str] = None) -> Dict[str, Any]:
        form = {"folder": folder} if folder else None
        data = self._request(
            "POST",
            self._bucket_url(self.workers_url, "media"),
            headers={"Authorization": f"Bearer {self.write_key}"},
            files={"media": (file.filename, file.data, file.content_type)},
            data=form,
        )
        media = data.get("media")
        if not isinstance(media, dict):
            raise CosmicAPIError("Cosmic upload response did not include a media object")
        return media

    def generate_text(self, prompt: str, media_url: Optional[str] = None) -> str:
        """Run a text generation; ``media_url`` lets the model look at an image."""
        payload: Dict[str, Any] = {"prompt": prompt}
        if media_url:
            payload["media_url"] = media_url
        data = self._request(
            "POST",
            self._bucket_url(self.workers_url, "ai/text"),
            headers={"Authorization": f"Bearer {self.write_key}"},
            json=payload,
        )
        return data.get("text") or ""


def get_cosmic_client(request: Request, settings: Settings = Depends(get_settings)) -> CosmicClient:
    """Dependency returning the app-wide client, building it on first use."""
    client = getattr(request.app.state, "cosmic", None)
    if client is None:
        client = CosmicClient.from_settings(settings)
        request.app.state.cosmic = client
    return client
