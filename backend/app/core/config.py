from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
import json
from pathlib import Path

from app.utils.retry import RetryPolicy


DEFAULT_CORS_ORIGINS = ["http://localhost:3000", "http://localhost:5173"]


class Settings(BaseSettings):
    # Cosmic bucket (media storage + AI)
    COSMIC_BUCKET_SLUG: str = ""
    COSMIC_READ_KEY: str = ""
    COSMIC_WRITE_KEY: str = ""
    COSMIC_API_URL: str = "https://api.cosmicjs.com/v3"
    COSMIC_WORKERS_URL: str = "https://workers.cosmicjs.com/v3"
    COSMIC_TIMEOUT_SECONDS: float = 60.0
    PHOTOS_FOLDER: str = "photos"

    # Shared secret for the gallery gate
    ACCESS_CODE: Optional[str] = None

    # Purchase links
    AMAZON_AFFILIATE_TAG: Optional[str] = None

    # Retry policy for AI calls
    RETRY_MAX_ATTEMPTS: int = 3
    RETRY_INITIAL_DELAY_SECONDS: float = 1.0
    RETRY_MAX_DELAY_SECONDS: float = 10.0
    RETRY_BACKOFF_MULTIPLIER: float = 2.0

    # CORS - can be JSON string or comma-separated string
    CORS_ORIGINS: str = '["http://localhost:3000", "http://localhost:5173"]'

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    model_config = SettingsConfigDict(
        # Load from backend/.env (relative to this file's parent's parent)
        env_file=str(Path(__file__).resolve().parents[2] / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    def require_cosmic(self) -> None:
        """Raise if the bucket credentials needed to talk to Cosmic are missing."""
        missing = [
            name
            for name in ("COSMIC_BUCKET_SLUG", "COSMIC_READ_KEY", "COSMIC_WRITE_KEY")
            if not (getattr(self, name) or "").strip()
        ]
        if missing:
            raise RuntimeError(
                f"{', '.join(missing)} not set. Add them to backend/.env from your Cosmic bucket settings."
            )

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_retries=self.RETRY_MAX_ATTEMPTS,
            initial_delay=self.RETRY_INITIAL_DELAY_SECONDS,
            max_delay=self.RETRY_MAX_DELAY_SECONDS,
            backoff_multiplier=self.RETRY_BACKOFF_MULTIPLIER,
        )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS from JSON string or comma-separated string."""
        if not self.CORS_ORIGINS:
            return list(DEFAULT_CORS_ORIGINS)

        try:
            # Try parsing as JSON first
            parsed = json.loads(self.CORS_ORIGINS)
            if isinstance(parsed, list):
                return [str(origin) for origin in parsed]
            # If it's a string, treat as single origin
            return [str(parsed)]
        except (json.JSONDecodeError, TypeError):
            # Fall back to comma-separated string
            origins = [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]
            return origins if origins else list(DEFAULT_CORS_ORIGINS)


settings = Settings()


def get_settings() -> Settings:
    """Dependency returning the process-wide settings (overridable in tests)."""
    return settings
