"""
src/config.py
==============
Runtime Configuration — TripTone

Responsibility:
    - Read environment variables once at startup
    - Expose them as a single immutable Settings object
    - Fail fast when a required secret is missing

The Settings instance is built in the FastAPI lifespan and passed by
reference into the pipeline; no module reads os.environ after startup.
"""

import os
from dataclasses import dataclass


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

DEFAULT_GEMINI_MODEL: str = "gemini-2.5-flash"
DEFAULT_MONGODB_URI: str = "mongodb://localhost:27017"
DEFAULT_MONGODB_DB: str = "triptone"
DEFAULT_MONGODB_COLLECTION: str = "audioanalyses"
DEFAULT_MAX_UPLOAD_BYTES: int = 50 * 1024 * 1024  # 50 MiB


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, constructed once."""

    gemini_api_key: str
    gemini_model: str = DEFAULT_GEMINI_MODEL
    mongodb_uri: str = DEFAULT_MONGODB_URI
    mongodb_db: str = DEFAULT_MONGODB_DB
    mongodb_collection: str = DEFAULT_MONGODB_COLLECTION
    environment: str = "production"
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"


def load_settings() -> Settings:
    """
    Build Settings from the current environment.

    Raises:
        RuntimeError: If GEMINI_API_KEY is not set.
    """
    api_key = os.environ.get("GEMINI_API_KEY")
    if not api_key:
        raise RuntimeError("GEMINI_API_KEY environment variable is not set.")

    max_upload = os.environ.get("MAX_UPLOAD_BYTES")

    return Settings(
        gemini_api_key=api_key,
        gemini_model=os.environ.get("GEMINI_MODEL", DEFAULT_GEMINI_MODEL),
        mongodb_uri=os.environ.get("MONGODB_URI", DEFAULT_MONGODB_URI),
        mongodb_db=os.environ.get("MONGODB_DB", DEFAULT_MONGODB_DB),
        mongodb_collection=os.environ.get(
            "MONGODB_COLLECTION", DEFAULT_MONGODB_COLLECTION
        ),
        environment=os.environ.get("APP_ENV", "production"),
        max_upload_bytes=int(max_upload) if max_upload else DEFAULT_MAX_UPLOAD_BYTES,
    )
