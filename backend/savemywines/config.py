"""
Centralized configuration for the SaveMyWines backend.

All constants are defined here to avoid scattered magic numbers
and enable easy configuration management.
"""

import os
from pathlib import Path
from typing import List, Optional


class Config:
    """Application configuration constants."""

    # === Label Scanning ===
    VISION_MAX_LABELS = 10       # LABEL_DETECTION maxResults
    STORAGE_KEY_PREFIX = "labels"

    # === Security ===
    MAX_IMAGE_SIZE_MB = 10
    MAX_IMAGE_SIZE_BYTES = MAX_IMAGE_SIZE_MB * 1024 * 1024
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:8080",
        "http://127.0.0.1:5500",  # Live Server for the static client
    ]

    # === Environment ===
    @staticmethod
    def use_mocks() -> bool:
        """Use in-memory storage and canned vision results."""
        return os.getenv("USE_MOCKS", "false").lower() == "true"

    @staticmethod
    def log_level() -> str:
        """Log level (DEBUG, INFO, WARNING, ERROR)."""
        return os.getenv("LOG_LEVEL", "INFO").upper()

    # === Vision API ===
    @staticmethod
    def vision_api_key() -> Optional[str]:
        """Cloud Vision API key. Unset means application default credentials."""
        return os.getenv("VISION_API_KEY") or None

    @staticmethod
    def vision_timeout() -> float:
        """Timeout in seconds for a single annotate call. Default: 10.0."""
        try:
            return float(os.getenv("VISION_TIMEOUT", "10.0"))
        except ValueError:
            return 10.0

    @staticmethod
    def vision_fixture() -> Optional[str]:
        """Path to a captured Vision response to replay instead of calling the API."""
        return os.getenv("VISION_FIXTURE") or None

    # === Label Storage ===
    @staticmethod
    def label_bucket() -> str:
        """GCS bucket holding uploaded label images."""
        return os.getenv("LABEL_BUCKET", "labels")

    @staticmethod
    def label_public_base_url() -> Optional[str]:
        """Optional CDN base URL; overrides the bucket's public URL."""
        value = os.getenv("LABEL_PUBLIC_BASE_URL", "").strip()
        return value.rstrip("/") or None

    @staticmethod
    def storage_timeout() -> float:
        """Timeout in seconds for a label upload. Default: 30.0."""
        try:
            return float(os.getenv("STORAGE_TIMEOUT", "30.0"))
        except ValueError:
            return 30.0

    # === Database Persistence ===
    @staticmethod
    def database_path() -> str:
        """Path to SQLite database file.
        Default: backend/savemywines/data/wines.db (relative to package).
        Override with DATABASE_PATH env var for container deployments.
        """
        default = str(Path(__file__).parent / "data" / "wines.db")
        return os.getenv("DATABASE_PATH", default)
