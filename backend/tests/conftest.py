"""
Pytest configuration for the SaveMyWines tests.
"""

import json
from io import BytesIO
from pathlib import Path

import pytest


FIXTURES_DIR = Path(__file__).parent / "fixtures"


def load_vision_response(name: str):
    """Load captured Vision API response for replay in tests."""
    path = FIXTURES_DIR / "vision_responses" / f"{name}.json"
    if path.exists():
        with open(path) as f:
            return json.load(f)
    return None


def create_test_image() -> BytesIO:
    """Minimal PNG header; contents are never decoded by the pipeline."""
    return BytesIO(b"\x89PNG\r\n\x1a\n" + b"\x00" * 64)


class RecordingStorage:
    """Label storage double that counts calls and can fail on demand."""

    def __init__(self, fail_with: Exception = None):
        from savemywines.services.label_storage import MockLabelStorage
        self._inner = MockLabelStorage(base_url="https://cdn.test")
        self.fail_with = fail_with
        self.calls = []

    def store(self, file_bytes, file_name, content_type):
        self.calls.append((file_bytes, file_name, content_type))
        if self.fail_with is not None:
            raise self.fail_with
        return self._inner.store(file_bytes, file_name, content_type)


class RecordingVision:
    """Vision double returning fixed annotations, counting calls."""

    def __init__(self, annotations=None, fail_with: Exception = None):
        from savemywines.services.vision import VisionAnnotations
        self.annotations = annotations or VisionAnnotations()
        self.fail_with = fail_with
        self.calls = []

    def annotate(self, image_bytes):
        self.calls.append(image_bytes)
        if self.fail_with is not None:
            raise self.fail_with
        return self.annotations


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    """Fresh SQLite path; DATABASE_PATH cleared so Alembic uses it."""
    monkeypatch.delenv("DATABASE_PATH", raising=False)
    return str(tmp_path / "wines.db")
