"""
Google Cloud Vision API client for wine label OCR.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Protocol

from ..config import Config

logger = logging.getLogger(__name__)


class VisionServiceError(Exception):
    """The OCR call failed or returned a payload we cannot use."""


@dataclass(frozen=True)
class VisionAnnotations:
    """Raw text and label tags for one image.

    Missing fields in the API response are defaulted here, once, so
    consumers never deal with partial payloads.
    """
    full_text: str = ""
    label_descriptions: list[str] = field(default_factory=list)

    @classmethod
    def from_response(cls, payload: Any) -> "VisionAnnotations":
        """
        Parse an ``images:annotate`` REST response.

        Expected shape::

            {"responses": [{"fullTextAnnotation": {"text": "..."},
                            "labelAnnotations": [{"description": "..."}]}]}

        Raises:
            VisionServiceError: payload is not an object, or the API
                reported an error for the image.
        """
        if not isinstance(payload, dict):
            raise VisionServiceError(
                f"Malformed Vision response: expected object, got {type(payload).__name__}"
            )

        responses = payload.get("responses") or []
        first = responses[0] if isinstance(responses, list) and responses else {}
        if not isinstance(first, dict):
            first = {}

        error = first.get("error") or {}
        if isinstance(error, dict) and error.get("message"):
            raise VisionServiceError(f"Vision API error: {error['message']}")

        text_annotation = first.get("fullTextAnnotation") or {}
        text = text_annotation.get("text") if isinstance(text_annotation, dict) else ""

        labels = []
        for label in first.get("labelAnnotations") or []:
            if isinstance(label, dict):
                labels.append(str(label.get("description") or "").lower())

        return cls(full_text=text if isinstance(text, str) else "", label_descriptions=labels)


class VisionServiceProtocol(Protocol):
    """Protocol for vision services (allows mocking)."""
    def annotate(self, image_bytes: bytes) -> VisionAnnotations: ...


class VisionService:
    """Google Cloud Vision API client (REST transport, no retries)."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        max_labels: int = Config.VISION_MAX_LABELS,
    ):
        """
        Initialize Vision service.

        Args:
            api_key: Vision API key. Defaults to Config.vision_api_key();
                     application default credentials are used when unset.
            timeout: Per-call timeout in seconds. Defaults to Config.vision_timeout()
            max_labels: maxResults for LABEL_DETECTION
        """
        self._client = None
        self._api_key = api_key if api_key is not None else Config.vision_api_key()
        self._timeout = timeout if timeout is not None else Config.vision_timeout()
        self._max_labels = max_labels

    def _get_client(self):
        """Lazy load Vision client."""
        if self._client is None:
            from google.cloud import vision

            # REST transport sends the image base64-encoded in a JSON body
            if self._api_key:
                self._client = vision.ImageAnnotatorClient(
                    client_options={"api_key": self._api_key},
                    transport="rest",
                )
            else:
                self._client = vision.ImageAnnotatorClient(transport="rest")
        return self._client

    def annotate(self, image_bytes: bytes) -> VisionAnnotations:
        """
        Run TEXT_DETECTION and LABEL_DETECTION on an image.

        Args:
            image_bytes: Raw image bytes

        Returns:
            VisionAnnotations with full OCR text and lowercase label tags

        Raises:
            VisionServiceError: on transport failure, API error status,
                or an undecodable response
        """
        return VisionAnnotations.from_response(self.annotate_raw(image_bytes))

    def annotate_raw(self, image_bytes: bytes) -> dict:
        """Call the API and return the response in ``images:annotate`` JSON shape."""
        from google.cloud import vision

        request = {
            "image": {"content": image_bytes},
            "features": [
                {"type_": vision.Feature.Type.TEXT_DETECTION},
                {"type_": vision.Feature.Type.LABEL_DETECTION, "max_results": self._max_labels},
            ],
        }

        try:
            response = self._get_client().annotate_image(
                request, retry=None, timeout=self._timeout
            )
            payload = {"responses": [json.loads(vision.AnnotateImageResponse.to_json(response))]}
        except Exception as e:
            logger.warning(f"Vision API call failed: {e}")
            raise VisionServiceError(str(e)) from e

        return payload


class MockVisionService:
    """Mock vision service for testing without API calls."""

    SCENARIOS = {
        "label": VisionAnnotations(
            full_text="Domaine Example\nPinot Noir\n2019",
            label_descriptions=["wine", "bottle", "pinot noir"],
        ),
        "full_label": VisionAnnotations(
            full_text="Château Test\nGrand Vin de Bordeaux\nCabernet Sauvignon\n2018\n750ml",
            label_descriptions=["wine", "label", "wine bottle"],
        ),
        "empty": VisionAnnotations(),
    }

    def __init__(self, scenario: str = "label"):
        self.scenario = scenario

    def annotate(self, image_bytes: bytes) -> VisionAnnotations:
        """Return canned annotations for the configured scenario."""
        return self.SCENARIOS.get(self.scenario, self.SCENARIOS["empty"])


class ReplayVisionService:
    """
    Replay captured Vision API responses for deterministic testing.

    Loads a previously captured ``images:annotate`` response from JSON and
    returns it regardless of the input image.
    """

    def __init__(self, fixture_path: str | Path):
        """
        Initialize with path to captured response fixture.

        Args:
            fixture_path: Path to JSON file containing captured Vision API response
        """
        self._fixture_path = Path(fixture_path)
        self._data: Optional[Any] = None

    def _load_fixture(self) -> Any:
        """Lazy load fixture data."""
        if self._data is None:
            try:
                with open(self._fixture_path) as f:
                    self._data = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                raise VisionServiceError(f"Cannot load vision fixture {self._fixture_path}: {e}") from e
        return self._data

    def annotate(self, image_bytes: bytes) -> VisionAnnotations:
        """
        Return captured Vision API response.

        Args:
            image_bytes: Ignored - returns captured response regardless of input
        """
        return VisionAnnotations.from_response(self._load_fixture())
