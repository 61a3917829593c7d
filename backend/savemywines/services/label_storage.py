"""
Label image storage on Google Cloud Storage.

Every scan writes a new object under ``labels/{uuid}-{file_name}``.
Existing objects are never replaced, and nothing is retried here;
failures surface to the caller as StorageError.
"""

import logging
import posixpath
import uuid
from collections import OrderedDict
from dataclasses import dataclass
from typing import Optional, Protocol
from urllib.parse import quote

from ..config import Config

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """The label image could not be written."""


@dataclass(frozen=True)
class LabelImage:
    """A stored label image."""
    storage_key: str
    public_url: str
    content_type: str
    size_bytes: int


def make_storage_key(file_name: str, prefix: str = Config.STORAGE_KEY_PREFIX) -> str:
    """Build a collision-free object key from the client's file name."""
    base = posixpath.basename((file_name or "").replace("\\", "/")).strip()
    return f"{prefix}/{uuid.uuid4()}-{base or 'label'}"


def public_object_url(base_url: str, key: str) -> str:
    """URL for a stored key under a base URL; the client file name is percent-encoded."""
    return f"{base_url.rstrip('/')}/{quote(key)}"


class LabelStorageProtocol(Protocol):
    """Protocol for label storage (allows mocking)."""
    def store(self, file_bytes: bytes, file_name: str, content_type: str) -> LabelImage: ...


class LabelStorageService:
    """Uploads label images to a GCS bucket."""

    def __init__(
        self,
        bucket_name: Optional[str] = None,
        public_base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self._client = None
        self._bucket_name = bucket_name or Config.label_bucket()
        self._public_base_url = public_base_url if public_base_url is not None else Config.label_public_base_url()
        self._timeout = timeout if timeout is not None else Config.storage_timeout()

    def _get_client(self):
        """Lazy load storage client."""
        if self._client is None:
            from google.cloud import storage
            self._client = storage.Client()
        return self._client

    def store(self, file_bytes: bytes, file_name: str, content_type: str) -> LabelImage:
        """
        Upload an image and return where it can be fetched from.

        Args:
            file_bytes: Image bytes
            file_name: Original client file name (only the base name is kept)
            content_type: MIME type recorded on the object

        Returns:
            LabelImage with its key and public URL

        Raises:
            StorageError: quota, permission, network or precondition failure
        """
        key = make_storage_key(file_name)

        try:
            bucket = self._get_client().bucket(self._bucket_name)
            blob = bucket.blob(key)
            # generation 0 = only create, never overwrite an existing object
            blob.upload_from_string(
                file_bytes,
                content_type=content_type or "application/octet-stream",
                if_generation_match=0,
                timeout=self._timeout,
                retry=None,
            )
        except Exception as e:
            logger.warning(f"Label upload failed for gs://{self._bucket_name}/{key}: {e}")
            raise StorageError(str(e)) from e

        if self._public_base_url:
            public_url = public_object_url(self._public_base_url, key)
        else:
            public_url = blob.public_url

        logger.debug(f"Stored label gs://{self._bucket_name}/{key} ({len(file_bytes)} bytes)")
        return LabelImage(
            storage_key=key,
            public_url=public_url,
            content_type=content_type,
            size_bytes=len(file_bytes),
        )


class MockLabelStorage:
    """In-memory label storage for mock mode and tests.

    Keeps at most ``max_objects`` images; the oldest are dropped first.
    """

    def __init__(self, base_url: str = "http://localhost:8000/mock-labels", max_objects: int = 100):
        self._base_url = base_url.rstrip("/")
        self._max_objects = max_objects
        self.objects: OrderedDict[str, bytes] = OrderedDict()

    def store(self, file_bytes: bytes, file_name: str, content_type: str) -> LabelImage:
        key = make_storage_key(file_name)
        if key in self.objects:
            raise StorageError(f"Object already exists: {key}")
        self.objects[key] = file_bytes
        while len(self.objects) > self._max_objects:
            self.objects.popitem(last=False)
        return LabelImage(
            storage_key=key,
            public_url=public_object_url(self._base_url, key),
            content_type=content_type,
            size_bytes=len(file_bytes),
        )
