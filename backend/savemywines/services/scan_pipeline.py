"""
Label scan pipeline: upload → annotate → extract → respond.

Stages:
1. RECEIVED     validate file and device id (no network calls on failure)
2. UPLOADING    store the image (StorageError aborts; vision is not called)
3. ANNOTATING   OCR + label detection (VisionServiceError aborts)
4. EXTRACTING   heuristic field extraction (cannot fail)
5. COMPLETED    ScanResult assembled

No transaction spans storage and vision: when annotation fails after a
successful upload, the stored image stays where it is. Nothing is retried.
"""

import logging
import time
import uuid
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Optional

from ..models import ScanResult, ScanStage
from .field_extractor import extract
from .label_storage import LabelImage, LabelStorageProtocol, StorageError
from .vision import VisionAnnotations, VisionServiceError, VisionServiceProtocol

logger = logging.getLogger(__name__)


class ScanValidationError(ValueError):
    """The scan request is missing its image or device id."""


@dataclass
class ScanRequest:
    """One inbound label scan."""
    file_bytes: bytes
    file_name: str
    content_type: str
    device_id: str
    scan_id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])


class ScanPipeline:
    """
    Runs a single label scan against storage and vision gateways.

    Holds no per-request state, so one instance can serve concurrent
    requests.
    """

    def __init__(
        self,
        storage: LabelStorageProtocol,
        vision: VisionServiceProtocol,
        parallel: bool = False,
    ):
        """
        Args:
            storage: Label storage gateway
            vision: Vision gateway
            parallel: Upload and annotate concurrently on the in-memory bytes
        """
        self.storage = storage
        self.vision = vision
        self.parallel = parallel

    def run(self, request: ScanRequest) -> ScanResult:
        """
        Scan one label.

        Raises:
            ScanValidationError: missing file bytes or device id
            StorageError: upload failed
            VisionServiceError: OCR failed
        """
        t0 = time.perf_counter()
        scan_id = request.scan_id
        self._validate(request)
        self._log_stage(scan_id, ScanStage.RECEIVED, f"{len(request.file_bytes)} bytes")

        if self.parallel:
            label_image, annotations = self._upload_and_annotate_parallel(request)
        else:
            label_image = self._upload(request)
            annotations = self._annotate(request)

        self._log_stage(scan_id, ScanStage.EXTRACTING)
        fields = extract(annotations.full_text, annotations.label_descriptions)

        result = ScanResult(
            ok=True,
            device_id=request.device_id,
            name=fields.name,
            producer=fields.producer,
            varietal=fields.varietal,
            vintage=fields.vintage,
            label_image_url=label_image.public_url,
        )

        elapsed = time.perf_counter() - t0
        self._log_stage(
            scan_id, ScanStage.COMPLETED,
            f"in {elapsed:.2f}s: name={fields.name!r} varietal={fields.varietal!r} vintage={fields.vintage}"
        )
        return result

    def _validate(self, request: ScanRequest) -> None:
        if not request.file_bytes:
            raise ScanValidationError("Missing fields: file")
        if not (request.device_id or "").strip():
            raise ScanValidationError("Missing fields: device_id")

    def _upload(self, request: ScanRequest) -> LabelImage:
        self._log_stage(request.scan_id, ScanStage.UPLOADING)
        try:
            label_image = self.storage.store(
                request.file_bytes, request.file_name, request.content_type
            )
        except StorageError as e:
            self._log_stage(request.scan_id, ScanStage.FAILED, f"upload: {e}")
            raise
        self._log_stage(request.scan_id, ScanStage.UPLOADED, label_image.storage_key)
        return label_image

    def _annotate(self, request: ScanRequest) -> VisionAnnotations:
        self._log_stage(request.scan_id, ScanStage.ANNOTATING)
        try:
            annotations = self.vision.annotate(request.file_bytes)
        except VisionServiceError as e:
            # The uploaded image is left in storage; there is no compensating delete.
            self._log_stage(request.scan_id, ScanStage.FAILED, f"annotate: {e}")
            raise
        self._log_stage(
            request.scan_id, ScanStage.ANNOTATED,
            f"{len(annotations.full_text)} chars, {len(annotations.label_descriptions)} labels"
        )
        return annotations

    def _upload_and_annotate_parallel(
        self, request: ScanRequest
    ) -> tuple[LabelImage, VisionAnnotations]:
        """Fork upload and annotate, join both. Upload failure is reported first."""
        with ThreadPoolExecutor(max_workers=2) as executor:
            upload_future = executor.submit(self._upload, request)
            annotate_future = executor.submit(self._annotate, request)
            label_image = upload_future.result()
            annotations = annotate_future.result()
        return label_image, annotations

    @staticmethod
    def _log_stage(scan_id: str, stage: ScanStage, detail: Optional[str] = None) -> None:
        message = f"[{scan_id}] {stage.value.upper()}"
        if detail:
            message = f"{message}: {detail}"
        if stage is ScanStage.FAILED:
            logger.warning(message)
        else:
            logger.info(message)
