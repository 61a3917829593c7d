"""
/scan_wine endpoint for SaveMyWines.

Receives a label photo and a device id, returns pre-filled wine fields.
"""

import logging
from functools import lru_cache

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.datastructures import UploadFile

from ..config import Config
from ..feature_flags import FeatureFlags, get_feature_flags
from ..models import ErrorResponse, ScanResult
from ..services.label_storage import LabelStorageProtocol, LabelStorageService, MockLabelStorage
from ..services.scan_pipeline import ScanPipeline, ScanRequest, ScanValidationError
from ..services.vision import MockVisionService, ReplayVisionService, VisionService, VisionServiceProtocol

logger = logging.getLogger(__name__)
router = APIRouter()


# === Dependency Injection ===


@lru_cache(maxsize=1)
def get_label_storage() -> LabelStorageProtocol:
    """Label storage gateway (singleton via lru_cache)."""
    if Config.use_mocks():
        logger.info("Using in-memory label storage (USE_MOCKS=true)")
        return MockLabelStorage()
    return LabelStorageService()


@lru_cache(maxsize=1)
def get_vision_service() -> VisionServiceProtocol:
    """Vision gateway (singleton via lru_cache)."""
    fixture = Config.vision_fixture()
    if fixture:
        logger.info(f"Using vision fixture: {fixture}")
        return ReplayVisionService(fixture)
    if Config.use_mocks():
        return MockVisionService("label")
    return VisionService()


def get_scan_pipeline(flags: FeatureFlags = Depends(get_feature_flags)) -> ScanPipeline:
    """Scan pipeline wired to the process-wide gateways."""
    return ScanPipeline(
        storage=get_label_storage(),
        vision=get_vision_service(),
        parallel=flags.feature_parallel_scan,
    )


# === Endpoints ===


@router.post(
    "/scan_wine",
    response_model=ScanResult,
    responses={
        400: {"description": "Not multipart, or missing file/device_id (plain text)"},
        500: {"model": ErrorResponse, "description": "Storage or vision failure"},
    },
)
async def scan_wine(request: Request, pipeline: ScanPipeline = Depends(get_scan_pipeline)):
    """
    Scan a wine label and return best-effort wine fields.

    Multipart form fields:
        file: The label image
        device_id: Client device identifier

    Extraction is heuristic; empty fields mean "not found", not an error.
    """
    content_type = request.headers.get("content-type", "")
    if "multipart/form-data" not in content_type:
        return PlainTextResponse("Bad Request", status_code=400)

    try:
        form = await request.form()
    except Exception as e:
        logger.warning(f"Unreadable multipart body: {e}")
        return PlainTextResponse("Bad Request", status_code=400)

    upload = form.get("file")
    # Opaque identifier: checked for blankness, passed through unchanged
    device_id = str(form.get("device_id") or "")
    if not isinstance(upload, UploadFile) or not device_id.strip():
        return PlainTextResponse("Missing fields", status_code=400)

    try:
        file_bytes = await upload.read()
    except IOError as e:
        logger.error(f"Failed to read uploaded label: {e}")
        return PlainTextResponse("Failed to read image file", status_code=400)

    if len(file_bytes) > Config.MAX_IMAGE_SIZE_BYTES:
        return PlainTextResponse(
            f"Image too large. Maximum size is {Config.MAX_IMAGE_SIZE_MB}MB.",
            status_code=400,
        )

    scan_request = ScanRequest(
        file_bytes=file_bytes,
        file_name=upload.filename or "",
        content_type=upload.content_type or "application/octet-stream",
        device_id=device_id,
    )

    try:
        return await run_in_threadpool(pipeline.run, scan_request)
    except ScanValidationError as e:
        logger.info(f"[{scan_request.scan_id}] Rejected scan: {e}")
        return PlainTextResponse("Missing fields", status_code=400)
    except Exception as e:
        logger.error(f"[{scan_request.scan_id}] Scan failed: {e}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error=str(e)).model_dump(),
        )
