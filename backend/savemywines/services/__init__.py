from .field_extractor import ExtractedWineFields, extract
from .label_storage import LabelImage, LabelStorageService, StorageError
from .scan_pipeline import ScanPipeline, ScanRequest, ScanValidationError
from .vision import VisionAnnotations, VisionService, VisionServiceError

__all__ = [
    "ExtractedWineFields",
    "extract",
    "LabelImage",
    "LabelStorageService",
    "StorageError",
    "ScanPipeline",
    "ScanRequest",
    "ScanValidationError",
    "VisionAnnotations",
    "VisionService",
    "VisionServiceError",
]
