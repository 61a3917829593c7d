"""
Enums for type-safe string constants in SaveMyWines.
"""

from enum import Enum


class ScanStage(str, Enum):
    """Stage of a label scan."""
    RECEIVED = "received"
    UPLOADING = "uploading"
    UPLOADED = "uploaded"
    ANNOTATING = "annotating"
    ANNOTATED = "annotated"
    EXTRACTING = "extracting"
    COMPLETED = "completed"
    FAILED = "failed"
