from .enums import ScanStage
from .response import (
    ScanResult,
    ErrorResponse,
    AddWineRequest,
    AddWineResponse,
    WineRecord,
)

__all__ = [
    "ScanStage",
    "ScanResult",
    "ErrorResponse",
    "AddWineRequest",
    "AddWineResponse",
    "WineRecord",
]
