from .scan import router as scan_router
from .wines import router as wines_router

__all__ = ["scan_router", "wines_router"]
