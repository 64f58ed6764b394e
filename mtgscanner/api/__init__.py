from mtgscanner.api.collection import router as collection_router
from mtgscanner.api.health import router as health_router
from mtgscanner.api.scan import router as scan_router

__all__ = [
    "collection_router",
    "health_router",
    "scan_router",
]
