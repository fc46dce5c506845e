from webstore.api.http.health import router as health_router
from webstore.api.http.storage import router as storage_router
from webstore.api.http.search import router as search_router

__all__ = [
    "health_router",
    "storage_router",
    "search_router"
]
