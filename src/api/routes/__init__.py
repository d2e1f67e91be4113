"""API route modules."""

from src.api.routes.assignments import router as assignments_router
from src.api.routes.catalog import router as catalog_router
from src.api.routes.dispatch import router as dispatch_router
from src.api.routes.health import router as health_router
from src.api.routes.stock import router as stock_router

__all__ = [
    "health_router",
    "catalog_router",
    "stock_router",
    "assignments_router",
    "dispatch_router",
]
