"""
Dependency injection container for FastAPI.

Provides service instances to route handlers.
"""

from functools import lru_cache

from src.application.services import (
    get_dispatch_intake,
    get_inventory_summary,
    get_reservation_service,
    get_stock_ledger,
)
from src.application.use_cases import (
    InitializeStockUseCase,
    RegisterMaterialUseCase,
    RemoveMaterialUseCase,
    UpdateMaterialUseCase,
)
from src.config import Settings, get_settings
from src.core.services import (
    DispatchIntake,
    InventorySummary,
    ReservationService,
    StockLedger,
)
from src.infrastructure.storage.sqlite import (
    ConnectionPool,
    SQLiteMaterialStore,
    get_material_store,
    get_pool,
)


@lru_cache
def get_app_settings() -> Settings:
    """Get cached application settings."""
    return get_settings()


# Service dependencies
async def get_ledger() -> StockLedger:
    """Get stock ledger."""
    return await get_stock_ledger()


async def get_reservations() -> ReservationService:
    """Get reservation service."""
    return await get_reservation_service()


async def get_intake() -> DispatchIntake:
    """Get dispatch intake service."""
    return await get_dispatch_intake()


async def get_summary() -> InventorySummary:
    """Get inventory summary service."""
    return await get_inventory_summary()


# Use case dependencies
def get_register_material_use_case() -> RegisterMaterialUseCase:
    """Get register material use case."""
    return RegisterMaterialUseCase()


def get_update_material_use_case() -> UpdateMaterialUseCase:
    """Get update material use case."""
    return UpdateMaterialUseCase()


def get_remove_material_use_case() -> RemoveMaterialUseCase:
    """Get remove material use case."""
    return RemoveMaterialUseCase()


def get_initialize_stock_use_case() -> InitializeStockUseCase:
    """Get initialize stock use case."""
    return InitializeStockUseCase()


# Store dependencies
async def get_mat_store() -> SQLiteMaterialStore:
    """Get material store."""
    return await get_material_store()


async def get_db_pool() -> ConnectionPool:
    """Get the SQLite connection pool."""
    return await get_pool()
