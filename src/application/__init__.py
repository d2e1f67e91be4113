"""
Application layer - Use cases, DTOs, and service factories.

This layer orchestrates business logic by:
1. Defining request/response DTOs for API contracts
2. Implementing catalog use cases that coordinate core services
3. Providing factory functions for dependency injection
"""

from src.application.services import (
    get_dispatch_intake,
    get_inventory_summary,
    get_reservation_service,
    get_stock_ledger,
    reset_services,
)
from src.application.use_cases import (
    InitializeStockUseCase,
    RegisterMaterialUseCase,
    RemoveMaterialUseCase,
    UpdateMaterialUseCase,
)

__all__ = [
    # Use Cases
    "InitializeStockUseCase",
    "RegisterMaterialUseCase",
    "RemoveMaterialUseCase",
    "UpdateMaterialUseCase",
    # Service factories
    "get_stock_ledger",
    "get_reservation_service",
    "get_dispatch_intake",
    "get_inventory_summary",
    "reset_services",
]
