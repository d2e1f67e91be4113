"""Application use cases."""

from src.application.use_cases.initialize_stock import InitializeStockUseCase
from src.application.use_cases.register_material import (
    RegisterMaterialResult,
    RegisterMaterialUseCase,
)
from src.application.use_cases.remove_material import (
    RemoveMaterialResult,
    RemoveMaterialUseCase,
)
from src.application.use_cases.update_material import UpdateMaterialUseCase

__all__ = [
    "InitializeStockUseCase",
    "RegisterMaterialUseCase",
    "RegisterMaterialResult",
    "RemoveMaterialUseCase",
    "RemoveMaterialResult",
    "UpdateMaterialUseCase",
]
