"""Core domain entities."""

from src.core.entities.assignment import (
    ACTIVE_STATUSES,
    AssignmentStatus,
    ProjectMaterialAssignment,
)
from src.core.entities.dispatch import DeliveryConfirmation, DeliveryLine
from src.core.entities.material import (
    Material,
    MaterialCategory,
    MaterialType,
    normalize_name,
)
from src.core.entities.stock import (
    MaterialStock,
    ReferenceType,
    StockReference,
    StockStatus,
    StockTransaction,
    TransactionType,
)

__all__ = [
    # Catalog
    "Material",
    "MaterialCategory",
    "MaterialType",
    "normalize_name",
    # Stock
    "MaterialStock",
    "StockTransaction",
    "StockReference",
    "StockStatus",
    "TransactionType",
    "ReferenceType",
    # Dispatch
    "DeliveryConfirmation",
    "DeliveryLine",
    # Assignments
    "ProjectMaterialAssignment",
    "AssignmentStatus",
    "ACTIVE_STATUSES",
]
