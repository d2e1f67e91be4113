"""Core interfaces (abstract base classes)."""

from src.core.interfaces.assignment_store import IAssignmentStore
from src.core.interfaces.material_store import IMaterialStore
from src.core.interfaces.stock_store import IStockStore

__all__ = [
    "IAssignmentStore",
    "IMaterialStore",
    "IStockStore",
]
