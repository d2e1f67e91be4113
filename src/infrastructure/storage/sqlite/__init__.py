"""SQLite storage implementations."""

from src.infrastructure.storage.sqlite.assignment_store import SQLiteAssignmentStore
from src.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from src.infrastructure.storage.sqlite.material_store import SQLiteMaterialStore
from src.infrastructure.storage.sqlite.stock_store import SQLiteStockStore

# Singleton instances
_material_store: SQLiteMaterialStore | None = None
_stock_store: SQLiteStockStore | None = None
_assignment_store: SQLiteAssignmentStore | None = None


async def get_material_store() -> SQLiteMaterialStore:
    """Get singleton material store instance."""
    global _material_store
    if _material_store is None:
        _material_store = SQLiteMaterialStore()
    return _material_store


async def get_stock_store() -> SQLiteStockStore:
    """Get singleton stock store instance."""
    global _stock_store
    if _stock_store is None:
        _stock_store = SQLiteStockStore()
    return _stock_store


async def get_assignment_store() -> SQLiteAssignmentStore:
    """Get singleton assignment store instance."""
    global _assignment_store
    if _assignment_store is None:
        _assignment_store = SQLiteAssignmentStore()
    return _assignment_store


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    # Store classes
    "SQLiteAssignmentStore",
    "SQLiteMaterialStore",
    "SQLiteStockStore",
    # Factory functions
    "get_assignment_store",
    "get_material_store",
    "get_stock_store",
]
