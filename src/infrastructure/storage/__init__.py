"""Storage infrastructure implementations."""

from src.infrastructure.storage.sqlite import (
    SQLiteAssignmentStore,
    SQLiteMaterialStore,
    SQLiteStockStore,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)

__all__ = [
    # SQLite stores
    "SQLiteAssignmentStore",
    "SQLiteMaterialStore",
    "SQLiteStockStore",
    # Connection pool
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
]
