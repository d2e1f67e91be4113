"""Abstract interface for stock row and ledger transaction storage."""

from abc import ABC, abstractmethod

from src.core.entities.stock import (
    MaterialStock,
    ReferenceType,
    StockTransaction,
    TransactionType,
)


class IStockStore(ABC):
    """Interface for material stock and stock transaction persistence."""

    @abstractmethod
    async def create_stock(self, stock: MaterialStock) -> MaterialStock:
        """Create a stock row (one per material)."""
        pass

    @abstractmethod
    async def get_stock(self, stock_id: int) -> MaterialStock | None:
        """Get stock row by ID."""
        pass

    @abstractmethod
    async def get_stock_by_material(self, material_id: str) -> MaterialStock | None:
        """Get stock row by material ID."""
        pass

    @abstractmethod
    async def list_stock(self, limit: int = 100, offset: int = 0) -> list[MaterialStock]:
        """List stock rows with pagination."""
        pass

    @abstractmethod
    async def list_low_stock(self, limit: int = 100, offset: int = 0) -> list[MaterialStock]:
        """List stock rows whose available stock is at or below their minimum."""
        pass

    @abstractmethod
    async def update_stock(self, stock: MaterialStock) -> MaterialStock:
        """Persist descriptive/threshold fields of a stock row."""
        pass

    @abstractmethod
    async def apply_mutation(
        self,
        stock: MaterialStock,
        transactions: list[StockTransaction],
    ) -> list[StockTransaction]:
        """
        Write the mutated stock row and append its ledger entries.

        Both are committed in one database transaction or not at all.
        """
        pass

    @abstractmethod
    async def delete_stock(self, stock_id: int, purge_transactions: bool = False) -> bool:
        """Delete a stock row, optionally purging its transactions."""
        pass

    @abstractmethod
    async def get_transactions(
        self, stock_id: int, limit: int = 100, offset: int = 0
    ) -> list[StockTransaction]:
        """Get transactions for a stock row, newest first."""
        pass

    @abstractmethod
    async def get_material_transactions(self, material_id: str) -> list[StockTransaction]:
        """All transactions ever booked for a material, oldest first."""
        pass

    @abstractmethod
    async def find_transactions(
        self,
        stock_id: int,
        transaction_type: TransactionType,
        reference_type: ReferenceType,
        reference_id: str,
    ) -> list[StockTransaction]:
        """Transactions of a type booked against a given reference."""
        pass
