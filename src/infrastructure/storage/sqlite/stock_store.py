"""SQLite implementation of stock row and stock transaction storage."""

from datetime import UTC, datetime

import aiosqlite

from src.config import get_logger
from src.core.entities.stock import (
    MaterialStock,
    ReferenceType,
    StockTransaction,
    TransactionType,
)
from src.core.exceptions import DatabaseError, DuplicateStockError
from src.core.interfaces.stock_store import IStockStore
from src.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)

_UPDATE_STOCK_SQL = """
    UPDATE material_stock SET
        current_stock = ?, reserved_stock = ?, available_stock = ?,
        minimum_stock = ?, maximum_stock = ?, unit_cost = ?, total_value = ?,
        location = ?, supplier = ?, notes = ?, updated_at = ?
    WHERE id = ?
"""


def _stock_update_params(stock: MaterialStock) -> tuple:
    return (
        stock.current_stock,
        stock.reserved_stock,
        stock.available_stock,
        stock.minimum_stock,
        stock.maximum_stock,
        stock.unit_cost,
        stock.total_value,
        stock.location,
        stock.supplier,
        stock.notes,
        stock.updated_at.isoformat(),
        stock.id,
    )


class SQLiteStockStore(IStockStore):
    """SQLite implementation of material stock and its transaction log."""

    async def create_stock(self, stock: MaterialStock) -> MaterialStock:
        """
        Create the stock row for a material.

        Raises:
            DuplicateStockError: The material already has a stock row
        """
        stock.recompute()
        try:
            async with get_transaction() as conn:
                cursor = await conn.execute(
                    """
                    INSERT INTO material_stock (
                        material_id, current_stock, reserved_stock, available_stock,
                        minimum_stock, maximum_stock, unit_cost, total_value,
                        location, supplier, notes, created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        stock.material_id,
                        stock.current_stock,
                        stock.reserved_stock,
                        stock.available_stock,
                        stock.minimum_stock,
                        stock.maximum_stock,
                        stock.unit_cost,
                        stock.total_value,
                        stock.location,
                        stock.supplier,
                        stock.notes,
                        stock.created_at.isoformat(),
                        stock.updated_at.isoformat(),
                    ),
                )
                stock.id = cursor.lastrowid
        except aiosqlite.IntegrityError as e:
            if "UNIQUE" in str(e):
                existing = await self.get_stock_by_material(stock.material_id)
                raise DuplicateStockError(
                    stock.material_id, existing.id if existing else None
                ) from e
            raise DatabaseError("create_stock", str(e)) from e

        logger.info("stock_row_created", stock_id=stock.id, material_id=stock.material_id)
        return stock

    async def get_stock(self, stock_id: int) -> MaterialStock | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM material_stock WHERE id = ?", (stock_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_stock(row)

    async def get_stock_by_material(self, material_id: str) -> MaterialStock | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM material_stock WHERE material_id = ?",
                (material_id,),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_stock(row)

    async def list_stock(self, limit: int = 100, offset: int = 0) -> list[MaterialStock]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM material_stock
                ORDER BY id
                LIMIT ? OFFSET ?
                """,
                (limit, offset),
            )
            rows = await cursor.fetchall()
            return [self._row_to_stock(row) for row in rows]

    async def list_low_stock(self, limit: int = 100, offset: int = 0) -> list[MaterialStock]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM material_stock
                WHERE available_stock <= minimum_stock
                ORDER BY available_stock - minimum_stock, id
                LIMIT ? OFFSET ?
                """,
                (limit, offset),
            )
            rows = await cursor.fetchall()
            return [self._row_to_stock(row) for row in rows]

    async def update_stock(self, stock: MaterialStock) -> MaterialStock:
        """Write the row without appending to the transaction log."""
        async with get_transaction() as conn:
            await conn.execute(_UPDATE_STOCK_SQL, _stock_update_params(stock))
        logger.info("stock_row_updated", stock_id=stock.id)
        return stock

    async def apply_mutation(
        self,
        stock: MaterialStock,
        transactions: list[StockTransaction],
    ) -> list[StockTransaction]:
        """Update the row and append its transactions in one commit."""
        try:
            async with get_transaction() as conn:
                await conn.execute(_UPDATE_STOCK_SQL, _stock_update_params(stock))
                for txn in transactions:
                    cursor = await conn.execute(
                        """
                        INSERT INTO stock_transactions (
                            material_stock_id, material_id, type, quantity,
                            unit_cost, total_cost, reference_id, reference_type,
                            transaction_date, notes, created_by
                        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                        """,
                        (
                            txn.material_stock_id,
                            txn.material_id,
                            txn.type.value,
                            txn.quantity,
                            txn.unit_cost,
                            txn.total_cost,
                            txn.reference_id,
                            txn.reference_type.value,
                            txn.transaction_date.isoformat(),
                            txn.notes,
                            txn.created_by,
                        ),
                    )
                    txn.id = cursor.lastrowid
        except aiosqlite.Error as e:
            for txn in transactions:
                txn.id = None
            raise DatabaseError("apply_mutation", str(e)) from e

        return transactions

    async def delete_stock(self, stock_id: int, purge_transactions: bool = False) -> bool:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "DELETE FROM material_stock WHERE id = ?", (stock_id,)
            )
            deleted = cursor.rowcount > 0
            purged = 0
            if deleted and purge_transactions:
                cursor = await conn.execute(
                    "DELETE FROM stock_transactions WHERE material_stock_id = ?",
                    (stock_id,),
                )
                purged = cursor.rowcount

        if deleted:
            logger.info("stock_row_deleted", stock_id=stock_id, purged_transactions=purged)
        return deleted

    async def get_transactions(
        self, stock_id: int, limit: int = 100, offset: int = 0
    ) -> list[StockTransaction]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM stock_transactions
                WHERE material_stock_id = ?
                ORDER BY transaction_date DESC, id DESC
                LIMIT ? OFFSET ?
                """,
                (stock_id, limit, offset),
            )
            rows = await cursor.fetchall()
            return [self._row_to_transaction(row) for row in rows]

    async def get_material_transactions(self, material_id: str) -> list[StockTransaction]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM stock_transactions
                WHERE material_id = ?
                ORDER BY transaction_date, id
                """,
                (material_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_transaction(row) for row in rows]

    async def find_transactions(
        self,
        stock_id: int,
        transaction_type: TransactionType,
        reference_type: ReferenceType,
        reference_id: str,
    ) -> list[StockTransaction]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM stock_transactions
                WHERE material_stock_id = ? AND type = ?
                  AND reference_type = ? AND reference_id = ?
                ORDER BY id
                """,
                (stock_id, transaction_type.value, reference_type.value, reference_id),
            )
            rows = await cursor.fetchall()
            return [self._row_to_transaction(row) for row in rows]

    @staticmethod
    def _parse_datetime(value: str | None) -> datetime:
        if value:
            try:
                return datetime.fromisoformat(value)
            except (ValueError, TypeError):
                pass
        return datetime.now(UTC)

    @classmethod
    def _row_to_stock(cls, row: aiosqlite.Row) -> MaterialStock:
        return MaterialStock(
            id=row["id"],
            material_id=row["material_id"],
            current_stock=float(row["current_stock"]),
            reserved_stock=float(row["reserved_stock"]),
            available_stock=float(row["available_stock"]),
            minimum_stock=float(row["minimum_stock"]),
            maximum_stock=float(row["maximum_stock"]),
            unit_cost=float(row["unit_cost"]),
            total_value=float(row["total_value"]),
            location=row["location"],
            supplier=row["supplier"],
            notes=row["notes"],
            created_at=cls._parse_datetime(row["created_at"]),
            updated_at=cls._parse_datetime(row["updated_at"]),
        )

    @classmethod
    def _row_to_transaction(cls, row: aiosqlite.Row) -> StockTransaction:
        return StockTransaction(
            id=row["id"],
            material_stock_id=row["material_stock_id"],
            material_id=row["material_id"],
            type=TransactionType(row["type"]),
            quantity=float(row["quantity"]),
            unit_cost=float(row["unit_cost"]),
            total_cost=float(row["total_cost"]),
            reference_id=row["reference_id"],
            reference_type=ReferenceType(row["reference_type"]),
            transaction_date=cls._parse_datetime(row["transaction_date"]),
            notes=row["notes"],
            created_by=row["created_by"],
        )
