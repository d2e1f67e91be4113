"""
Stock ledger service.

The only writer of MaterialStock rows and StockTransaction entries. Every
mutating call follows the same path:

1. Take the row lock for the material.
2. Re-read the stock row.
3. Validate and mutate a copy (domain errors raised here change nothing).
4. Commit the row and its transaction in one database transaction.

Pure service -- stores are injected via constructor.
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from src.config import get_logger
from src.core.entities.stock import (
    MaterialStock,
    StockReference,
    StockTransaction,
    TransactionType,
)
from src.core.exceptions import (
    DuplicateStockError,
    HasActiveReservationsError,
    InvalidQuantityError,
    LedgerError,
    MaterialNotFoundError,
    StockNotFoundError,
)
from src.core.interfaces.material_store import IMaterialStore
from src.core.interfaces.stock_store import IStockStore
from src.core.services.row_locks import RowLockRegistry, material_key

logger = get_logger(__name__)


@dataclass
class LedgerResult:
    """Stock row after a ledger call and the entry it appended (if any)."""

    stock: MaterialStock
    transaction: StockTransaction | None = None


class StockLedger:
    """Atomic stock mutations with an append-only transaction log."""

    def __init__(
        self,
        stock_store: IStockStore,
        material_store: IMaterialStore,
        locks: RowLockRegistry | None = None,
        created_by: str = "system",
        default_minimum_stock: float = 10.0,
        default_maximum_stock: float = 1000.0,
        default_location: str | None = None,
        default_supplier: str | None = None,
    ) -> None:
        self._stock_store = stock_store
        self._material_store = material_store
        self._locks = locks or RowLockRegistry()
        self._created_by = created_by
        self._default_minimum = default_minimum_stock
        self._default_maximum = default_maximum_stock
        self._default_location = default_location
        self._default_supplier = default_supplier

    @property
    def locks(self) -> RowLockRegistry:
        return self._locks

    # -- reads ---------------------------------------------------------

    async def get_stock(self, material_id: str) -> MaterialStock:
        """
        Stock row for a material.

        Raises:
            StockNotFoundError: The material has no stock row
        """
        stock = await self._stock_store.get_stock_by_material(material_id)
        if stock is None:
            raise StockNotFoundError(material_id=material_id)
        return stock

    async def get_stock_by_id(self, stock_id: int) -> MaterialStock:
        stock = await self._stock_store.get_stock(stock_id)
        if stock is None:
            raise StockNotFoundError(stock_id=stock_id)
        return stock

    async def list_stock(self, limit: int = 100, offset: int = 0) -> list[MaterialStock]:
        return await self._stock_store.list_stock(limit=limit, offset=offset)

    async def transactions(
        self, material_id: str, limit: int = 100, offset: int = 0
    ) -> list[StockTransaction]:
        """Transactions of the material's current stock row, newest first."""
        stock = await self.get_stock(material_id)
        return await self._stock_store.get_transactions(stock.id, limit=limit, offset=offset)

    # -- row lifecycle -------------------------------------------------

    async def create_stock(
        self,
        material_id: str,
        minimum_stock: float | None = None,
        maximum_stock: float | None = None,
        unit_cost: float | None = None,
        location: str | None = None,
        supplier: str | None = None,
        notes: str | None = None,
    ) -> MaterialStock:
        """
        Create the zero-quantity stock row for a catalog material.

        Unset fields fall back to the catalog entry, then to the configured
        defaults.

        Raises:
            MaterialNotFoundError: No catalog entry with that ID
            DuplicateStockError: The material already has a stock row
        """
        material = await self._material_store.get_material(material_id)
        if material is None:
            raise MaterialNotFoundError(material_id)

        minimum = self._default_minimum if minimum_stock is None else minimum_stock
        maximum = self._default_maximum if maximum_stock is None else maximum_stock
        self._validate_thresholds(minimum, maximum)

        async with self._locks.hold(material_key(material_id)):
            existing = await self._stock_store.get_stock_by_material(material_id)
            if existing is not None:
                raise DuplicateStockError(material_id, existing.id)

            stock = MaterialStock(
                material_id=material_id,
                minimum_stock=minimum,
                maximum_stock=maximum,
                unit_cost=material.cost_per_unit if unit_cost is None else unit_cost,
                location=location or material.location or self._default_location,
                supplier=supplier or material.supplier or self._default_supplier,
                notes=notes,
            ).recompute()
            stock = await self._stock_store.create_stock(stock)

        logger.info("stock_created", material_id=material_id, stock_id=stock.id)
        return stock

    async def update_settings(
        self,
        material_id: str,
        minimum_stock: float | None = None,
        maximum_stock: float | None = None,
        location: str | None = None,
        supplier: str | None = None,
        notes: str | None = None,
    ) -> MaterialStock:
        """Edit thresholds and descriptive fields. No quantity change, no transaction."""
        async with self._locks.hold(material_key(material_id)):
            stock = await self.get_stock(material_id)
            minimum = stock.minimum_stock if minimum_stock is None else minimum_stock
            maximum = stock.maximum_stock if maximum_stock is None else maximum_stock
            self._validate_thresholds(minimum, maximum)

            updated = stock.model_copy()
            updated.minimum_stock = minimum
            updated.maximum_stock = maximum
            if location is not None:
                updated.location = location
            if supplier is not None:
                updated.supplier = supplier
            if notes is not None:
                updated.notes = notes
            updated.updated_at = datetime.now(UTC)
            updated = await self._stock_store.update_stock(updated)

        logger.info(
            "stock_settings_updated",
            material_id=material_id,
            minimum_stock=minimum,
            maximum_stock=maximum,
        )
        return updated

    async def delete(self, stock_id: int, purge_transactions: bool = False) -> MaterialStock:
        """
        Delete a stock row. Its transactions stay unless purged.

        Raises:
            StockNotFoundError: No such row
            HasActiveReservationsError: The row still holds reserved stock
        """
        stock = await self.get_stock_by_id(stock_id)
        async with self._locks.hold(material_key(stock.material_id)):
            stock = await self.get_stock_by_id(stock_id)
            if stock.reserved_stock > 0:
                logger.warning(
                    "stock_delete_rejected",
                    stock_id=stock_id,
                    reserved=stock.reserved_stock,
                )
                raise HasActiveReservationsError(stock_id, stock.reserved_stock)
            await self._stock_store.delete_stock(stock_id, purge_transactions=purge_transactions)

        logger.info(
            "stock_deleted",
            stock_id=stock_id,
            material_id=stock.material_id,
            purge_transactions=purge_transactions,
        )
        return stock

    # -- quantity mutations --------------------------------------------

    async def receive(
        self,
        material_id: str,
        quantity: float,
        unit_cost: float | None = None,
        reference: StockReference | None = None,
        notes: str | None = None,
    ) -> LedgerResult:
        """
        Book delivered quantity (IN). Unit cost becomes the weighted average.

        Not idempotent: every call is a new receipt.
        """
        reference = reference or StockReference.manual()

        def apply(stock: MaterialStock) -> StockTransaction:
            cost = stock.unit_cost if unit_cost is None else unit_cost
            stock.receive(quantity, cost)
            return self._entry(stock, TransactionType.IN, quantity, reference, notes, cost)

        return await self._mutate(material_id, "receive", apply)

    async def reserve(
        self,
        material_id: str,
        quantity: float,
        reference: StockReference | None = None,
        notes: str | None = None,
    ) -> LedgerResult:
        """
        Set quantity aside for a project (RESERVED).

        Raises:
            InsufficientStockError: quantity exceeds available stock
        """
        reference = reference or StockReference.manual()

        def apply(stock: MaterialStock) -> StockTransaction:
            stock.reserve(quantity)
            return self._entry(stock, TransactionType.RESERVED, quantity, reference, notes)

        return await self._mutate(material_id, "reserve", apply)

    async def release(
        self,
        material_id: str,
        quantity: float,
        reference: StockReference | None = None,
        notes: str | None = None,
    ) -> LedgerResult:
        """
        Return reserved quantity to available stock (UNRESERVED).

        Raises:
            OverReleaseError: quantity exceeds reserved stock
        """
        reference = reference or StockReference.manual()

        def apply(stock: MaterialStock) -> StockTransaction:
            stock.release(quantity)
            return self._entry(stock, TransactionType.UNRESERVED, quantity, reference, notes)

        return await self._mutate(material_id, "release", apply)

    async def consume(
        self,
        material_id: str,
        quantity: float,
        reference: StockReference | None = None,
        notes: str | None = None,
    ) -> LedgerResult:
        """
        Use reserved quantity permanently (OUT).

        Raises:
            InsufficientReservationError: quantity exceeds reserved stock
        """
        reference = reference or StockReference.manual()

        def apply(stock: MaterialStock) -> StockTransaction:
            stock.consume(quantity)
            return self._entry(stock, TransactionType.OUT, quantity, reference, notes)

        return await self._mutate(material_id, "consume", apply)

    async def adjust_stock(
        self,
        material_id: str,
        new_current_stock: float,
        unit_cost: float | None = None,
        notes: str | None = None,
        reference: StockReference | None = None,
    ) -> LedgerResult:
        """
        Manual correction of the counted quantity (ADJUSTED, signed delta).

        A call that changes neither quantity nor unit cost appends nothing.

        Raises:
            InsufficientStockError: new quantity is below reserved stock
        """
        reference = reference or StockReference.manual()

        def apply(stock: MaterialStock) -> StockTransaction | None:
            old_cost = stock.unit_cost
            delta = stock.adjust(new_current_stock, unit_cost)
            if delta == 0 and stock.unit_cost == old_cost:
                return None
            return self._entry(stock, TransactionType.ADJUSTED, delta, reference, notes)

        return await self._mutate(material_id, "adjust", apply)

    # -- internals -----------------------------------------------------

    async def _mutate(
        self,
        material_id: str,
        operation: str,
        apply: Callable[[MaterialStock], StockTransaction | None],
    ) -> LedgerResult:
        async with self._locks.hold(material_key(material_id)):
            stock = await self.get_stock(material_id)
            working = stock.model_copy()
            try:
                transaction = apply(working)
            except LedgerError as e:
                logger.warning(
                    f"{operation}_rejected",
                    material_id=material_id,
                    error_code=e.code,
                    reason=e.message,
                )
                raise

            if transaction is None:
                logger.debug(f"{operation}_noop", material_id=material_id)
                return LedgerResult(stock=stock)

            await self._stock_store.apply_mutation(working, [transaction])

        logger.info(
            f"stock_{operation}",
            material_id=material_id,
            stock_id=working.id,
            quantity=transaction.quantity,
            current_stock=working.current_stock,
            reserved_stock=working.reserved_stock,
            available_stock=working.available_stock,
            reference_type=transaction.reference_type.value,
            reference_id=transaction.reference_id,
        )
        return LedgerResult(stock=working, transaction=transaction)

    def _entry(
        self,
        stock: MaterialStock,
        transaction_type: TransactionType,
        quantity: float,
        reference: StockReference,
        notes: str | None,
        unit_cost: float | None = None,
    ) -> StockTransaction:
        cost = stock.unit_cost if unit_cost is None else unit_cost
        return StockTransaction(
            material_stock_id=stock.id,
            material_id=stock.material_id,
            type=transaction_type,
            quantity=quantity,
            unit_cost=cost,
            total_cost=quantity * cost,
            reference_id=reference.reference_id,
            reference_type=reference.reference_type,
            transaction_date=stock.updated_at,
            notes=notes,
            created_by=self._created_by,
        )

    @staticmethod
    def _validate_thresholds(minimum: float, maximum: float) -> None:
        if minimum < 0:
            raise InvalidQuantityError(minimum, "minimum_stock", "0 or more")
        if maximum < minimum:
            raise InvalidQuantityError(
                maximum, "maximum_stock", f"at least minimum_stock ({minimum:g})"
            )
