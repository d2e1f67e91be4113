"""
Read-only inventory projections.

Status classification, valuation, per-material history and the stock
overview/totals shown on the stock screen. Nothing here writes.
"""

from dataclasses import dataclass
from datetime import datetime

from src.config import get_logger
from src.core.entities.assignment import ProjectMaterialAssignment
from src.core.entities.material import Material
from src.core.entities.stock import MaterialStock, StockStatus, StockTransaction
from src.core.interfaces.assignment_store import IAssignmentStore
from src.core.interfaces.material_store import IMaterialStore
from src.core.interfaces.stock_store import IStockStore

logger = get_logger(__name__)

# Upper bound for the in-memory overview join.
MAX_OVERVIEW_ROWS = 10_000


def stock_status(stock: MaterialStock) -> StockStatus:
    """low if available <= minimum, high if available >= maximum, else normal."""
    return stock.status


def valuation(stock: MaterialStock) -> float:
    return stock.total_value


@dataclass
class HistoryEntry:
    """One row of a material's merged transaction/assignment timeline."""

    timestamp: datetime
    kind: str  # "transaction" or "assignment"
    action: str  # transaction type or assignment status
    quantity: float
    reference_type: str | None = None
    reference_id: str | None = None
    transaction_id: int | None = None
    assignment_id: int | None = None
    notes: str | None = None

    @classmethod
    def from_transaction(cls, txn: StockTransaction) -> "HistoryEntry":
        return cls(
            timestamp=txn.transaction_date,
            kind="transaction",
            action=txn.type.value,
            quantity=txn.quantity,
            reference_type=txn.reference_type.value,
            reference_id=txn.reference_id,
            transaction_id=txn.id,
            notes=txn.notes,
        )

    @classmethod
    def from_assignment(cls, assignment: ProjectMaterialAssignment) -> "HistoryEntry":
        return cls(
            timestamp=assignment.created_at,
            kind="assignment",
            action=assignment.status.value,
            quantity=assignment.quantity,
            reference_type="PROJECT",
            reference_id=assignment.project_id,
            assignment_id=assignment.id,
            notes=assignment.notes,
        )


@dataclass
class StockOverviewRow:
    stock: MaterialStock
    material: Material | None
    status: StockStatus


@dataclass
class StockTotals:
    item_count: int
    total_value: float
    total_reserved: float
    total_available: float
    low_count: int
    high_count: int


class InventorySummary:
    """Projections over stock rows, catalog entries and assignments."""

    def __init__(
        self,
        stock_store: IStockStore,
        material_store: IMaterialStore,
        assignment_store: IAssignmentStore,
    ) -> None:
        self._stock_store = stock_store
        self._material_store = material_store
        self._assignment_store = assignment_store

    async def material_history(self, material_id: str) -> list[HistoryEntry]:
        """
        Chronological merge of a material's transactions and assignments.

        Transactions of deleted stock rows are included; they are keyed by
        material ID.
        """
        transactions = await self._stock_store.get_material_transactions(material_id)
        assignments = await self._assignment_store.list_by_material(material_id)

        entries = [HistoryEntry.from_transaction(t) for t in transactions]
        entries.extend(HistoryEntry.from_assignment(a) for a in assignments)
        entries.sort(key=lambda e: (e.timestamp, e.kind != "assignment"))
        return entries

    async def overview(
        self,
        search: str | None = None,
        material_type: str | None = None,
        category: str | None = None,
        status: StockStatus | None = None,
    ) -> list[StockOverviewRow]:
        """Stock rows joined with their catalog entry, filtered."""
        stocks = await self._stock_store.list_stock(limit=MAX_OVERVIEW_ROWS)
        filtered_catalog = search or material_type or category
        materials = await self._material_store.list_materials(
            limit=MAX_OVERVIEW_ROWS,
            material_type=material_type,
            category=category,
            search=search,
        )
        by_id = {m.id: m for m in materials}

        rows = []
        for stock in stocks:
            material = by_id.get(stock.material_id)
            if filtered_catalog and material is None:
                continue
            row_status = stock_status(stock)
            if status is not None and row_status != status:
                continue
            rows.append(StockOverviewRow(stock=stock, material=material, status=row_status))
        return rows

    async def low_stock(self) -> list[StockOverviewRow]:
        stocks = await self._stock_store.list_low_stock(limit=MAX_OVERVIEW_ROWS)
        rows = []
        for stock in stocks:
            material = await self._material_store.get_material(stock.material_id)
            rows.append(StockOverviewRow(stock=stock, material=material, status=StockStatus.LOW))
        return rows

    async def totals(self) -> StockTotals:
        stocks = await self._stock_store.list_stock(limit=MAX_OVERVIEW_ROWS)
        statuses = [stock_status(s) for s in stocks]
        totals = StockTotals(
            item_count=len(stocks),
            total_value=sum(valuation(s) for s in stocks),
            total_reserved=sum(s.reserved_stock for s in stocks),
            total_available=sum(s.available_stock for s in stocks),
            low_count=statuses.count(StockStatus.LOW),
            high_count=statuses.count(StockStatus.HIGH),
        )
        logger.debug("inventory_totals_computed", item_count=totals.item_count)
        return totals
