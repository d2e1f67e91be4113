"""Stock domain entities: per-material stock rows and their ledger entries."""

import math
from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field

from src.core.exceptions import (
    InsufficientReservationError,
    InsufficientStockError,
    InvalidQuantityError,
    OverReleaseError,
)


class TransactionType(str, Enum):
    """Kinds of stock ledger entries."""

    IN = "IN"
    OUT = "OUT"
    RESERVED = "RESERVED"
    UNRESERVED = "UNRESERVED"
    ADJUSTED = "ADJUSTED"


class ReferenceType(str, Enum):
    """What triggered a ledger entry."""

    PROJECT = "PROJECT"
    DISPATCH = "DISPATCH"
    MANUAL = "MANUAL"


class StockStatus(str, Enum):
    """Availability classification against the row thresholds."""

    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"


class StockReference(BaseModel):
    """Origin of a stock mutation (project, dispatch note or manual entry)."""

    reference_type: ReferenceType = ReferenceType.MANUAL
    reference_id: str | None = None

    @classmethod
    def project(cls, project_id: str) -> "StockReference":
        return cls(reference_type=ReferenceType.PROJECT, reference_id=project_id)

    @classmethod
    def dispatch(cls, dispatch_id: str) -> "StockReference":
        return cls(reference_type=ReferenceType.DISPATCH, reference_id=dispatch_id)

    @classmethod
    def manual(cls, reference_id: str | None = None) -> "StockReference":
        return cls(reference_type=ReferenceType.MANUAL, reference_id=reference_id)


# Decimal places kept for stored quantities; absorbs float drift from repeated +/-.
QUANTITY_PRECISION = 6


def _require_positive(quantity: float, operation: str) -> None:
    # NaN compares false against everything, so check finiteness first.
    if not math.isfinite(quantity) or quantity <= 0:
        raise InvalidQuantityError(quantity, operation)


def _require_cost(unit_cost: float | None, operation: str) -> None:
    if unit_cost is not None and (not math.isfinite(unit_cost) or unit_cost < 0):
        raise InvalidQuantityError(unit_cost, operation, "a finite unit cost of 0 or more")


class MaterialStock(BaseModel):
    """
    Physical stock of one catalog material.

    ``available_stock`` and ``total_value`` are derived from the quantity
    fields and are refreshed by every mutation method. The mutation methods
    validate first and only then touch any field, so a raised error leaves
    the row exactly as it was.
    """

    id: int | None = None
    material_id: str  # FK → materials.id, unique
    current_stock: float = 0.0
    reserved_stock: float = 0.0
    available_stock: float = 0.0
    minimum_stock: float = 10.0
    maximum_stock: float = 1000.0
    unit_cost: float = 0.0
    total_value: float = 0.0
    location: str | None = None
    supplier: str | None = None
    notes: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def recompute(self) -> "MaterialStock":
        """Refresh the derived fields from current/reserved stock and unit cost."""
        self.current_stock = round(self.current_stock, QUANTITY_PRECISION)
        self.reserved_stock = round(self.reserved_stock, QUANTITY_PRECISION)
        self.available_stock = round(self.current_stock - self.reserved_stock, QUANTITY_PRECISION)
        self.total_value = self.current_stock * self.unit_cost
        return self

    def _touch(self) -> "MaterialStock":
        self.updated_at = datetime.now(UTC)
        return self.recompute()

    def receive(self, quantity: float, unit_cost: float | None = None) -> "MaterialStock":
        """Add delivered quantity; unit cost becomes the weighted average."""
        _require_positive(quantity, "receive")
        _require_cost(unit_cost, "receive")
        cost = self.unit_cost if unit_cost is None else unit_cost
        total_qty = self.current_stock + quantity
        self.unit_cost = (self.current_stock * self.unit_cost + quantity * cost) / total_qty
        self.current_stock = total_qty
        return self._touch()

    def reserve(self, quantity: float) -> "MaterialStock":
        _require_positive(quantity, "reserve")
        available = round(self.current_stock - self.reserved_stock, QUANTITY_PRECISION)
        if quantity > available:
            raise InsufficientStockError(self.material_id, quantity, available)
        self.reserved_stock += quantity
        return self._touch()

    def release(self, quantity: float) -> "MaterialStock":
        _require_positive(quantity, "release")
        if quantity > self.reserved_stock:
            raise OverReleaseError(self.material_id, quantity, self.reserved_stock)
        self.reserved_stock -= quantity
        return self._touch()

    def consume(self, quantity: float) -> "MaterialStock":
        """Permanently use reserved quantity: both reserved and current drop."""
        _require_positive(quantity, "consume")
        if quantity > self.reserved_stock:
            raise InsufficientReservationError(self.material_id, quantity, self.reserved_stock)
        self.reserved_stock -= quantity
        self.current_stock -= quantity
        return self._touch()

    def adjust(self, new_current_stock: float, unit_cost: float | None = None) -> float:
        """
        Set current stock to a counted value.

        Returns the signed change of current stock.
        """
        if not math.isfinite(new_current_stock) or new_current_stock < 0:
            raise InvalidQuantityError(new_current_stock, "adjust", "0 or more")
        _require_cost(unit_cost, "adjust")
        if new_current_stock < self.reserved_stock:
            raise InsufficientStockError(
                self.material_id,
                self.reserved_stock,
                new_current_stock,
            )
        delta = new_current_stock - self.current_stock
        self.current_stock = new_current_stock
        if unit_cost is not None:
            self.unit_cost = unit_cost
        self._touch()
        return delta

    @property
    def status(self) -> StockStatus:
        """Low/normal/high classification of available stock."""
        if self.available_stock <= self.minimum_stock:
            return StockStatus.LOW
        if self.available_stock >= self.maximum_stock:
            return StockStatus.HIGH
        return StockStatus.NORMAL


class StockTransaction(BaseModel):
    """Immutable ledger entry for a single stock quantity change."""

    id: int | None = None
    material_stock_id: int  # back-reference, survives row deletion
    material_id: str
    type: TransactionType
    quantity: float  # signed delta for ADJUSTED, positive otherwise
    unit_cost: float = 0.0
    total_cost: float = 0.0
    reference_id: str | None = None
    reference_type: ReferenceType = ReferenceType.MANUAL
    transaction_date: datetime = Field(default_factory=lambda: datetime.now(UTC))
    notes: str | None = None
    created_by: str = "system"
