"""
Domain exceptions for the stock ledger.

Every failure carries the quantities involved so callers can show the
actionable reason ("only 12 available, 20 requested") instead of a generic
error.
"""

from typing import Any


class LedgerError(Exception):
    """Base exception for all ledger errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


def _fmt(quantity: float) -> str:
    """Render a quantity without a trailing .0 for whole numbers."""
    return f"{quantity:g}"


# Stock Exceptions
class StockError(LedgerError):
    """Base exception for stock quantity violations."""

    pass


class InvalidQuantityError(StockError):
    """Quantity is zero, negative or otherwise unusable."""

    def __init__(self, quantity: float, operation: str, constraint: str = "greater than 0"):
        super().__init__(
            f"Invalid quantity for {operation}: {_fmt(quantity)} (must be {constraint})",
            code="INVALID_QUANTITY",
            details={"quantity": quantity, "operation": operation},
        )


class InsufficientStockError(StockError):
    """Operation would drive available stock below zero."""

    def __init__(self, material_id: str, requested: float, available: float):
        super().__init__(
            f"Insufficient stock for material {material_id}: "
            f"only {_fmt(available)} available, {_fmt(requested)} requested",
            code="INSUFFICIENT_STOCK",
            details={
                "material_id": material_id,
                "requested": requested,
                "available": available,
            },
        )


class InsufficientReservationError(StockError):
    """Consuming more than is reserved."""

    def __init__(self, material_id: str, requested: float, reserved: float):
        super().__init__(
            f"Insufficient reservation for material {material_id}: "
            f"only {_fmt(reserved)} reserved, {_fmt(requested)} requested",
            code="INSUFFICIENT_RESERVATION",
            details={
                "material_id": material_id,
                "requested": requested,
                "reserved": reserved,
            },
        )


class OverReleaseError(StockError):
    """Releasing more than is reserved."""

    def __init__(self, material_id: str, requested: float, reserved: float):
        super().__init__(
            f"Cannot release {_fmt(requested)} of material {material_id}: "
            f"only {_fmt(reserved)} reserved",
            code="OVER_RELEASE",
            details={
                "material_id": material_id,
                "requested": requested,
                "reserved": reserved,
            },
        )


class HasActiveReservationsError(StockError):
    """Stock row still holds reserved quantity and cannot be deleted."""

    def __init__(self, stock_id: int, reserved: float):
        super().__init__(
            f"Cannot delete stock {stock_id}: {_fmt(reserved)} units reserved for projects",
            code="HAS_ACTIVE_RESERVATIONS",
            details={"stock_id": stock_id, "reserved": reserved},
        )


class DuplicateStockError(StockError):
    """A stock row already exists for the material."""

    def __init__(self, material_id: str, stock_id: int | None):
        super().__init__(
            f"Stock already exists for material {material_id}",
            code="DUPLICATE_STOCK",
            details={"material_id": material_id, "stock_id": stock_id},
        )


# Assignment Exceptions
class InvalidStateError(LedgerError):
    """Assignment transition not legal from its current status."""

    def __init__(self, assignment_id: int | None, status: str, action: str):
        super().__init__(
            f"Cannot {action} assignment {assignment_id} in status {status}",
            code="INVALID_STATE",
            details={"assignment_id": assignment_id, "status": status, "action": action},
        )


class DuplicateAssignmentError(InvalidStateError):
    """An active assignment already exists for the project/material/purpose."""

    def __init__(self, existing_id: int, project_id: str, material_id: str, purpose: str):
        LedgerError.__init__(
            self,
            f"Project {project_id} already has active assignment {existing_id} "
            f"for material {material_id} ({purpose})",
            code="DUPLICATE_ASSIGNMENT",
            details={
                "assignment_id": existing_id,
                "project_id": project_id,
                "material_id": material_id,
                "purpose": purpose,
            },
        )


# Lookup Exceptions
class NotFoundError(LedgerError):
    """Requested record does not exist."""

    pass


class MaterialNotFoundError(NotFoundError):
    """Catalog material not found."""

    def __init__(self, material_id: str):
        super().__init__(
            f"Material not found: {material_id}",
            code="MATERIAL_NOT_FOUND",
            details={"material_id": material_id},
        )


class StockNotFoundError(NotFoundError):
    """Stock row not found, by stock id or by material id."""

    def __init__(self, stock_id: int | None = None, material_id: str | None = None):
        target = f"material {material_id}" if material_id else f"id {stock_id}"
        super().__init__(
            f"Stock not found for {target}",
            code="STOCK_NOT_FOUND",
            details={"stock_id": stock_id, "material_id": material_id},
        )


class AssignmentNotFoundError(NotFoundError):
    """Project material assignment not found."""

    def __init__(self, assignment_id: int):
        super().__init__(
            f"Assignment not found: {assignment_id}",
            code="ASSIGNMENT_NOT_FOUND",
            details={"assignment_id": assignment_id},
        )


# Catalog Exceptions
class CatalogError(LedgerError):
    """Base exception for catalog operations."""

    pass


class CatalogInUseError(CatalogError):
    """Catalog entry still referenced and cannot be deleted."""

    def __init__(self, material_id: str, reason: str):
        super().__init__(
            f"Material {material_id} is still in use: {reason}",
            code="CATALOG_IN_USE",
            details={"material_id": material_id, "reason": reason},
        )


# Storage Exceptions
class StorageError(LedgerError):
    """Base exception for storage operations."""

    pass


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


class ConfigurationError(LedgerError):
    """Configuration error."""

    pass
