"""
Service factory functions for dependency injection.

This module wires the SQLite stores and settings into the core services.
Use cases and API dependencies import from here.

All ledger-facing services share one RowLockRegistry through the
StockLedger singleton, so reservation and dispatch writers serialize on the
same per-row locks.
"""

from typing import TYPE_CHECKING

from src.config import get_settings
from src.core.services import (
    DispatchIntake,
    InventorySummary,
    MaterialResolver,
    ReservationService,
    StockLedger,
)

if TYPE_CHECKING:
    from src.core.interfaces import IAssignmentStore, IMaterialStore, IStockStore


# Singleton service instances
_stock_ledger: StockLedger | None = None
_reservation_service: ReservationService | None = None
_dispatch_intake: DispatchIntake | None = None
_inventory_summary: InventorySummary | None = None


async def get_stock_ledger(
    stock_store: "IStockStore | None" = None,
    material_store: "IMaterialStore | None" = None,
) -> StockLedger:
    """
    Get or create the StockLedger.

    Args:
        stock_store: Optional stock store override
        material_store: Optional material store override

    Returns:
        Configured StockLedger (singleton unless overrides are given)
    """
    global _stock_ledger

    overridden = stock_store is not None or material_store is not None
    if _stock_ledger is not None and not overridden:
        return _stock_ledger

    # Lazy import infrastructure to avoid circular imports
    from src.infrastructure.storage.sqlite import get_material_store, get_stock_store

    settings = get_settings()
    ledger = StockLedger(
        stock_store=stock_store or await get_stock_store(),
        material_store=material_store or await get_material_store(),
        created_by=settings.ledger.default_actor,
        default_minimum_stock=settings.ledger.default_minimum_stock,
        default_maximum_stock=settings.ledger.default_maximum_stock,
        default_location=settings.ledger.default_location,
        default_supplier=settings.ledger.default_supplier,
    )

    if not overridden:
        _stock_ledger = ledger

    return ledger


async def get_reservation_service(
    assignment_store: "IAssignmentStore | None" = None,
) -> ReservationService:
    """Get or create the ReservationService on top of the shared ledger."""
    global _reservation_service

    if _reservation_service is not None and assignment_store is None:
        return _reservation_service

    from src.infrastructure.storage.sqlite import get_assignment_store

    service = ReservationService(
        ledger=await get_stock_ledger(),
        assignment_store=assignment_store or await get_assignment_store(),
    )

    if assignment_store is None:
        _reservation_service = service

    return service


async def get_dispatch_intake() -> DispatchIntake:
    """Get or create the DispatchIntake with its material resolver."""
    global _dispatch_intake

    if _dispatch_intake is not None:
        return _dispatch_intake

    from src.infrastructure.storage.sqlite import get_material_store, get_stock_store

    settings = get_settings()
    stock_store = await get_stock_store()
    resolver = MaterialResolver(
        material_store=await get_material_store(),
        stock_store=stock_store,
        name_fallback_enabled=settings.dispatch.name_fallback_enabled,
    )
    _dispatch_intake = DispatchIntake(
        ledger=await get_stock_ledger(),
        resolver=resolver,
        stock_store=stock_store,
        delivered_statuses=settings.dispatch.delivered_statuses,
    )
    return _dispatch_intake


async def get_inventory_summary() -> InventorySummary:
    """Get or create the read-only InventorySummary."""
    global _inventory_summary

    if _inventory_summary is not None:
        return _inventory_summary

    from src.infrastructure.storage.sqlite import (
        get_assignment_store,
        get_material_store,
        get_stock_store,
    )

    _inventory_summary = InventorySummary(
        stock_store=await get_stock_store(),
        material_store=await get_material_store(),
        assignment_store=await get_assignment_store(),
    )
    return _inventory_summary


def reset_services() -> None:
    """
    Reset all singleton service instances.

    Useful for testing or when configuration changes.
    """
    global _stock_ledger
    global _reservation_service
    global _dispatch_intake
    global _inventory_summary

    _stock_ledger = None
    _reservation_service = None
    _dispatch_intake = None
    _inventory_summary = None


__all__ = [
    # Factory functions
    "get_stock_ledger",
    "get_reservation_service",
    "get_dispatch_intake",
    "get_inventory_summary",
    # Reset
    "reset_services",
]
