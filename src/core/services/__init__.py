"""
Core business logic services.

Layer-pure services that depend only on:
- src/core/entities/*
- src/core/interfaces/*
- src/core/exceptions.py

NO infrastructure imports. All dependencies injected via constructor.
"""

from src.core.services.dispatch_intake import (
    DispatchIntake,
    IntakeResult,
    LineOutcome,
    LineResult,
)
from src.core.services.inventory_summary import (
    HistoryEntry,
    InventorySummary,
    StockOverviewRow,
    StockTotals,
    stock_status,
    valuation,
)
from src.core.services.material_resolver import (
    Ambiguous,
    Matched,
    MaterialResolver,
    MatchVia,
    NotFound,
    Resolution,
)
from src.core.services.reservation_service import InstallOutcome, ReservationService
from src.core.services.row_locks import RowLockRegistry
from src.core.services.stock_ledger import LedgerResult, StockLedger

__all__ = [
    # Ledger
    "StockLedger",
    "LedgerResult",
    "RowLockRegistry",
    # Reservations
    "ReservationService",
    "InstallOutcome",
    # Dispatch
    "DispatchIntake",
    "IntakeResult",
    "LineOutcome",
    "LineResult",
    "MaterialResolver",
    "Matched",
    "Ambiguous",
    "NotFound",
    "MatchVia",
    "Resolution",
    # Summary
    "InventorySummary",
    "HistoryEntry",
    "StockOverviewRow",
    "StockTotals",
    "stock_status",
    "valuation",
]
