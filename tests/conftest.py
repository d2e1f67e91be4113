"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator, Awaitable, Callable
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from src.application.services import reset_services
from src.core.entities.material import Material, MaterialType
from src.core.services import ReservationService, RowLockRegistry, StockLedger
from src.infrastructure.storage.sqlite import (
    SQLiteAssignmentStore,
    SQLiteMaterialStore,
    SQLiteStockStore,
)
from src.infrastructure.storage.sqlite.connection import ConnectionPool, close_pool
from src.infrastructure.storage.sqlite.migrations import initialize_database

MaterialFactory = Callable[..., Awaitable[str]]


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """Temporary database path."""
    return tmp_path / "ledger_test.db"


@pytest.fixture
async def ledger_db(db_path: Path) -> AsyncGenerator[Path, None]:
    """
    Migrated temporary database wired in as the global connection pool.

    Stores and service factories resolve connections through the global
    pool, so everything in the test talks to this file.
    """
    import src.infrastructure.storage.sqlite.connection as conn_module

    await initialize_database(db_path, create_backup_before=False)
    conn_module._pool = ConnectionPool(db_path, pool_size=2, busy_timeout=5000)
    reset_services()
    try:
        yield db_path
    finally:
        await close_pool()
        reset_services()


@pytest.fixture
def material_store(ledger_db: Path) -> SQLiteMaterialStore:
    return SQLiteMaterialStore()


@pytest.fixture
def stock_store(ledger_db: Path) -> SQLiteStockStore:
    return SQLiteStockStore()


@pytest.fixture
def assignment_store(ledger_db: Path) -> SQLiteAssignmentStore:
    return SQLiteAssignmentStore()


@pytest.fixture
def ledger(stock_store: SQLiteStockStore, material_store: SQLiteMaterialStore) -> StockLedger:
    return StockLedger(
        stock_store=stock_store,
        material_store=material_store,
        locks=RowLockRegistry(),
        created_by="tester",
        default_minimum_stock=10.0,
        default_maximum_stock=1000.0,
        default_location="Warehouse A",
        default_supplier="Default Supplier",
    )


@pytest.fixture
def reservations(
    ledger: StockLedger, assignment_store: SQLiteAssignmentStore
) -> ReservationService:
    return ReservationService(ledger=ledger, assignment_store=assignment_store)


@pytest.fixture
def make_material(
    material_store: SQLiteMaterialStore, ledger: StockLedger
) -> MaterialFactory:
    """
    Create a catalog material with a stock row and optional opening stock.

    Returns the material ID.
    """

    async def _make(
        name: str = "Steel Beam IPE200",
        cost_per_unit: float = 10.0,
        initial_stock: float = 0.0,
        minimum_stock: float | None = None,
        maximum_stock: float | None = None,
        material_type: MaterialType = MaterialType.STEEL,
        with_stock: bool = True,
    ) -> str:
        material = await material_store.create_material(
            Material(name=name, type=material_type, cost_per_unit=cost_per_unit)
        )
        if with_stock:
            await ledger.create_stock(
                material.id,  # type: ignore[arg-type]
                minimum_stock=minimum_stock,
                maximum_stock=maximum_stock,
            )
            if initial_stock > 0:
                await ledger.receive(material.id, initial_stock)  # type: ignore[arg-type]
        return material.id  # type: ignore[return-value]

    return _make


@pytest.fixture
async def api_client(ledger_db: Path) -> AsyncGenerator[AsyncClient, None]:
    """Async client against the app, backed by the temporary database."""
    from src.api.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
