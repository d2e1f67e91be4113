"""Tests for StockLedger against a real SQLite database."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from src.core.entities.stock import (
    MaterialStock,
    ReferenceType,
    StockReference,
    StockTransaction,
    TransactionType,
)
from src.core.exceptions import (
    DatabaseError,
    DuplicateStockError,
    HasActiveReservationsError,
    InsufficientReservationError,
    InsufficientStockError,
    InvalidQuantityError,
    MaterialNotFoundError,
    OverReleaseError,
    StockNotFoundError,
)
from src.core.services import StockLedger


def assert_consistent(stock: MaterialStock) -> None:
    """Derived fields match their sources."""
    assert stock.available_stock == pytest.approx(stock.current_stock - stock.reserved_stock)
    assert stock.total_value == pytest.approx(stock.current_stock * stock.unit_cost)
    assert stock.reserved_stock >= 0
    assert stock.available_stock >= 0


def reserved_from_log(transactions: list[StockTransaction]) -> float:
    signs = {
        TransactionType.RESERVED: 1,
        TransactionType.UNRESERVED: -1,
        TransactionType.OUT: -1,
    }
    return sum(signs.get(t.type, 0) * t.quantity for t in transactions)


def snapshot(stock: MaterialStock) -> tuple:
    return (stock.current_stock, stock.reserved_stock, stock.available_stock, stock.unit_cost)


class TestCreateStock:
    async def test_defaults_from_catalog_and_settings(self, ledger, material_store, make_material):
        material_id = await make_material(cost_per_unit=4.5, with_stock=False)

        stock = await ledger.create_stock(material_id)

        assert stock.id is not None
        assert stock.current_stock == 0
        assert stock.unit_cost == 4.5
        assert stock.minimum_stock == 10.0
        assert stock.maximum_stock == 1000.0
        assert stock.location == "Warehouse A"
        assert stock.supplier == "Default Supplier"

    async def test_unknown_material(self, ledger):
        with pytest.raises(MaterialNotFoundError):
            await ledger.create_stock("no-such-material")

    async def test_duplicate_row(self, ledger, make_material):
        material_id = await make_material()
        with pytest.raises(DuplicateStockError):
            await ledger.create_stock(material_id)

    async def test_maximum_below_minimum_rejected(self, ledger, make_material):
        material_id = await make_material(with_stock=False)
        with pytest.raises(InvalidQuantityError):
            await ledger.create_stock(material_id, minimum_stock=50, maximum_stock=20)


class TestScenarios:
    """Worked example: receive, reserve, consume, adjust."""

    async def test_receive_into_empty_row(self, ledger, make_material):
        material_id = await make_material()

        result = await ledger.receive(material_id, 50, unit_cost=2.0)

        assert result.stock.current_stock == 50
        assert result.stock.available_stock == 50
        assert result.stock.total_value == pytest.approx(100.0)
        assert result.transaction.type == TransactionType.IN
        assert result.transaction.id is not None
        assert len(await ledger.transactions(material_id)) == 1

    async def test_reserve_then_over_reserve(self, ledger, make_material):
        material_id = await make_material()
        await ledger.receive(material_id, 50, unit_cost=2.0)

        result = await ledger.reserve(material_id, 20, reference=StockReference.project("A"))
        assert result.stock.reserved_stock == 20
        assert result.stock.available_stock == 30

        with pytest.raises(InsufficientStockError) as exc_info:
            await ledger.reserve(material_id, 40, reference=StockReference.project("B"))
        assert "only 30 available, 40 requested" in exc_info.value.message

        stock = await ledger.get_stock(material_id)
        assert stock.reserved_stock == 20
        assert stock.available_stock == 30
        assert len(await ledger.transactions(material_id)) == 2

    async def test_consume_reserved(self, ledger, make_material):
        material_id = await make_material()
        await ledger.receive(material_id, 50, unit_cost=2.0)
        await ledger.reserve(material_id, 20, reference=StockReference.project("A"))

        result = await ledger.consume(material_id, 20, reference=StockReference.project("A"))

        assert result.stock.current_stock == 30
        assert result.stock.reserved_stock == 0
        assert result.stock.available_stock == 30
        assert result.stock.total_value == pytest.approx(60.0)
        assert result.transaction.type == TransactionType.OUT

    async def test_adjust_records_signed_delta(self, ledger, make_material):
        material_id = await make_material()
        await ledger.receive(material_id, 30, unit_cost=2.0)

        result = await ledger.adjust_stock(material_id, 25, notes="cycle count")

        assert result.stock.current_stock == 25
        assert result.stock.available_stock == 25
        assert result.transaction.type == TransactionType.ADJUSTED
        assert result.transaction.quantity == -5


class TestReceive:
    async def test_weighted_average_cost(self, ledger, make_material):
        material_id = await make_material(cost_per_unit=0.0)
        await ledger.receive(material_id, 100, unit_cost=10.0)

        result = await ledger.receive(material_id, 100, unit_cost=20.0)

        assert result.stock.unit_cost == pytest.approx(15.0)
        assert result.transaction.unit_cost == 20.0
        assert result.transaction.total_cost == pytest.approx(2000.0)

    async def test_receive_without_cost_uses_current_cost(self, ledger, make_material):
        material_id = await make_material(cost_per_unit=7.0)

        result = await ledger.receive(material_id, 10)

        assert result.stock.unit_cost == pytest.approx(7.0)
        assert result.transaction.unit_cost == 7.0

    async def test_reference_recorded(self, ledger, make_material):
        material_id = await make_material()

        result = await ledger.receive(material_id, 5, reference=StockReference.dispatch("D-1"))

        stored = (await ledger.transactions(material_id))[0]
        assert stored.id == result.transaction.id
        assert stored.reference_type == ReferenceType.DISPATCH
        assert stored.reference_id == "D-1"
        assert stored.created_by == "tester"

    async def test_not_idempotent(self, ledger, make_material):
        material_id = await make_material()
        ref = StockReference.dispatch("D-1")
        await ledger.receive(material_id, 5, reference=ref)
        result = await ledger.receive(material_id, 5, reference=ref)
        assert result.stock.current_stock == 10

    @pytest.mark.parametrize("quantity", [0, -1])
    async def test_invalid_quantity(self, ledger, make_material, quantity):
        material_id = await make_material()
        with pytest.raises(InvalidQuantityError):
            await ledger.receive(material_id, quantity)
        assert await ledger.transactions(material_id) == []

    async def test_missing_stock_row(self, ledger):
        with pytest.raises(StockNotFoundError):
            await ledger.receive("no-such-material", 5)


class TestRejectionsLeaveStateUnchanged:
    async def test_release_more_than_reserved(self, ledger, make_material):
        material_id = await make_material(initial_stock=100)
        await ledger.reserve(material_id, 20)
        before = snapshot(await ledger.get_stock(material_id))

        with pytest.raises(OverReleaseError):
            await ledger.release(material_id, 25)

        assert snapshot(await ledger.get_stock(material_id)) == before
        assert len(await ledger.transactions(material_id)) == 2

    async def test_consume_more_than_reserved(self, ledger, make_material):
        material_id = await make_material(initial_stock=100)
        before = snapshot(await ledger.get_stock(material_id))

        with pytest.raises(InsufficientReservationError):
            await ledger.consume(material_id, 1)

        assert snapshot(await ledger.get_stock(material_id)) == before

    async def test_adjust_below_reserved(self, ledger, make_material):
        material_id = await make_material(initial_stock=100)
        await ledger.reserve(material_id, 40)

        with pytest.raises(InsufficientStockError):
            await ledger.adjust_stock(material_id, 30)

        stock = await ledger.get_stock(material_id)
        assert stock.current_stock == 100
        assert stock.reserved_stock == 40

    @pytest.mark.parametrize(
        ("operation", "args", "kwargs"),
        [
            ("reserve", (float("nan"),), {}),
            ("release", (float("inf"),), {}),
            ("consume", (float("nan"),), {}),
            ("receive", (float("inf"),), {"unit_cost": 2.0}),
            ("receive", (5,), {"unit_cost": float("nan")}),
            ("adjust_stock", (float("nan"),), {}),
        ],
    )
    async def test_non_finite_values_rejected(self, ledger, make_material, operation, args, kwargs):
        material_id = await make_material(initial_stock=100)
        await ledger.reserve(material_id, 10)
        before = snapshot(await ledger.get_stock(material_id))

        with pytest.raises(InvalidQuantityError):
            await getattr(ledger, operation)(material_id, *args, **kwargs)

        assert snapshot(await ledger.get_stock(material_id)) == before
        assert len(await ledger.transactions(material_id)) == 2

    async def test_store_failure_propagates_without_change(self, stock_store, material_store, make_material):
        material_id = await make_material(initial_stock=10)
        failing_store = AsyncMock(wraps=stock_store)
        failing_store.apply_mutation.side_effect = DatabaseError("apply_mutation", "disk full")
        ledger = StockLedger(failing_store, material_store)

        with pytest.raises(DatabaseError):
            await ledger.reserve(material_id, 5)

        stock = await stock_store.get_stock_by_material(material_id)
        assert stock.reserved_stock == 0


class TestAdjust:
    async def test_noop_adjust_appends_nothing(self, ledger, make_material):
        material_id = await make_material(initial_stock=10)

        result = await ledger.adjust_stock(material_id, 10)

        assert result.transaction is None
        assert len(await ledger.transactions(material_id)) == 1

    async def test_cost_only_adjust_is_recorded(self, ledger, make_material):
        material_id = await make_material(cost_per_unit=10.0, initial_stock=10)

        result = await ledger.adjust_stock(material_id, 10, unit_cost=12.0)

        assert result.transaction is not None
        assert result.transaction.quantity == 0
        assert result.stock.total_value == pytest.approx(120.0)


class TestLedgerProperties:
    async def test_invariants_hold_after_every_step(self, ledger, make_material):
        material_id = await make_material(cost_per_unit=3.0)
        steps = [
            lambda: ledger.receive(material_id, 120, unit_cost=3.5),
            lambda: ledger.reserve(material_id, 45.5),
            lambda: ledger.release(material_id, 10.25),
            lambda: ledger.consume(material_id, 20),
            lambda: ledger.receive(material_id, 0.3, unit_cost=4.0),
            lambda: ledger.adjust_stock(material_id, 90),
            lambda: ledger.reserve(material_id, 0.1),
            lambda: ledger.consume(material_id, 15.35),
        ]
        for step in steps:
            result = await step()
            assert_consistent(result.stock)
            assert_consistent(await ledger.get_stock(material_id))

        transactions = await ledger.transactions(material_id)
        assert len(transactions) == len(steps)
        stock = await ledger.get_stock(material_id)
        assert reserved_from_log(transactions) == pytest.approx(stock.reserved_stock)

    async def test_reserve_then_release_is_conservative(self, ledger, make_material):
        material_id = await make_material(initial_stock=80)
        before = snapshot(await ledger.get_stock(material_id))

        await ledger.reserve(material_id, 33)
        await ledger.release(material_id, 33)

        assert snapshot(await ledger.get_stock(material_id)) == before
        types = [t.type for t in await ledger.transactions(material_id)]
        assert types[:2] == [TransactionType.UNRESERVED, TransactionType.RESERVED]

    async def test_concurrent_reserves_never_oversell(self, ledger, make_material):
        material_id = await make_material(initial_stock=100)

        results = await asyncio.gather(
            *(ledger.reserve(material_id, 15) for _ in range(10)),
            return_exceptions=True,
        )

        succeeded = [r for r in results if not isinstance(r, Exception)]
        failed = [r for r in results if isinstance(r, InsufficientStockError)]
        assert len(succeeded) == 6
        assert len(failed) == 4

        stock = await ledger.get_stock(material_id)
        assert stock.reserved_stock == 90
        assert stock.available_stock == 10
        transactions = await ledger.transactions(material_id)
        assert reserved_from_log(transactions) == 90

    async def test_concurrent_mixed_writers_stay_consistent(self, ledger, make_material):
        material_id = await make_material(initial_stock=50)

        await asyncio.gather(
            *(ledger.receive(material_id, 1) for _ in range(10)),
            *(ledger.reserve(material_id, 2) for _ in range(10)),
        )

        stock = await ledger.get_stock(material_id)
        assert stock.current_stock == 60
        assert stock.reserved_stock == 20
        assert_consistent(stock)
        assert len(await ledger.transactions(material_id, limit=100)) == 21


class TestDelete:
    async def test_delete_blocked_while_reserved(self, ledger, make_material):
        material_id = await make_material(initial_stock=10)
        await ledger.reserve(material_id, 1)
        stock = await ledger.get_stock(material_id)

        with pytest.raises(HasActiveReservationsError):
            await ledger.delete(stock.id)

        assert await ledger.get_stock(material_id) is not None

    async def test_delete_keeps_history(self, ledger, stock_store, make_material):
        material_id = await make_material(initial_stock=10)
        stock = await ledger.get_stock(material_id)

        await ledger.delete(stock.id)

        with pytest.raises(StockNotFoundError):
            await ledger.get_stock(material_id)
        history = await stock_store.get_material_transactions(material_id)
        assert len(history) == 1

    async def test_delete_with_purge(self, ledger, stock_store, make_material):
        material_id = await make_material(initial_stock=10)
        stock = await ledger.get_stock(material_id)

        await ledger.delete(stock.id, purge_transactions=True)

        assert await stock_store.get_material_transactions(material_id) == []

    async def test_delete_unknown_row(self, ledger):
        with pytest.raises(StockNotFoundError):
            await ledger.delete(9999)


class TestUpdateSettings:
    async def test_update_thresholds_without_transaction(self, ledger, make_material):
        material_id = await make_material(initial_stock=10)

        stock = await ledger.update_settings(
            material_id, minimum_stock=5, maximum_stock=50, location="Bay 2"
        )

        assert stock.minimum_stock == 5
        assert stock.maximum_stock == 50
        assert stock.location == "Bay 2"
        assert stock.current_stock == 10
        assert len(await ledger.transactions(material_id)) == 1

    async def test_invalid_thresholds(self, ledger, make_material):
        material_id = await make_material()
        with pytest.raises(InvalidQuantityError):
            await ledger.update_settings(material_id, minimum_stock=-1)
