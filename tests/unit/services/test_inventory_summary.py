"""Tests for InventorySummary projections."""

import pytest

from src.core.entities.material import MaterialType
from src.core.entities.stock import MaterialStock, StockStatus
from src.core.services import InventorySummary
from src.core.services.inventory_summary import stock_status, valuation


@pytest.fixture
def summary(stock_store, material_store, assignment_store) -> InventorySummary:
    return InventorySummary(stock_store, material_store, assignment_store)


class TestStatusAndValuation:
    @pytest.mark.parametrize(
        ("current", "reserved", "expected"),
        [
            (10, 0, StockStatus.LOW),
            (30, 25, StockStatus.LOW),
            (50, 0, StockStatus.NORMAL),
            (100, 0, StockStatus.HIGH),
            (150, 60, StockStatus.NORMAL),
        ],
    )
    def test_status_uses_available(self, current, reserved, expected):
        stock = MaterialStock(
            material_id="M",
            current_stock=current,
            reserved_stock=reserved,
            minimum_stock=10,
            maximum_stock=100,
        ).recompute()
        assert stock_status(stock) == expected

    def test_valuation(self):
        stock = MaterialStock(material_id="M", current_stock=4, unit_cost=2.5).recompute()
        assert valuation(stock) == 10.0


class TestOverview:
    async def test_joins_catalog_entries(self, summary, make_material):
        material_id = await make_material(name="Steel Beam", initial_stock=50)

        rows = await summary.overview()

        assert len(rows) == 1
        assert rows[0].material.id == material_id
        assert rows[0].status == StockStatus.NORMAL

    async def test_filters(self, summary, make_material):
        await make_material(name="Steel Beam", initial_stock=50)
        await make_material(name="Copper Pipe", material_type=MaterialType.COPPER)

        by_search = await summary.overview(search="beam")
        by_type = await summary.overview(material_type="copper")
        by_status = await summary.overview(status=StockStatus.LOW)

        assert [r.material.name for r in by_search] == ["Steel Beam"]
        assert [r.material.name for r in by_type] == ["Copper Pipe"]
        assert [r.material.name for r in by_status] == ["Copper Pipe"]

    async def test_low_stock(self, summary, make_material):
        await make_material(name="Plenty", initial_stock=500)
        low_id = await make_material(name="Scarce", initial_stock=3)

        rows = await summary.low_stock()

        assert [r.stock.material_id for r in rows] == [low_id]
        assert rows[0].material.name == "Scarce"


class TestTotals:
    async def test_totals(self, summary, ledger, make_material):
        a = await make_material(name="A", cost_per_unit=2.0, initial_stock=50)
        await make_material(name="B", cost_per_unit=1.0, initial_stock=2000)
        await make_material(name="C", cost_per_unit=1.0)
        await ledger.reserve(a, 20)

        totals = await summary.totals()

        assert totals.item_count == 3
        assert totals.total_value == pytest.approx(2100.0)
        assert totals.total_reserved == 20
        assert totals.total_available == 2030
        assert totals.low_count == 1
        assert totals.high_count == 1

    async def test_empty(self, summary, ledger_db):
        totals = await summary.totals()
        assert totals.item_count == 0
        assert totals.total_value == 0


class TestMaterialHistory:
    async def test_merges_transactions_and_assignments(self, summary, reservations, make_material):
        material_id = await make_material(initial_stock=50)
        await reservations.assign_to_project("PRJ-1", material_id, 10)

        entries = await summary.material_history(material_id)

        kinds = [(e.kind, e.action) for e in entries]
        assert ("transaction", "IN") in kinds
        assert ("transaction", "RESERVED") in kinds
        assert ("assignment", "REQUIRED") in kinds
        assert entries[0].action == "IN"
        assert entries == sorted(entries, key=lambda e: e.timestamp)

    async def test_survives_stock_deletion(self, summary, ledger, make_material):
        material_id = await make_material(initial_stock=5)
        stock = await ledger.get_stock(material_id)
        await ledger.delete(stock.id)

        entries = await summary.material_history(material_id)

        assert [e.action for e in entries] == ["IN"]

    async def test_unknown_material(self, summary, ledger_db):
        assert await summary.material_history("missing") == []
