"""Unit tests for InitializeStockUseCase."""

from unittest.mock import AsyncMock

import pytest

from src.application.use_cases.initialize_stock import InitializeStockUseCase
from src.core.entities.material import Material
from src.core.exceptions import DuplicateStockError


@pytest.fixture
def use_case(material_store, stock_store, ledger) -> InitializeStockUseCase:
    return InitializeStockUseCase(
        material_store=material_store, stock_store=stock_store, ledger=ledger
    )


class TestInitializeStockUseCase:
    async def test_creates_missing_rows_only(self, use_case, ledger, make_material):
        with_row = await make_material(name="Has Row", initial_stock=5)
        first = await make_material(name="No Row A", with_stock=False)
        second = await make_material(name="No Row B", with_stock=False)

        created = await use_case.execute()

        assert sorted(s.material_id for s in created) == sorted([first, second])
        assert all(s.current_stock == 0 for s in created)
        assert (await ledger.get_stock(with_row)).current_stock == 5

    async def test_second_run_creates_nothing(self, use_case, make_material):
        await make_material(with_stock=False)
        await use_case.execute()

        assert await use_case.execute() == []

    async def test_row_created_concurrently_is_skipped(self):
        material_store = AsyncMock()
        material_store.list_materials.return_value = [Material(id="MAT-1", name="Beam")]
        stock_store = AsyncMock()
        stock_store.get_stock_by_material.return_value = None
        ledger = AsyncMock()
        ledger.create_stock.side_effect = DuplicateStockError("MAT-1", 3)
        use_case = InitializeStockUseCase(material_store, stock_store, ledger)

        assert await use_case.execute() == []

    async def test_to_response(self, use_case, make_material):
        await make_material(with_stock=False)
        response = use_case.to_response(await use_case.execute())
        assert response.created_count == 1
        assert response.created[0].status == "low"
