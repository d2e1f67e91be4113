"""Unit tests for RegisterMaterialUseCase."""

from unittest.mock import AsyncMock

import pytest

from src.application.dto.requests import CreateMaterialRequest
from src.application.use_cases.register_material import (
    INITIAL_STOCK_REFERENCE,
    RegisterMaterialUseCase,
)
from src.core.entities.material import Material, MaterialType
from src.core.entities.stock import ReferenceType, TransactionType
from src.core.exceptions import InvalidQuantityError


@pytest.fixture
def use_case(material_store, ledger) -> RegisterMaterialUseCase:
    return RegisterMaterialUseCase(material_store=material_store, ledger=ledger)


class TestRegisterMaterialUseCase:
    async def test_creates_catalog_entry_and_stock_row(self, use_case, ledger):
        result = await use_case.execute(
            CreateMaterialRequest(
                name="Aluminium Sheet 2mm",
                type=MaterialType.ALUMINUM,
                cost_per_unit=8.0,
                location="Rack 4",
            )
        )

        assert result.material.id is not None
        assert result.stock.material_id == result.material.id
        assert result.stock.current_stock == 0
        assert result.stock.unit_cost == 8.0
        assert result.stock.location == "Rack 4"
        assert result.initial_transaction is None
        assert await ledger.transactions(result.material.id) == []

    async def test_initial_stock_booked_as_manual_receipt(self, use_case, ledger):
        result = await use_case.execute(
            CreateMaterialRequest(name="Bolt M12", cost_per_unit=0.5, initial_stock=200)
        )

        assert result.stock.current_stock == 200
        assert result.stock.total_value == pytest.approx(100.0)
        txn = result.initial_transaction
        assert txn.type == TransactionType.IN
        assert txn.reference_type == ReferenceType.MANUAL
        assert txn.reference_id == INITIAL_STOCK_REFERENCE
        assert len(await ledger.transactions(result.material.id)) == 1

    async def test_custom_thresholds(self, use_case):
        result = await use_case.execute(
            CreateMaterialRequest(name="Bolt M12", minimum_stock=50, maximum_stock=500)
        )
        assert result.stock.minimum_stock == 50
        assert result.stock.maximum_stock == 500

    async def test_stock_failure_removes_catalog_entry(self, material_store, ledger):
        use_case = RegisterMaterialUseCase(material_store=material_store, ledger=ledger)

        with pytest.raises(InvalidQuantityError):
            await use_case.execute(
                CreateMaterialRequest(name="Bolt M12", minimum_stock=50, maximum_stock=5)
            )

        assert await material_store.list_materials() == []

    async def test_compensation_with_mocks(self):
        store = AsyncMock()
        store.create_material.return_value = Material(id="MAT-1", name="Bolt")
        ledger = AsyncMock()
        ledger.create_stock.side_effect = RuntimeError("stock store down")
        use_case = RegisterMaterialUseCase(material_store=store, ledger=ledger)

        with pytest.raises(RuntimeError):
            await use_case.execute(CreateMaterialRequest(name="Bolt"))

        store.delete_material.assert_awaited_once_with("MAT-1")
        ledger.receive.assert_not_called()

    async def test_to_response(self, use_case):
        result = await use_case.execute(
            CreateMaterialRequest(name="Bolt M12", cost_per_unit=1.0, initial_stock=5)
        )

        response = use_case.to_response(result)

        assert response.material.name == "Bolt M12"
        assert response.stock.current_stock == 5
        assert response.initial_transaction is not None
