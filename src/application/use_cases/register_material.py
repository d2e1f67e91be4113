"""Register Material Use Case: catalog entry plus its stock row."""

from dataclasses import dataclass

from src.application.dto.requests import CreateMaterialRequest
from src.application.dto.responses import (
    MaterialResponse,
    RegisterMaterialResponse,
    StockResponse,
    TransactionResponse,
)
from src.config import get_logger
from src.core.entities.material import Material
from src.core.entities.stock import MaterialStock, StockReference, StockTransaction
from src.core.interfaces.material_store import IMaterialStore
from src.core.services.stock_ledger import StockLedger

logger = get_logger(__name__)

INITIAL_STOCK_REFERENCE = "initial-stock"


@dataclass
class RegisterMaterialResult:
    """Result of registering a material."""

    material: Material
    stock: MaterialStock
    initial_transaction: StockTransaction | None = None


class RegisterMaterialUseCase:
    """Create a catalog material and its stock row; book opening stock as a receipt."""

    def __init__(
        self,
        material_store: IMaterialStore | None = None,
        ledger: StockLedger | None = None,
    ):
        self._material_store = material_store
        self._ledger = ledger

    async def _get_material_store(self) -> IMaterialStore:
        if self._material_store is None:
            from src.infrastructure.storage.sqlite import get_material_store

            self._material_store = await get_material_store()
        return self._material_store

    async def _get_ledger(self) -> StockLedger:
        if self._ledger is None:
            from src.application.services import get_stock_ledger

            self._ledger = await get_stock_ledger()
        return self._ledger

    async def execute(self, request: CreateMaterialRequest) -> RegisterMaterialResult:
        """Execute register material use case."""
        logger.info("register_material_started", name=request.name, type=request.type.value)

        store = await self._get_material_store()
        ledger = await self._get_ledger()

        material = await store.create_material(
            Material(
                name=request.name,
                type=request.type,
                category=request.category,
                grade=request.grade,
                unit=request.unit,
                cost_per_unit=request.cost_per_unit,
                density=request.density,
                supplier=request.supplier,
                location=request.location,
                description=request.description,
                notes=request.notes,
            )
        )

        try:
            stock = await ledger.create_stock(
                material.id,  # type: ignore[arg-type]
                minimum_stock=request.minimum_stock,
                maximum_stock=request.maximum_stock,
                unit_cost=material.cost_per_unit,
            )
        except Exception:
            # Keep catalog and stock 1:1: no stock row, no catalog entry.
            await store.delete_material(material.id)  # type: ignore[arg-type]
            raise

        initial_transaction = None
        if request.initial_stock > 0:
            result = await ledger.receive(
                material.id,  # type: ignore[arg-type]
                request.initial_stock,
                unit_cost=material.cost_per_unit,
                reference=StockReference.manual(INITIAL_STOCK_REFERENCE),
                notes="Initial stock",
            )
            stock = result.stock
            initial_transaction = result.transaction

        logger.info(
            "register_material_complete",
            material_id=material.id,
            stock_id=stock.id,
            initial_stock=request.initial_stock,
        )
        return RegisterMaterialResult(
            material=material,
            stock=stock,
            initial_transaction=initial_transaction,
        )

    def to_response(self, result: RegisterMaterialResult) -> RegisterMaterialResponse:
        """Convert result to API response."""
        return RegisterMaterialResponse(
            material=MaterialResponse.from_entity(result.material),
            stock=StockResponse.from_entity(result.stock, result.material),
            initial_transaction=(
                TransactionResponse.from_entity(result.initial_transaction)
                if result.initial_transaction
                else None
            ),
        )
