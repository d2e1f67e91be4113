"""Initialize Stock Use Case: bootstrap missing stock rows for the catalog."""

from src.application.dto.responses import InitializeStockResponse, StockResponse
from src.config import get_logger
from src.core.entities.stock import MaterialStock
from src.core.exceptions import DuplicateStockError
from src.core.interfaces.material_store import IMaterialStore
from src.core.interfaces.stock_store import IStockStore
from src.core.services.stock_ledger import StockLedger

logger = get_logger(__name__)

CATALOG_PAGE_SIZE = 500


class InitializeStockUseCase:
    """Create a zero-quantity stock row for every catalog material lacking one."""

    def __init__(
        self,
        material_store: IMaterialStore | None = None,
        stock_store: IStockStore | None = None,
        ledger: StockLedger | None = None,
    ):
        self._material_store = material_store
        self._stock_store = stock_store
        self._ledger = ledger

    async def _get_material_store(self) -> IMaterialStore:
        if self._material_store is None:
            from src.infrastructure.storage.sqlite import get_material_store

            self._material_store = await get_material_store()
        return self._material_store

    async def _get_stock_store(self) -> IStockStore:
        if self._stock_store is None:
            from src.infrastructure.storage.sqlite import get_stock_store

            self._stock_store = await get_stock_store()
        return self._stock_store

    async def _get_ledger(self) -> StockLedger:
        if self._ledger is None:
            from src.application.services import get_stock_ledger

            self._ledger = await get_stock_ledger()
        return self._ledger

    async def execute(self) -> list[MaterialStock]:
        material_store = await self._get_material_store()
        stock_store = await self._get_stock_store()
        ledger = await self._get_ledger()

        created: list[MaterialStock] = []
        offset = 0
        while True:
            page = await material_store.list_materials(limit=CATALOG_PAGE_SIZE, offset=offset)
            for material in page:
                if await stock_store.get_stock_by_material(material.id) is not None:  # type: ignore[arg-type]
                    continue
                try:
                    created.append(await ledger.create_stock(material.id))  # type: ignore[arg-type]
                except DuplicateStockError:
                    # Created concurrently between the check and the insert.
                    continue
            if len(page) < CATALOG_PAGE_SIZE:
                break
            offset += CATALOG_PAGE_SIZE

        logger.info("stock_initialized", created=len(created))
        return created

    def to_response(self, created: list[MaterialStock]) -> InitializeStockResponse:
        return InitializeStockResponse(
            created=[StockResponse.from_entity(s) for s in created],
            created_count=len(created),
        )
