"""Remove Material Use Case: catalog deletion with stock and assignment cleanup."""

from dataclasses import dataclass

from src.application.dto.responses import RemoveMaterialResponse
from src.config import get_logger
from src.core.entities.assignment import ACTIVE_STATUSES
from src.core.exceptions import CatalogInUseError, MaterialNotFoundError, StockNotFoundError
from src.core.interfaces.assignment_store import IAssignmentStore
from src.core.interfaces.material_store import IMaterialStore
from src.core.services.stock_ledger import StockLedger

logger = get_logger(__name__)


@dataclass
class RemoveMaterialResult:
    material_id: str
    deleted_assignments: int
    stock_deleted: bool
    purged_transactions: bool


class RemoveMaterialUseCase:
    """
    Delete a catalog material.

    Refused while the material has REQUIRED/ORDERED assignments or reserved
    stock. Otherwise deletes, in order: the stock row (through the ledger),
    the settled assignments, the catalog entry. Each step is its own
    transaction.
    """

    def __init__(
        self,
        material_store: IMaterialStore | None = None,
        assignment_store: IAssignmentStore | None = None,
        ledger: StockLedger | None = None,
    ):
        self._material_store = material_store
        self._assignment_store = assignment_store
        self._ledger = ledger

    async def _get_material_store(self) -> IMaterialStore:
        if self._material_store is None:
            from src.infrastructure.storage.sqlite import get_material_store

            self._material_store = await get_material_store()
        return self._material_store

    async def _get_assignment_store(self) -> IAssignmentStore:
        if self._assignment_store is None:
            from src.infrastructure.storage.sqlite import get_assignment_store

            self._assignment_store = await get_assignment_store()
        return self._assignment_store

    async def _get_ledger(self) -> StockLedger:
        if self._ledger is None:
            from src.application.services import get_stock_ledger

            self._ledger = await get_stock_ledger()
        return self._ledger

    async def execute(
        self, material_id: str, purge_transactions: bool = False
    ) -> RemoveMaterialResult:
        """
        Raises:
            MaterialNotFoundError: No such catalog entry
            CatalogInUseError: Active project assignments reference the material
            HasActiveReservationsError: The stock row still holds reservations
        """
        material_store = await self._get_material_store()
        assignment_store = await self._get_assignment_store()
        ledger = await self._get_ledger()

        material = await material_store.get_material(material_id)
        if material is None:
            raise MaterialNotFoundError(material_id)

        active = await assignment_store.list_by_material(material_id, list(ACTIVE_STATUSES))
        if active:
            logger.warning(
                "remove_material_rejected",
                material_id=material_id,
                active_assignments=len(active),
            )
            raise CatalogInUseError(
                material_id, f"{len(active)} active project assignment(s)"
            )

        stock_deleted = False
        try:
            stock = await ledger.get_stock(material_id)
        except StockNotFoundError:
            stock = None
        if stock is not None:
            await ledger.delete(stock.id, purge_transactions=purge_transactions)  # type: ignore[arg-type]
            stock_deleted = True

        settled = await assignment_store.list_by_material(material_id)
        for assignment in settled:
            await assignment_store.delete_assignment(assignment.id)  # type: ignore[arg-type]

        await material_store.delete_material(material_id)

        logger.info(
            "material_removed",
            material_id=material_id,
            deleted_assignments=len(settled),
            stock_deleted=stock_deleted,
            purge_transactions=purge_transactions,
        )
        return RemoveMaterialResult(
            material_id=material_id,
            deleted_assignments=len(settled),
            stock_deleted=stock_deleted,
            purged_transactions=purge_transactions and stock_deleted,
        )

    def to_response(self, result: RemoveMaterialResult) -> RemoveMaterialResponse:
        return RemoveMaterialResponse(
            material_id=result.material_id,
            deleted_assignments=result.deleted_assignments,
            stock_deleted=result.stock_deleted,
            purged_transactions=result.purged_transactions,
        )
