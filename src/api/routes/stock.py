"""
Stock ledger endpoints.

Fixed paths (/summary, /low, /initialize, /rows/...) are declared before the
``/{material_id}`` routes so they are not captured as material IDs.
"""

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import (
    get_initialize_stock_use_case,
    get_ledger,
    get_mat_store,
    get_summary,
)
from src.application.dto.requests import (
    AdjustStockRequest,
    ReceiveStockRequest,
    StockQuantityRequest,
    UpdateStockSettingsRequest,
)
from src.application.dto.responses import (
    DeleteStockResponse,
    ErrorResponse,
    HistoryEntryResponse,
    InitializeStockResponse,
    LedgerOperationResponse,
    MaterialHistoryResponse,
    StockListResponse,
    StockResponse,
    StockSummaryResponse,
    TransactionResponse,
)
from src.application.use_cases.initialize_stock import InitializeStockUseCase
from src.core.entities.material import MaterialCategory, MaterialType
from src.core.entities.stock import StockReference, StockStatus
from src.core.exceptions import MaterialNotFoundError
from src.core.services import InventorySummary, LedgerResult, StockLedger
from src.core.services.inventory_summary import StockOverviewRow
from src.infrastructure.storage.sqlite.material_store import SQLiteMaterialStore

router = APIRouter(prefix="/api/stock", tags=["stock"])

_ERRORS = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
}


def _rows_to_response(rows: list[StockOverviewRow]) -> StockListResponse:
    return StockListResponse(
        items=[StockResponse.from_entity(r.stock, r.material) for r in rows],
        total=len(rows),
    )


def _ledger_response(result: LedgerResult) -> LedgerOperationResponse:
    return LedgerOperationResponse(
        stock=StockResponse.from_entity(result.stock),
        transaction=(
            TransactionResponse.from_entity(result.transaction) if result.transaction else None
        ),
    )


def _project_reference(project_id: str | None) -> StockReference:
    return StockReference.project(project_id) if project_id else StockReference.manual()


# --- Collection views ---


@router.get("", response_model=StockListResponse)
async def list_stock(
    q: str | None = Query(default=None, description="Search material name, grade, description"),
    type: MaterialType | None = Query(default=None),
    category: MaterialCategory | None = Query(default=None),
    stock_status: StockStatus | None = Query(default=None, alias="status"),
    summary: InventorySummary = Depends(get_summary),
) -> StockListResponse:
    """Stock rows joined with their catalog entry."""
    rows = await summary.overview(
        search=q,
        material_type=type.value if type else None,
        category=category.value if category else None,
        status=stock_status,
    )
    return _rows_to_response(rows)


@router.get("/summary", response_model=StockSummaryResponse)
async def stock_summary(
    summary: InventorySummary = Depends(get_summary),
) -> StockSummaryResponse:
    """Item count, valuation and low/high counts across all stock rows."""
    totals = await summary.totals()
    return StockSummaryResponse(
        item_count=totals.item_count,
        total_value=totals.total_value,
        total_reserved=totals.total_reserved,
        total_available=totals.total_available,
        low_count=totals.low_count,
        high_count=totals.high_count,
    )


@router.get("/low", response_model=StockListResponse)
async def low_stock(
    summary: InventorySummary = Depends(get_summary),
) -> StockListResponse:
    """Rows whose available stock is at or below the minimum."""
    return _rows_to_response(await summary.low_stock())


@router.post(
    "/initialize",
    response_model=InitializeStockResponse,
    status_code=status.HTTP_201_CREATED,
)
async def initialize_stock(
    use_case: InitializeStockUseCase = Depends(get_initialize_stock_use_case),
) -> InitializeStockResponse:
    """Create a zero-quantity stock row for every catalog material lacking one."""
    created = await use_case.execute()
    return use_case.to_response(created)


@router.delete(
    "/rows/{stock_id}",
    response_model=DeleteStockResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def delete_stock(
    stock_id: int,
    purge_transactions: bool = Query(default=False),
    ledger: StockLedger = Depends(get_ledger),
) -> DeleteStockResponse:
    """Delete a stock row. Refused while it holds reservations."""
    stock = await ledger.delete(stock_id, purge_transactions=purge_transactions)
    return DeleteStockResponse(
        stock_id=stock_id,
        material_id=stock.material_id,
        purged_transactions=purge_transactions,
    )


# --- Per-material views ---


@router.get(
    "/{material_id}",
    response_model=StockResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_stock(
    material_id: str,
    ledger: StockLedger = Depends(get_ledger),
    store: SQLiteMaterialStore = Depends(get_mat_store),
) -> StockResponse:
    """Current stock snapshot for a material."""
    stock = await ledger.get_stock(material_id)
    return StockResponse.from_entity(stock, await store.get_material(material_id))


@router.get(
    "/{material_id}/transactions",
    response_model=list[TransactionResponse],
    responses={404: {"model": ErrorResponse}},
)
async def get_transactions(
    material_id: str,
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    ledger: StockLedger = Depends(get_ledger),
) -> list[TransactionResponse]:
    """Ledger entries of the material's stock row, newest first."""
    transactions = await ledger.transactions(material_id, limit=limit, offset=offset)
    return [TransactionResponse.from_entity(t) for t in transactions]


@router.get(
    "/{material_id}/history",
    response_model=MaterialHistoryResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_history(
    material_id: str,
    summary: InventorySummary = Depends(get_summary),
    store: SQLiteMaterialStore = Depends(get_mat_store),
) -> MaterialHistoryResponse:
    """Chronological transactions and assignments of a material."""
    entries = await summary.material_history(material_id)
    if not entries and await store.get_material(material_id) is None:
        raise MaterialNotFoundError(material_id)
    return MaterialHistoryResponse(
        material_id=material_id,
        entries=[
            HistoryEntryResponse(
                timestamp=e.timestamp,
                kind=e.kind,
                action=e.action,
                quantity=e.quantity,
                reference_type=e.reference_type,
                reference_id=e.reference_id,
                transaction_id=e.transaction_id,
                assignment_id=e.assignment_id,
                notes=e.notes,
            )
            for e in entries
        ],
    )


@router.patch(
    "/{material_id}",
    response_model=StockResponse,
    responses=_ERRORS,
)
async def update_stock_settings(
    material_id: str,
    request: UpdateStockSettingsRequest,
    ledger: StockLedger = Depends(get_ledger),
) -> StockResponse:
    """Edit thresholds, location, supplier or notes."""
    stock = await ledger.update_settings(
        material_id,
        minimum_stock=request.minimum_stock,
        maximum_stock=request.maximum_stock,
        location=request.location,
        supplier=request.supplier,
        notes=request.notes,
    )
    return StockResponse.from_entity(stock)


# --- Quantity mutations ---


@router.post(
    "/{material_id}/receive",
    response_model=LedgerOperationResponse,
    responses=_ERRORS,
)
async def receive_stock(
    material_id: str,
    request: ReceiveStockRequest,
    ledger: StockLedger = Depends(get_ledger),
) -> LedgerOperationResponse:
    """Book delivered quantity (IN) with weighted-average cost."""
    result = await ledger.receive(
        material_id,
        request.quantity,
        unit_cost=request.unit_cost,
        reference=StockReference(
            reference_type=request.reference_type, reference_id=request.reference_id
        ),
        notes=request.notes,
    )
    return _ledger_response(result)


@router.post(
    "/{material_id}/reserve",
    response_model=LedgerOperationResponse,
    responses=_ERRORS,
)
async def reserve_stock(
    material_id: str,
    request: StockQuantityRequest,
    ledger: StockLedger = Depends(get_ledger),
) -> LedgerOperationResponse:
    """Set quantity aside (RESERVED)."""
    result = await ledger.reserve(
        material_id,
        request.quantity,
        reference=_project_reference(request.project_id),
        notes=request.notes,
    )
    return _ledger_response(result)


@router.post(
    "/{material_id}/release",
    response_model=LedgerOperationResponse,
    responses=_ERRORS,
)
async def release_stock(
    material_id: str,
    request: StockQuantityRequest,
    ledger: StockLedger = Depends(get_ledger),
) -> LedgerOperationResponse:
    """Return reserved quantity to available stock (UNRESERVED)."""
    result = await ledger.release(
        material_id,
        request.quantity,
        reference=_project_reference(request.project_id),
        notes=request.notes,
    )
    return _ledger_response(result)


@router.post(
    "/{material_id}/consume",
    response_model=LedgerOperationResponse,
    responses=_ERRORS,
)
async def consume_stock(
    material_id: str,
    request: StockQuantityRequest,
    ledger: StockLedger = Depends(get_ledger),
) -> LedgerOperationResponse:
    """Use reserved quantity permanently (OUT)."""
    result = await ledger.consume(
        material_id,
        request.quantity,
        reference=_project_reference(request.project_id),
        notes=request.notes,
    )
    return _ledger_response(result)


@router.post(
    "/{material_id}/adjust",
    response_model=LedgerOperationResponse,
    responses=_ERRORS,
)
async def adjust_stock(
    material_id: str,
    request: AdjustStockRequest,
    ledger: StockLedger = Depends(get_ledger),
) -> LedgerOperationResponse:
    """Correct the counted quantity (ADJUSTED)."""
    result = await ledger.adjust_stock(
        material_id,
        request.new_current_stock,
        unit_cost=request.unit_cost,
        notes=request.notes,
    )
    return _ledger_response(result)
