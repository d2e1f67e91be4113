"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
These are the ONLY contracts between use cases and API layer.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from src.core.entities.assignment import ProjectMaterialAssignment
from src.core.entities.material import Material
from src.core.entities.stock import MaterialStock, StockTransaction

# --- Catalog ---


class MaterialResponse(BaseModel):
    """Catalog material response DTO."""

    id: str
    name: str
    normalized_name: str
    type: str
    category: str
    grade: str | None = None
    unit: str
    cost_per_unit: float
    density: float | None = None
    supplier: str | None = None
    location: str | None = None
    description: str | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, material: Material) -> "MaterialResponse":
        return cls(
            id=material.id,  # type: ignore[arg-type]
            name=material.name,
            normalized_name=material.normalized_name,
            type=material.type.value,
            category=material.category.value,
            grade=material.grade,
            unit=material.unit,
            cost_per_unit=material.cost_per_unit,
            density=material.density,
            supplier=material.supplier,
            location=material.location,
            description=material.description,
            notes=material.notes,
            created_at=material.created_at,
            updated_at=material.updated_at,
        )


class MaterialListResponse(BaseModel):
    items: list[MaterialResponse]
    total: int


# --- Stock ---


class StockResponse(BaseModel):
    """Stock row response DTO."""

    id: int
    material_id: str
    material_name: str | None = None
    current_stock: float
    reserved_stock: float
    available_stock: float
    minimum_stock: float
    maximum_stock: float
    unit_cost: float
    total_value: float
    status: str = Field(..., description="low / normal / high")
    location: str | None = None
    supplier: str | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(
        cls, stock: MaterialStock, material: Material | None = None
    ) -> "StockResponse":
        return cls(
            id=stock.id,  # type: ignore[arg-type]
            material_id=stock.material_id,
            material_name=material.name if material else None,
            current_stock=stock.current_stock,
            reserved_stock=stock.reserved_stock,
            available_stock=stock.available_stock,
            minimum_stock=stock.minimum_stock,
            maximum_stock=stock.maximum_stock,
            unit_cost=stock.unit_cost,
            total_value=stock.total_value,
            status=stock.status.value,
            location=stock.location,
            supplier=stock.supplier,
            notes=stock.notes,
            created_at=stock.created_at,
            updated_at=stock.updated_at,
        )


class StockListResponse(BaseModel):
    items: list[StockResponse]
    total: int


class TransactionResponse(BaseModel):
    """Stock transaction (ledger entry) response DTO."""

    id: int
    material_stock_id: int
    material_id: str
    type: str
    quantity: float
    unit_cost: float
    total_cost: float
    reference_id: str | None = None
    reference_type: str
    transaction_date: datetime
    notes: str | None = None
    created_by: str

    @classmethod
    def from_entity(cls, txn: StockTransaction) -> "TransactionResponse":
        return cls(
            id=txn.id,  # type: ignore[arg-type]
            material_stock_id=txn.material_stock_id,
            material_id=txn.material_id,
            type=txn.type.value,
            quantity=txn.quantity,
            unit_cost=txn.unit_cost,
            total_cost=txn.total_cost,
            reference_id=txn.reference_id,
            reference_type=txn.reference_type.value,
            transaction_date=txn.transaction_date,
            notes=txn.notes,
            created_by=txn.created_by,
        )


class LedgerOperationResponse(BaseModel):
    """Stock row after a ledger call plus the entry it appended."""

    stock: StockResponse
    transaction: TransactionResponse | None = Field(
        default=None, description="None when the call changed nothing"
    )


class StockSummaryResponse(BaseModel):
    item_count: int
    total_value: float
    total_reserved: float
    total_available: float
    low_count: int
    high_count: int


class HistoryEntryResponse(BaseModel):
    timestamp: datetime
    kind: str
    action: str
    quantity: float
    reference_type: str | None = None
    reference_id: str | None = None
    transaction_id: int | None = None
    assignment_id: int | None = None
    notes: str | None = None


class MaterialHistoryResponse(BaseModel):
    material_id: str
    entries: list[HistoryEntryResponse]


class InitializeStockResponse(BaseModel):
    created: list[StockResponse]
    created_count: int


class DeleteStockResponse(BaseModel):
    stock_id: int
    material_id: str
    purged_transactions: bool


# --- Catalog use cases ---


class RegisterMaterialResponse(BaseModel):
    material: MaterialResponse
    stock: StockResponse
    initial_transaction: TransactionResponse | None = None


class RemoveMaterialResponse(BaseModel):
    material_id: str
    deleted_assignments: int
    stock_deleted: bool
    purged_transactions: bool


# --- Assignments ---


class AssignmentResponse(BaseModel):
    """Project material assignment response DTO."""

    id: int
    project_id: str
    material_id: str
    purpose: str
    quantity: float
    unit_cost: float
    total_cost: float
    status: str
    notes: str | None = None
    ordered_at: datetime | None = None
    installed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, assignment: ProjectMaterialAssignment) -> "AssignmentResponse":
        return cls(
            id=assignment.id,  # type: ignore[arg-type]
            project_id=assignment.project_id,
            material_id=assignment.material_catalog_id,
            purpose=assignment.purpose,
            quantity=assignment.quantity,
            unit_cost=assignment.unit_cost,
            total_cost=assignment.total_cost,
            status=assignment.status.value,
            notes=assignment.notes,
            ordered_at=assignment.ordered_at,
            installed_at=assignment.installed_at,
            created_at=assignment.created_at,
            updated_at=assignment.updated_at,
        )


class AssignmentListResponse(BaseModel):
    items: list[AssignmentResponse]
    total: int


class InstallAssignmentResponse(BaseModel):
    assignment: AssignmentResponse
    consumed: float
    returned_to_stock: float = 0.0
    remainder_assignment: AssignmentResponse | None = None


# --- Dispatch ---


class DeliveryLineResultResponse(BaseModel):
    line_index: int
    material_ref: str
    outcome: str = Field(..., description="received / skipped / unresolved / failed")
    quantity: float
    material_id: str | None = None
    transaction_id: int | None = None
    possible_duplicate: bool = False
    candidates: list[str] = Field(default_factory=list)
    reason: str | None = None


class DeliveryIntakeResponse(BaseModel):
    """Per-line outcome of a delivery confirmation."""

    dispatch_id: str
    lines: list[DeliveryLineResultResponse]
    received_count: int
    skipped_count: int
    unresolved_count: int
    failed_count: int
    possible_duplicate_count: int


# --- Health / errors ---


class ProviderHealthResponse(BaseModel):
    """Health status of a backing component."""

    name: str
    available: bool
    latency_ms: float | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: ProviderHealthResponse | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. INSUFFICIENT_STOCK)
    - message: human-readable description with the quantities involved
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)
