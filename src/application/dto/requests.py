"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.

Quantities are deliberately left unconstrained here: the ledger rejects
non-positive quantities itself and reports them as INVALID_QUANTITY.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from src.core.entities.material import MaterialCategory, MaterialType
from src.core.entities.stock import ReferenceType

# --- Catalog ---


class CreateMaterialRequest(BaseModel):
    """Register a catalog material together with its stock row."""

    name: str = Field(..., min_length=1, description="Material name")
    type: MaterialType = Field(default=MaterialType.STEEL, description="Material family")
    category: MaterialCategory = Field(
        default=MaterialCategory.STRUCTURAL, description="Product form"
    )
    grade: str | None = Field(default=None, description="Grade/alloy", examples=["S235JR", "6061-T6"])
    unit: str = Field(default="kg", description="Unit of measure")
    cost_per_unit: float = Field(default=0.0, ge=0, description="Catalog cost per unit")
    density: float | None = Field(default=None, gt=0, description="Density in g/cm³")
    supplier: str | None = Field(default=None, description="Default supplier")
    location: str | None = Field(default=None, description="Storage location")
    description: str | None = Field(default=None, description="Free-text description")
    notes: str | None = Field(default=None, description="Additional notes")
    initial_stock: float = Field(
        default=0.0,
        ge=0,
        description="Opening quantity, booked as a MANUAL receipt",
    )
    minimum_stock: float | None = Field(default=None, ge=0, description="Low-stock threshold")
    maximum_stock: float | None = Field(default=None, ge=0, description="High-stock threshold")


class UpdateMaterialRequest(BaseModel):
    """Descriptive-field edit. Type and cost per unit cannot change."""

    name: str | None = Field(default=None, min_length=1)
    category: MaterialCategory | None = None
    grade: str | None = None
    unit: str | None = None
    density: float | None = Field(default=None, gt=0)
    supplier: str | None = None
    location: str | None = None
    description: str | None = None
    notes: str | None = None


# --- Stock ---


class ReceiveStockRequest(BaseModel):
    """Book delivered quantity (IN)."""

    quantity: float = Field(..., description="Quantity received, > 0")
    unit_cost: float | None = Field(
        default=None,
        ge=0,
        description="Cost per unit of this receipt (defaults to current unit cost)",
    )
    reference_type: ReferenceType = Field(default=ReferenceType.MANUAL)
    reference_id: str | None = Field(default=None, description="Dispatch/PO reference")
    notes: str | None = Field(default=None, description="Additional notes")


class StockQuantityRequest(BaseModel):
    """Reserve, release or consume a quantity, optionally for a project."""

    quantity: float = Field(..., description="Quantity, > 0")
    project_id: str | None = Field(default=None, description="Project the movement is for")
    notes: str | None = Field(default=None, description="Additional notes")


class AdjustStockRequest(BaseModel):
    """Manual correction to a counted quantity."""

    new_current_stock: float = Field(..., description="Counted quantity, >= reserved stock")
    unit_cost: float | None = Field(default=None, ge=0, description="Corrected unit cost")
    notes: str | None = Field(default=None, description="Reason for the correction")


class UpdateStockSettingsRequest(BaseModel):
    """Threshold/descriptive edit of a stock row."""

    minimum_stock: float | None = Field(default=None, description="Low-stock threshold")
    maximum_stock: float | None = Field(default=None, description="High-stock threshold")
    location: str | None = None
    supplier: str | None = None
    notes: str | None = None


# --- Assignments ---


class CreateAssignmentRequest(BaseModel):
    """Assign (reserve) material to a project."""

    project_id: str = Field(..., min_length=1, description="Project ID")
    material_id: str = Field(..., min_length=1, description="Catalog material ID")
    quantity: float = Field(..., description="Quantity to reserve, > 0")
    purpose: str = Field(default="general", description="What the material is for")
    notes: str | None = None


class UpdateAssignmentRequest(BaseModel):
    """Change the quantity of a REQUIRED assignment."""

    quantity: float = Field(..., description="New assigned quantity, > 0")


class InstallAssignmentRequest(BaseModel):
    """Mark an assignment installed, fully or partially."""

    installed_quantity: float | None = Field(
        default=None,
        description="Installed quantity (defaults to the assigned quantity)",
    )
    return_remainder: bool = Field(
        default=True,
        description="Release the uninstalled remainder (False keeps it reserved)",
    )


# --- Dispatch ---


class DeliveryLineRequest(BaseModel):
    material_ref: str = Field(..., description="Catalog material ID or material name")
    delivered_quantity: float = Field(..., description="Delivered quantity")
    status: str = Field(default="arrived", examples=["arrived", "inspected", "allocated"])
    unit_cost: float | None = Field(default=None, ge=0)
    notes: str | None = None


class DeliveryConfirmationRequest(BaseModel):
    """Dispatch note lines confirmed as delivered."""

    dispatch_id: str = Field(..., min_length=1, description="Dispatch note ID")
    dispatch_number: str | None = Field(default=None, description="Human-facing note number")
    delivered_at: datetime | None = None
    lines: list[DeliveryLineRequest] = Field(default_factory=list)
