"""Project material assignment entity."""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field


class AssignmentStatus(str, Enum):
    """Assignment lifecycle states."""

    REQUIRED = "REQUIRED"
    ORDERED = "ORDERED"
    INSTALLED = "INSTALLED"
    CANCELLED = "CANCELLED"


ACTIVE_STATUSES = frozenset({AssignmentStatus.REQUIRED, AssignmentStatus.ORDERED})


class ProjectMaterialAssignment(BaseModel):
    """
    A project's demand for a material, backed by reserved stock.

    REQUIRED and ORDERED assignments hold a reservation of ``quantity``.
    INSTALLED (consumed) and CANCELLED (released) are terminal.
    """

    id: int | None = None
    project_id: str
    material_catalog_id: str
    purpose: str = "general"
    quantity: float
    unit_cost: float = 0.0
    total_cost: float = 0.0
    status: AssignmentStatus = AssignmentStatus.REQUIRED
    notes: str | None = None
    ordered_at: datetime | None = None
    installed_at: datetime | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    def set_quantity(self, quantity: float) -> "ProjectMaterialAssignment":
        self.quantity = quantity
        self.total_cost = quantity * self.unit_cost
        self.updated_at = datetime.now(UTC)
        return self

    def transition(self, status: AssignmentStatus) -> "ProjectMaterialAssignment":
        now = datetime.now(UTC)
        self.status = status
        if status == AssignmentStatus.ORDERED:
            self.ordered_at = now
        elif status == AssignmentStatus.INSTALLED:
            self.installed_at = now
        self.updated_at = now
        return self
