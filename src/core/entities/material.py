"""
Material domain entity for the materials catalog.

A catalog material describes something purchasable, independent of any
quantity held in stock.
"""

import re
from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field, model_validator


class MaterialType(str, Enum):
    """Base metal / material family."""

    STEEL = "steel"
    STAINLESS = "stainless"
    ALUMINUM = "aluminum"
    COPPER = "copper"
    TITANIUM = "titanium"
    OTHER = "other"


class MaterialCategory(str, Enum):
    """Product form of a material."""

    STRUCTURAL = "structural"
    SHEET = "sheet"
    PIPE = "pipe"
    BAR = "bar"
    FASTENER = "fastener"
    OTHER = "other"


# Fields that may change after creation; type and cost_per_unit may not.
DESCRIPTIVE_FIELDS = frozenset(
    {
        "name",
        "category",
        "grade",
        "unit",
        "density",
        "supplier",
        "location",
        "description",
        "notes",
    }
)


def normalize_name(name: str) -> str:
    """Normalize a name for comparison: strip, lowercase, collapse whitespace."""
    return re.sub(r"\s+", " ", name.strip().lower())


class Material(BaseModel):
    """
    A material in the catalog.

    Referenced 1:1 by its stock row and by project assignments.
    """

    id: str | None = None
    name: str
    normalized_name: str = ""
    type: MaterialType = MaterialType.STEEL
    category: MaterialCategory = MaterialCategory.STRUCTURAL
    grade: str | None = None
    unit: str = "kg"
    cost_per_unit: float = Field(default=0.0, ge=0)
    density: float | None = None  # g/cm³
    supplier: str | None = None
    location: str | None = None
    description: str | None = None
    notes: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @model_validator(mode="after")
    def compute_normalized_name(self) -> "Material":
        """Auto-compute normalized_name from name if not set."""
        if not self.normalized_name:
            self.normalized_name = normalize_name(self.name)
        return self

    def apply_update(self, changes: dict) -> "Material":
        """Apply descriptive-field changes; anything else is rejected."""
        illegal = set(changes) - DESCRIPTIVE_FIELDS
        if illegal:
            raise ValueError(f"Immutable material fields: {', '.join(sorted(illegal))}")
        for field, value in changes.items():
            setattr(self, field, value)
        if "name" in changes:
            self.normalized_name = normalize_name(self.name)
        self.updated_at = datetime.now(UTC)
        return self
