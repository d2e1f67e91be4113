"""Delivery confirmation received from the dispatch subsystem."""

from datetime import datetime

from pydantic import BaseModel, Field


class DeliveryLine(BaseModel):
    """One material line of a dispatch note."""

    material_ref: str  # catalog ID or material name
    delivered_quantity: float
    status: str = "arrived"
    unit_cost: float | None = None
    notes: str | None = None


class DeliveryConfirmation(BaseModel):
    """A dispatch note whose lines reached the site/warehouse."""

    dispatch_id: str
    dispatch_number: str | None = None
    delivered_at: datetime | None = None
    lines: list[DeliveryLine] = Field(default_factory=list)
