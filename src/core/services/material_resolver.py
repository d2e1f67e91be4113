"""
Resolution of free-form dispatch material references to stock rows.

A reference is tried as a catalog ID first, then (if enabled) as a material
name compared after normalization. The outcome is always explicit: a line
is Matched, Ambiguous or NotFound, never silently dropped.
"""

from dataclasses import dataclass, field
from enum import Enum

from src.config import get_logger
from src.core.entities.material import Material, normalize_name
from src.core.interfaces.material_store import IMaterialStore
from src.core.interfaces.stock_store import IStockStore

logger = get_logger(__name__)


class MatchVia(str, Enum):
    CATALOG_ID = "catalog_id"
    NAME = "name"


@dataclass
class Matched:
    stock_id: int
    material_id: str
    via: MatchVia


@dataclass
class Ambiguous:
    reference: str
    candidates: list[str] = field(default_factory=list)  # material IDs


@dataclass
class NotFound:
    reference: str
    reason: str


Resolution = Matched | Ambiguous | NotFound


class MaterialResolver:
    """Maps a dispatch line's material reference onto a stock row."""

    def __init__(
        self,
        material_store: IMaterialStore,
        stock_store: IStockStore,
        name_fallback_enabled: bool = True,
    ) -> None:
        self._material_store = material_store
        self._stock_store = stock_store
        self._name_fallback = name_fallback_enabled

    async def resolve(self, reference: str) -> Resolution:
        ref = (reference or "").strip()
        if not ref:
            return NotFound(reference=reference, reason="empty material reference")

        material = await self._material_store.get_material(ref)
        if material is not None:
            return await self._to_stock(ref, material, MatchVia.CATALOG_ID)

        if not self._name_fallback:
            return NotFound(reference=ref, reason="no catalog material with this ID")

        matches = await self._material_store.find_by_normalized_name(normalize_name(ref))
        if not matches:
            return NotFound(reference=ref, reason="no catalog material with this ID or name")
        if len(matches) > 1:
            logger.warning(
                "material_reference_ambiguous",
                reference=ref,
                candidates=[m.id for m in matches],
            )
            return Ambiguous(reference=ref, candidates=[m.id for m in matches])

        logger.info("material_resolved_by_name", reference=ref, material_id=matches[0].id)
        return await self._to_stock(ref, matches[0], MatchVia.NAME)

    async def _to_stock(self, ref: str, material: Material, via: MatchVia) -> Resolution:
        stock = await self._stock_store.get_stock_by_material(material.id)
        if stock is None:
            return NotFound(reference=ref, reason=f"material {material.id} has no stock row")
        return Matched(stock_id=stock.id, material_id=material.id, via=via)
