"""Update Material Use Case: descriptive catalog edits."""

from src.application.dto.requests import UpdateMaterialRequest
from src.config import get_logger
from src.core.entities.material import Material
from src.core.exceptions import MaterialNotFoundError
from src.core.interfaces.material_store import IMaterialStore

logger = get_logger(__name__)


class UpdateMaterialUseCase:
    """Edit descriptive fields of a catalog material."""

    def __init__(self, material_store: IMaterialStore | None = None):
        self._material_store = material_store

    async def _get_material_store(self) -> IMaterialStore:
        if self._material_store is None:
            from src.infrastructure.storage.sqlite import get_material_store

            self._material_store = await get_material_store()
        return self._material_store

    async def execute(self, material_id: str, request: UpdateMaterialRequest) -> Material:
        store = await self._get_material_store()
        material = await store.get_material(material_id)
        if material is None:
            raise MaterialNotFoundError(material_id)

        changes = request.model_dump(exclude_unset=True, exclude_none=True)
        if not changes:
            return material

        material.apply_update(changes)
        material = await store.update_material(material)
        logger.info("material_descriptive_update", material_id=material_id, fields=sorted(changes))
        return material
