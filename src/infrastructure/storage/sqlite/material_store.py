"""
SQLite implementation of material catalog storage.
"""

import uuid
from datetime import UTC, datetime

import aiosqlite

from src.config import get_logger
from src.core.entities.material import Material, MaterialCategory, MaterialType
from src.core.exceptions import CatalogInUseError
from src.core.interfaces.material_store import IMaterialStore
from src.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


def _generate_id() -> str:
    """Generate a new UUID text ID."""
    return str(uuid.uuid4())


class SQLiteMaterialStore(IMaterialStore):
    """SQLite implementation of material catalog storage."""

    async def create_material(self, material: Material) -> Material:
        """Create a new material record."""
        if not material.id:
            material.id = _generate_id()
        material.updated_at = datetime.now(UTC)
        async with get_transaction() as conn:
            await conn.execute(
                """
                INSERT INTO materials (
                    id, name, normalized_name, type, category, grade, unit,
                    cost_per_unit, density, supplier, location, description,
                    notes, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    material.id,
                    material.name,
                    material.normalized_name,
                    material.type.value,
                    material.category.value,
                    material.grade,
                    material.unit,
                    material.cost_per_unit,
                    material.density,
                    material.supplier,
                    material.location,
                    material.description,
                    material.notes,
                    material.created_at.isoformat(),
                    material.updated_at.isoformat(),
                ),
            )
            logger.info("material_created", material_id=material.id, name=material.name)
            return material

    async def get_material(self, material_id: str) -> Material | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM materials WHERE id = ?", (material_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_material(row)

    async def list_materials(
        self,
        limit: int = 100,
        offset: int = 0,
        material_type: str | None = None,
        category: str | None = None,
        search: str | None = None,
    ) -> list[Material]:
        """List materials with pagination and optional type/category/text filters."""
        clauses: list[str] = []
        params: list = []
        if material_type:
            clauses.append("type = ?")
            params.append(material_type)
        if category:
            clauses.append("category = ?")
            params.append(category)
        if search:
            pattern = f"%{search.strip().lower()}%"
            clauses.append(
                "(normalized_name LIKE ? OR LOWER(COALESCE(grade, '')) LIKE ?"
                " OR LOWER(COALESCE(description, '')) LIKE ?)"
            )
            params.extend([pattern, pattern, pattern])

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT * FROM materials
                {where}
                ORDER BY name
                LIMIT ? OFFSET ?
                """,
                (*params, limit, offset),
            )
            rows = await cursor.fetchall()
            return [self._row_to_material(row) for row in rows]

    async def find_by_normalized_name(self, normalized_name: str) -> list[Material]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM materials WHERE normalized_name = ? ORDER BY created_at",
                (normalized_name,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_material(row) for row in rows]

    async def update_material(self, material: Material) -> Material:
        """Update descriptive fields. Type and cost are never rewritten."""
        material.updated_at = datetime.now(UTC)
        async with get_transaction() as conn:
            await conn.execute(
                """
                UPDATE materials SET
                    name = ?, normalized_name = ?, category = ?, grade = ?,
                    unit = ?, density = ?, supplier = ?, location = ?,
                    description = ?, notes = ?, updated_at = ?
                WHERE id = ?
                """,
                (
                    material.name,
                    material.normalized_name,
                    material.category.value,
                    material.grade,
                    material.unit,
                    material.density,
                    material.supplier,
                    material.location,
                    material.description,
                    material.notes,
                    material.updated_at.isoformat(),
                    material.id,
                ),
            )
            logger.info("material_updated", material_id=material.id)
            return material

    async def delete_material(self, material_id: str) -> bool:
        """
        Delete a catalog entry.

        Raises:
            CatalogInUseError: A stock row or assignment still references it
        """
        try:
            async with get_transaction() as conn:
                cursor = await conn.execute(
                    "DELETE FROM materials WHERE id = ?", (material_id,)
                )
                deleted = cursor.rowcount > 0
        except aiosqlite.IntegrityError as e:
            raise CatalogInUseError(material_id, "still referenced by stock or assignments") from e

        if deleted:
            logger.info("material_deleted", material_id=material_id)
        return deleted

    @staticmethod
    def _row_to_material(row: aiosqlite.Row) -> Material:
        return Material(
            id=row["id"],
            name=row["name"],
            normalized_name=row["normalized_name"],
            type=MaterialType(row["type"]),
            category=MaterialCategory(row["category"]),
            grade=row["grade"],
            unit=row["unit"],
            cost_per_unit=float(row["cost_per_unit"]),
            density=row["density"],
            supplier=row["supplier"],
            location=row["location"],
            description=row["description"],
            notes=row["notes"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
