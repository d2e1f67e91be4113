"""SQLite implementation of project material assignment storage."""

from datetime import UTC, datetime

import aiosqlite

from src.config import get_logger
from src.core.entities.assignment import (
    ACTIVE_STATUSES,
    AssignmentStatus,
    ProjectMaterialAssignment,
)
from src.core.interfaces.assignment_store import IAssignmentStore
from src.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


class SQLiteAssignmentStore(IAssignmentStore):
    """SQLite implementation of project material assignments."""

    async def create_assignment(
        self, assignment: ProjectMaterialAssignment
    ) -> ProjectMaterialAssignment:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO project_material_assignments (
                    project_id, material_catalog_id, purpose, quantity,
                    unit_cost, total_cost, status, notes, ordered_at,
                    installed_at, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    assignment.project_id,
                    assignment.material_catalog_id,
                    assignment.purpose,
                    assignment.quantity,
                    assignment.unit_cost,
                    assignment.total_cost,
                    assignment.status.value,
                    assignment.notes,
                    _iso(assignment.ordered_at),
                    _iso(assignment.installed_at),
                    assignment.created_at.isoformat(),
                    assignment.updated_at.isoformat(),
                ),
            )
            assignment.id = cursor.lastrowid
            logger.info(
                "assignment_created",
                assignment_id=assignment.id,
                project_id=assignment.project_id,
                material_id=assignment.material_catalog_id,
            )
            return assignment

    async def get_assignment(self, assignment_id: int) -> ProjectMaterialAssignment | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM project_material_assignments WHERE id = ?",
                (assignment_id,),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_assignment(row)

    async def update_assignment(
        self, assignment: ProjectMaterialAssignment
    ) -> ProjectMaterialAssignment:
        async with get_transaction() as conn:
            await conn.execute(
                """
                UPDATE project_material_assignments SET
                    quantity = ?, unit_cost = ?, total_cost = ?, status = ?,
                    notes = ?, ordered_at = ?, installed_at = ?, updated_at = ?
                WHERE id = ?
                """,
                (
                    assignment.quantity,
                    assignment.unit_cost,
                    assignment.total_cost,
                    assignment.status.value,
                    assignment.notes,
                    _iso(assignment.ordered_at),
                    _iso(assignment.installed_at),
                    assignment.updated_at.isoformat(),
                    assignment.id,
                ),
            )
            logger.info(
                "assignment_updated",
                assignment_id=assignment.id,
                status=assignment.status.value,
            )
            return assignment

    async def delete_assignment(self, assignment_id: int) -> bool:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "DELETE FROM project_material_assignments WHERE id = ?",
                (assignment_id,),
            )
            return cursor.rowcount > 0

    async def list_by_project(self, project_id: str) -> list[ProjectMaterialAssignment]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM project_material_assignments
                WHERE project_id = ?
                ORDER BY created_at, id
                """,
                (project_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_assignment(row) for row in rows]

    async def list_by_material(
        self,
        material_id: str,
        statuses: list[AssignmentStatus] | None = None,
    ) -> list[ProjectMaterialAssignment]:
        query = "SELECT * FROM project_material_assignments WHERE material_catalog_id = ?"
        params: list = [material_id]
        if statuses:
            query += f" AND status IN ({', '.join('?' for _ in statuses)})"
            params.extend(s.value for s in statuses)
        query += " ORDER BY created_at, id"

        async with get_connection() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            return [self._row_to_assignment(row) for row in rows]

    async def find_active(
        self, project_id: str, material_id: str, purpose: str
    ) -> ProjectMaterialAssignment | None:
        active = sorted(s.value for s in ACTIVE_STATUSES)
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT * FROM project_material_assignments
                WHERE project_id = ? AND material_catalog_id = ? AND purpose = ?
                  AND status IN ({', '.join('?' for _ in active)})
                ORDER BY id
                LIMIT 1
                """,
                (project_id, material_id, purpose, *active),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_assignment(row)

    @staticmethod
    def _row_to_assignment(row: aiosqlite.Row) -> ProjectMaterialAssignment:
        def parse(value: str | None) -> datetime | None:
            return datetime.fromisoformat(value) if value else None

        return ProjectMaterialAssignment(
            id=row["id"],
            project_id=row["project_id"],
            material_catalog_id=row["material_catalog_id"],
            purpose=row["purpose"],
            quantity=float(row["quantity"]),
            unit_cost=float(row["unit_cost"]),
            total_cost=float(row["total_cost"]),
            status=AssignmentStatus(row["status"]),
            notes=row["notes"],
            ordered_at=parse(row["ordered_at"]),
            installed_at=parse(row["installed_at"]),
            created_at=parse(row["created_at"]) or datetime.now(UTC),
            updated_at=parse(row["updated_at"]) or datetime.now(UTC),
        )
