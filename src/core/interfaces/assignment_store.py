"""Abstract interface for project material assignment storage."""

from abc import ABC, abstractmethod

from src.core.entities.assignment import AssignmentStatus, ProjectMaterialAssignment


class IAssignmentStore(ABC):
    """Interface for project material assignment persistence."""

    @abstractmethod
    async def create_assignment(
        self, assignment: ProjectMaterialAssignment
    ) -> ProjectMaterialAssignment:
        """Create a new assignment."""
        pass

    @abstractmethod
    async def get_assignment(self, assignment_id: int) -> ProjectMaterialAssignment | None:
        """Get assignment by ID."""
        pass

    @abstractmethod
    async def update_assignment(
        self, assignment: ProjectMaterialAssignment
    ) -> ProjectMaterialAssignment:
        """Update quantity, cost and status fields."""
        pass

    @abstractmethod
    async def delete_assignment(self, assignment_id: int) -> bool:
        """Delete an assignment."""
        pass

    @abstractmethod
    async def list_by_project(self, project_id: str) -> list[ProjectMaterialAssignment]:
        """List assignments of a project, oldest first."""
        pass

    @abstractmethod
    async def list_by_material(
        self,
        material_id: str,
        statuses: list[AssignmentStatus] | None = None,
    ) -> list[ProjectMaterialAssignment]:
        """List assignments referencing a material, optionally by status."""
        pass

    @abstractmethod
    async def find_active(
        self, project_id: str, material_id: str, purpose: str
    ) -> ProjectMaterialAssignment | None:
        """The REQUIRED/ORDERED assignment for (project, material, purpose), if any."""
        pass
