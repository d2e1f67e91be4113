"""
Abstract interface for material catalog storage.
"""

from abc import ABC, abstractmethod

from src.core.entities.material import Material


class IMaterialStore(ABC):
    """
    Abstract interface for material catalog storage.
    """

    @abstractmethod
    async def create_material(self, material: Material) -> Material:
        """Create a new material record."""

    @abstractmethod
    async def get_material(self, material_id: str) -> Material | None:
        """Get material by ID."""

    @abstractmethod
    async def list_materials(
        self,
        limit: int = 100,
        offset: int = 0,
        material_type: str | None = None,
        category: str | None = None,
        search: str | None = None,
    ) -> list[Material]:
        """List materials with pagination and optional filters."""

    @abstractmethod
    async def find_by_normalized_name(self, normalized_name: str) -> list[Material]:
        """All materials whose normalized name matches exactly."""

    @abstractmethod
    async def update_material(self, material: Material) -> Material:
        """Update an existing material."""

    @abstractmethod
    async def delete_material(self, material_id: str) -> bool:
        """Delete a material. Returns False if it did not exist."""
