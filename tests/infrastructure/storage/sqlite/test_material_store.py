"""Tests for SQLiteMaterialStore."""

import pytest

from src.core.entities.material import Material, MaterialCategory, MaterialType
from src.core.entities.stock import MaterialStock
from src.core.exceptions import CatalogInUseError


class TestSQLiteMaterialStore:
    async def test_create_generates_id(self, material_store):
        material = await material_store.create_material(
            Material(name="Steel  Beam", grade="S235JR", cost_per_unit=12.5)
        )

        assert material.id
        fetched = await material_store.get_material(material.id)
        assert fetched.name == "Steel  Beam"
        assert fetched.normalized_name == "steel beam"
        assert fetched.type == MaterialType.STEEL
        assert fetched.cost_per_unit == 12.5
        assert fetched.grade == "S235JR"

    async def test_get_missing(self, material_store):
        assert await material_store.get_material("missing") is None

    async def test_list_filters(self, material_store):
        await material_store.create_material(Material(name="Beam", type=MaterialType.STEEL))
        await material_store.create_material(
            Material(name="Pipe", type=MaterialType.COPPER, category=MaterialCategory.PIPE)
        )
        await material_store.create_material(
            Material(name="Sheet", type=MaterialType.ALUMINUM, description="brushed beam cover")
        )

        assert [m.name for m in await material_store.list_materials()] == ["Beam", "Pipe", "Sheet"]
        assert [m.name for m in await material_store.list_materials(material_type="copper")] == [
            "Pipe"
        ]
        assert [m.name for m in await material_store.list_materials(category="pipe")] == ["Pipe"]
        assert [m.name for m in await material_store.list_materials(search="BEAM")] == [
            "Beam",
            "Sheet",
        ]
        assert len(await material_store.list_materials(limit=1, offset=1)) == 1

    async def test_find_by_normalized_name(self, material_store):
        first = await material_store.create_material(Material(name="Angle Bar"))
        second = await material_store.create_material(Material(name="ANGLE  bar"))

        matches = await material_store.find_by_normalized_name("angle bar")

        assert {m.id for m in matches} == {first.id, second.id}

    async def test_update_keeps_type_and_cost(self, material_store):
        material = await material_store.create_material(
            Material(name="Beam", type=MaterialType.STEEL, cost_per_unit=10.0)
        )
        material.apply_update({"name": "Beam HEA", "location": "Bay 3"})
        # Not writable through the store.
        material.cost_per_unit = 99.0

        await material_store.update_material(material)

        fetched = await material_store.get_material(material.id)
        assert fetched.name == "Beam HEA"
        assert fetched.normalized_name == "beam hea"
        assert fetched.location == "Bay 3"
        assert fetched.cost_per_unit == 10.0

    async def test_delete(self, material_store):
        material = await material_store.create_material(Material(name="Beam"))

        assert await material_store.delete_material(material.id) is True
        assert await material_store.delete_material(material.id) is False
        assert await material_store.get_material(material.id) is None

    async def test_delete_referenced_by_stock_row(self, material_store, stock_store):
        material = await material_store.create_material(Material(name="Beam"))
        await stock_store.create_stock(MaterialStock(material_id=material.id))

        with pytest.raises(CatalogInUseError):
            await material_store.delete_material(material.id)

        assert await material_store.get_material(material.id) is not None
