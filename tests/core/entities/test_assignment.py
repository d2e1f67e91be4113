"""Tests for ProjectMaterialAssignment entity."""

from src.core.entities.assignment import (
    ACTIVE_STATUSES,
    AssignmentStatus,
    ProjectMaterialAssignment,
)


def _assignment(**kwargs) -> ProjectMaterialAssignment:
    defaults = {
        "project_id": "PRJ-1",
        "material_catalog_id": "MAT-001",
        "quantity": 20,
        "unit_cost": 5.0,
        "total_cost": 100.0,
    }
    defaults.update(kwargs)
    return ProjectMaterialAssignment(**defaults)


class TestProjectMaterialAssignment:
    def test_defaults(self):
        assignment = _assignment()
        assert assignment.status == AssignmentStatus.REQUIRED
        assert assignment.purpose == "general"
        assert assignment.is_active

    def test_active_statuses(self):
        assert ACTIVE_STATUSES == {AssignmentStatus.REQUIRED, AssignmentStatus.ORDERED}

    def test_set_quantity_updates_total_cost(self):
        assignment = _assignment()
        assignment.set_quantity(8)
        assert assignment.quantity == 8
        assert assignment.total_cost == 40.0

    def test_transition_to_ordered_stamps_ordered_at(self):
        assignment = _assignment()
        assignment.transition(AssignmentStatus.ORDERED)
        assert assignment.status == AssignmentStatus.ORDERED
        assert assignment.ordered_at is not None
        assert assignment.is_active

    def test_transition_to_installed_stamps_installed_at(self):
        assignment = _assignment()
        assignment.transition(AssignmentStatus.INSTALLED)
        assert assignment.installed_at is not None
        assert not assignment.is_active

    def test_cancelled_is_not_active(self):
        assignment = _assignment(status=AssignmentStatus.CANCELLED)
        assert not assignment.is_active
