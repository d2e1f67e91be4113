"""
Reservation service.

Owns the ProjectMaterialAssignment lifecycle. Every quantity effect goes
through the StockLedger; the assignment row is written only after the
ledger call succeeded, and a failed assignment write hands the ledger
effect back.

    REQUIRED --edit--> REQUIRED
    REQUIRED --order--> ORDERED
    REQUIRED/ORDERED --install--> INSTALLED   (consume)
    REQUIRED --unreserve--> CANCELLED         (release)
"""

import math
from dataclasses import dataclass

from src.config import get_logger
from src.core.entities.assignment import (
    ACTIVE_STATUSES,
    AssignmentStatus,
    ProjectMaterialAssignment,
)
from src.core.entities.stock import StockReference
from src.core.exceptions import (
    AssignmentNotFoundError,
    DuplicateAssignmentError,
    InvalidQuantityError,
    InvalidStateError,
)
from src.core.interfaces.assignment_store import IAssignmentStore
from src.core.services.row_locks import assignment_key, assignment_slot_key
from src.core.services.stock_ledger import StockLedger

logger = get_logger(__name__)


@dataclass
class InstallOutcome:
    """Result of marking an assignment installed."""

    assignment: ProjectMaterialAssignment
    consumed: float
    returned_to_stock: float = 0.0
    remainder_assignment: ProjectMaterialAssignment | None = None


class ReservationService:
    """Project material assignments backed by stock reservations."""

    def __init__(self, ledger: StockLedger, assignment_store: IAssignmentStore) -> None:
        self._ledger = ledger
        self._assignment_store = assignment_store
        # Shared with the ledger so slot/assignment locks and material locks
        # live in one registry.
        self._locks = ledger.locks

    async def get_assignment(self, assignment_id: int) -> ProjectMaterialAssignment:
        assignment = await self._assignment_store.get_assignment(assignment_id)
        if assignment is None:
            raise AssignmentNotFoundError(assignment_id)
        return assignment

    async def list_project_assignments(self, project_id: str) -> list[ProjectMaterialAssignment]:
        return await self._assignment_store.list_by_project(project_id)

    async def list_material_assignments(
        self,
        material_id: str,
        statuses: list[AssignmentStatus] | None = None,
    ) -> list[ProjectMaterialAssignment]:
        return await self._assignment_store.list_by_material(material_id, statuses)

    async def assign_to_project(
        self,
        project_id: str,
        material_id: str,
        quantity: float,
        purpose: str = "general",
        notes: str | None = None,
    ) -> ProjectMaterialAssignment:
        """
        Reserve stock and record a REQUIRED assignment.

        Raises:
            InvalidQuantityError: quantity is not positive
            DuplicateAssignmentError: an active assignment already exists for
                the same project, material and purpose
            InsufficientStockError: not enough available stock
        """
        if not math.isfinite(quantity) or quantity <= 0:
            raise InvalidQuantityError(quantity, "assign")

        async with self._locks.hold(assignment_slot_key(project_id, material_id, purpose)):
            existing = await self._assignment_store.find_active(project_id, material_id, purpose)
            if existing is not None:
                raise DuplicateAssignmentError(existing.id, project_id, material_id, purpose)

            result = await self._ledger.reserve(
                material_id,
                quantity,
                reference=StockReference.project(project_id),
                notes=f"Reserved for project {project_id} ({purpose})",
            )

            assignment = ProjectMaterialAssignment(
                project_id=project_id,
                material_catalog_id=material_id,
                purpose=purpose,
                quantity=quantity,
                unit_cost=result.stock.unit_cost,
                total_cost=quantity * result.stock.unit_cost,
                notes=notes,
            )
            try:
                assignment = await self._assignment_store.create_assignment(assignment)
            except Exception:
                logger.error(
                    "assignment_create_failed",
                    project_id=project_id,
                    material_id=material_id,
                    quantity=quantity,
                )
                await self._ledger.release(
                    material_id,
                    quantity,
                    reference=StockReference.project(project_id),
                    notes="Reservation rolled back: assignment not created",
                )
                raise

        logger.info(
            "material_assigned",
            assignment_id=assignment.id,
            project_id=project_id,
            material_id=material_id,
            quantity=quantity,
        )
        return assignment

    async def edit_assignment_quantity(
        self, assignment_id: int, new_quantity: float
    ) -> ProjectMaterialAssignment:
        """
        Change the quantity of a REQUIRED assignment, reserving or releasing
        the difference.

        The assignment keeps its old quantity if the ledger rejects the delta.
        """
        async with self._locks.hold(assignment_key(assignment_id)):
            assignment = await self.get_assignment(assignment_id)
            if assignment.status != AssignmentStatus.REQUIRED:
                raise InvalidStateError(assignment_id, assignment.status.value, "edit quantity of")
            if not math.isfinite(new_quantity) or new_quantity <= 0:
                raise InvalidQuantityError(new_quantity, "edit assignment")

            delta = new_quantity - assignment.quantity
            if delta == 0:
                return assignment

            reference = StockReference.project(assignment.project_id)
            material_id = assignment.material_catalog_id
            if delta > 0:
                await self._ledger.reserve(
                    material_id, delta, reference=reference,
                    notes=f"Assignment {assignment_id} increased",
                )
            else:
                await self._ledger.release(
                    material_id, -delta, reference=reference,
                    notes=f"Assignment {assignment_id} decreased",
                )

            old_quantity = assignment.quantity
            assignment.set_quantity(new_quantity)
            try:
                assignment = await self._assignment_store.update_assignment(assignment)
            except Exception:
                logger.error("assignment_update_failed", assignment_id=assignment_id)
                if delta > 0:
                    await self._ledger.release(
                        material_id, delta, reference=reference,
                        notes=f"Assignment {assignment_id} increase rolled back",
                    )
                else:
                    await self._ledger.reserve(
                        material_id, -delta, reference=reference,
                        notes=f"Assignment {assignment_id} decrease rolled back",
                    )
                raise

        logger.info(
            "assignment_quantity_changed",
            assignment_id=assignment_id,
            old_quantity=old_quantity,
            new_quantity=new_quantity,
        )
        return assignment

    async def unreserve(self, assignment_id: int) -> ProjectMaterialAssignment:
        """Release the full reservation and cancel a REQUIRED assignment."""
        async with self._locks.hold(assignment_key(assignment_id)):
            assignment = await self.get_assignment(assignment_id)
            if assignment.status != AssignmentStatus.REQUIRED:
                raise InvalidStateError(assignment_id, assignment.status.value, "unreserve")

            reference = StockReference.project(assignment.project_id)
            material_id = assignment.material_catalog_id
            await self._ledger.release(
                material_id,
                assignment.quantity,
                reference=reference,
                notes=f"Assignment {assignment_id} unreserved",
            )
            assignment.transition(AssignmentStatus.CANCELLED)
            try:
                assignment = await self._assignment_store.update_assignment(assignment)
            except Exception:
                logger.error("assignment_update_failed", assignment_id=assignment_id)
                await self._ledger.reserve(
                    material_id, assignment.quantity, reference=reference,
                    notes=f"Assignment {assignment_id} unreserve rolled back",
                )
                raise

        logger.info(
            "assignment_unreserved",
            assignment_id=assignment_id,
            quantity=assignment.quantity,
        )
        return assignment

    async def mark_ordered(self, assignment_id: int) -> ProjectMaterialAssignment:
        async with self._locks.hold(assignment_key(assignment_id)):
            assignment = await self.get_assignment(assignment_id)
            if assignment.status != AssignmentStatus.REQUIRED:
                raise InvalidStateError(assignment_id, assignment.status.value, "order")
            assignment.transition(AssignmentStatus.ORDERED)
            assignment = await self._assignment_store.update_assignment(assignment)

        logger.info("assignment_ordered", assignment_id=assignment_id)
        return assignment

    async def mark_installed(
        self,
        assignment_id: int,
        installed_quantity: float | None = None,
        return_remainder: bool = True,
    ) -> InstallOutcome:
        """
        Consume reserved stock for an installed assignment.

        When less than the assigned quantity is installed the remainder is
        either released back to stock (``return_remainder``) or kept
        reserved under a new REQUIRED assignment.

        The (project, material, purpose) slot stays locked until the
        remainder assignment exists, so no other assignment can claim the
        slot in between.

        Raises:
            InvalidStateError: assignment is INSTALLED or CANCELLED
            InvalidQuantityError: installed quantity not in (0, assigned]
            InsufficientReservationError: propagated from the ledger
        """
        # Project, material and purpose never change, so the slot key can be
        # derived before any lock is held.
        current = await self.get_assignment(assignment_id)
        slot = assignment_slot_key(
            current.project_id, current.material_catalog_id, current.purpose
        )

        async with self._locks.hold(slot, assignment_key(assignment_id)):
            assignment = await self.get_assignment(assignment_id)
            if assignment.status not in ACTIVE_STATUSES:
                raise InvalidStateError(assignment_id, assignment.status.value, "install")

            assigned = assignment.quantity
            installed = assigned if installed_quantity is None else installed_quantity
            if not math.isfinite(installed) or installed <= 0:
                raise InvalidQuantityError(installed, "install")
            if installed > assigned:
                raise InvalidQuantityError(
                    installed, "install", f"at most the assigned {assigned:g}"
                )

            reference = StockReference.project(assignment.project_id)
            material_id = assignment.material_catalog_id
            await self._ledger.consume(
                material_id, installed, reference=reference,
                notes=f"Assignment {assignment_id} installed",
            )

            assignment.set_quantity(installed)
            assignment.transition(AssignmentStatus.INSTALLED)
            try:
                assignment = await self._assignment_store.update_assignment(assignment)
            except Exception:
                logger.error("assignment_update_failed", assignment_id=assignment_id)
                # Consume kept the unit cost, so receiving at that cost
                # restores current stock without moving the average.
                await self._ledger.receive(
                    material_id, installed, reference=reference,
                    notes=f"Assignment {assignment_id} install rolled back",
                )
                await self._ledger.reserve(
                    material_id, installed, reference=reference,
                    notes=f"Assignment {assignment_id} install rolled back",
                )
                raise
            outcome = InstallOutcome(assignment=assignment, consumed=installed)

            remainder = assigned - installed
            if remainder > 0 and return_remainder:
                await self._ledger.release(
                    material_id, remainder, reference=reference,
                    notes=f"Assignment {assignment_id} remainder returned",
                )
                outcome.returned_to_stock = remainder
            elif remainder > 0:
                try:
                    outcome.remainder_assignment = await self._assignment_store.create_assignment(
                        ProjectMaterialAssignment(
                            project_id=assignment.project_id,
                            material_catalog_id=material_id,
                            purpose=assignment.purpose,
                            quantity=remainder,
                            unit_cost=assignment.unit_cost,
                            total_cost=remainder * assignment.unit_cost,
                            notes=f"Remainder of assignment {assignment_id}",
                        )
                    )
                except Exception:
                    logger.error(
                        "assignment_create_failed",
                        project_id=assignment.project_id,
                        material_id=material_id,
                        quantity=remainder,
                    )
                    await self._ledger.release(
                        material_id, remainder, reference=reference,
                        notes=f"Assignment {assignment_id} remainder released: not re-assigned",
                    )
                    raise

        logger.info(
            "assignment_installed",
            assignment_id=assignment_id,
            installed=installed,
            remainder=remainder,
            returned_to_stock=outcome.returned_to_stock,
        )
        return outcome
