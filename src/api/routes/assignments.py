"""
Project material assignment endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from src.api.dependencies import get_reservations
from src.application.dto.requests import (
    CreateAssignmentRequest,
    InstallAssignmentRequest,
    UpdateAssignmentRequest,
)
from src.application.dto.responses import (
    AssignmentListResponse,
    AssignmentResponse,
    ErrorResponse,
    InstallAssignmentResponse,
)
from src.core.services import ReservationService

router = APIRouter(prefix="/api/assignments", tags=["assignments"])

_ERRORS = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
}


@router.post(
    "",
    response_model=AssignmentResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_ERRORS,
)
async def assign_material(
    request: CreateAssignmentRequest,
    service: ReservationService = Depends(get_reservations),
) -> AssignmentResponse:
    """Reserve stock for a project and record a REQUIRED assignment."""
    assignment = await service.assign_to_project(
        request.project_id,
        request.material_id,
        request.quantity,
        purpose=request.purpose,
        notes=request.notes,
    )
    return AssignmentResponse.from_entity(assignment)


@router.get("", response_model=AssignmentListResponse)
async def list_assignments(
    project_id: str | None = Query(default=None),
    material_id: str | None = Query(default=None),
    service: ReservationService = Depends(get_reservations),
) -> AssignmentListResponse:
    """List assignments of a project, of a material, or of both."""
    if project_id:
        assignments = await service.list_project_assignments(project_id)
        if material_id:
            assignments = [a for a in assignments if a.material_catalog_id == material_id]
    elif material_id:
        assignments = await service.list_material_assignments(material_id)
    else:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="project_id or material_id is required",
        )
    return AssignmentListResponse(
        items=[AssignmentResponse.from_entity(a) for a in assignments],
        total=len(assignments),
    )


@router.get(
    "/{assignment_id}",
    response_model=AssignmentResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_assignment(
    assignment_id: int,
    service: ReservationService = Depends(get_reservations),
) -> AssignmentResponse:
    return AssignmentResponse.from_entity(await service.get_assignment(assignment_id))


@router.patch(
    "/{assignment_id}",
    response_model=AssignmentResponse,
    responses=_ERRORS,
)
async def edit_assignment(
    assignment_id: int,
    request: UpdateAssignmentRequest,
    service: ReservationService = Depends(get_reservations),
) -> AssignmentResponse:
    """Change the quantity of a REQUIRED assignment."""
    assignment = await service.edit_assignment_quantity(assignment_id, request.quantity)
    return AssignmentResponse.from_entity(assignment)


@router.post(
    "/{assignment_id}/unreserve",
    response_model=AssignmentResponse,
    responses=_ERRORS,
)
async def unreserve_assignment(
    assignment_id: int,
    service: ReservationService = Depends(get_reservations),
) -> AssignmentResponse:
    """Release the reservation and cancel the assignment."""
    return AssignmentResponse.from_entity(await service.unreserve(assignment_id))


@router.post(
    "/{assignment_id}/order",
    response_model=AssignmentResponse,
    responses=_ERRORS,
)
async def order_assignment(
    assignment_id: int,
    service: ReservationService = Depends(get_reservations),
) -> AssignmentResponse:
    return AssignmentResponse.from_entity(await service.mark_ordered(assignment_id))


@router.post(
    "/{assignment_id}/install",
    response_model=InstallAssignmentResponse,
    responses=_ERRORS,
)
async def install_assignment(
    assignment_id: int,
    request: InstallAssignmentRequest | None = None,
    service: ReservationService = Depends(get_reservations),
) -> InstallAssignmentResponse:
    """Consume the reserved quantity; handle any uninstalled remainder."""
    request = request or InstallAssignmentRequest()
    outcome = await service.mark_installed(
        assignment_id,
        installed_quantity=request.installed_quantity,
        return_remainder=request.return_remainder,
    )
    return InstallAssignmentResponse(
        assignment=AssignmentResponse.from_entity(outcome.assignment),
        consumed=outcome.consumed,
        returned_to_stock=outcome.returned_to_stock,
        remainder_assignment=(
            AssignmentResponse.from_entity(outcome.remainder_assignment)
            if outcome.remainder_assignment
            else None
        ),
    )
