"""
Dispatch delivery endpoints.
"""

from fastapi import APIRouter, Depends

from src.api.dependencies import get_intake
from src.application.dto.requests import DeliveryConfirmationRequest
from src.application.dto.responses import DeliveryIntakeResponse, DeliveryLineResultResponse
from src.core.entities.dispatch import DeliveryConfirmation, DeliveryLine
from src.core.services import DispatchIntake

router = APIRouter(prefix="/api/dispatch", tags=["dispatch"])


@router.post("/deliveries", response_model=DeliveryIntakeResponse)
async def confirm_delivery(
    request: DeliveryConfirmationRequest,
    intake: DispatchIntake = Depends(get_intake),
) -> DeliveryIntakeResponse:
    """
    Book the delivered lines of a dispatch note into stock.

    Always 200: failed or unresolved lines are reported per line.
    """
    confirmation = DeliveryConfirmation(
        dispatch_id=request.dispatch_id,
        dispatch_number=request.dispatch_number,
        delivered_at=request.delivered_at,
        lines=[
            DeliveryLine(
                material_ref=line.material_ref,
                delivered_quantity=line.delivered_quantity,
                status=line.status,
                unit_cost=line.unit_cost,
                notes=line.notes,
            )
            for line in request.lines
        ],
    )
    result = await intake.on_delivery_confirmed(confirmation)

    return DeliveryIntakeResponse(
        dispatch_id=result.dispatch_id,
        lines=[
            DeliveryLineResultResponse(
                line_index=line.line_index,
                material_ref=line.material_ref,
                outcome=line.outcome.value,
                quantity=line.quantity,
                material_id=line.material_id,
                transaction_id=line.transaction_id,
                possible_duplicate=line.possible_duplicate,
                candidates=line.candidates,
                reason=line.reason,
            )
            for line in result.lines
        ],
        received_count=len(result.received),
        skipped_count=len(result.skipped),
        unresolved_count=len(result.unresolved),
        failed_count=len(result.failed),
        possible_duplicate_count=len(result.possible_duplicates),
    )
