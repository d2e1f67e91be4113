"""
Dispatch intake service.

Turns delivery confirmations into ledger receipts. Each line is resolved and
booked on its own; a failing line is reported and the rest continue. The
service never writes stock fields itself, it only calls StockLedger.receive.
"""

from dataclasses import dataclass, field
from enum import Enum

from src.config import get_logger
from src.core.entities.dispatch import DeliveryConfirmation, DeliveryLine
from src.core.entities.stock import ReferenceType, StockReference, TransactionType
from src.core.exceptions import LedgerError
from src.core.interfaces.stock_store import IStockStore
from src.core.services.material_resolver import (
    Ambiguous,
    Matched,
    MaterialResolver,
    NotFound,
)
from src.core.services.stock_ledger import StockLedger

logger = get_logger(__name__)

DEFAULT_DELIVERED_STATUSES = ("arrived", "inspected", "allocated")


class LineOutcome(str, Enum):
    RECEIVED = "received"
    SKIPPED = "skipped"
    UNRESOLVED = "unresolved"
    FAILED = "failed"


@dataclass
class LineResult:
    """What happened to one delivery line."""

    line_index: int
    material_ref: str
    outcome: LineOutcome
    quantity: float
    material_id: str | None = None
    transaction_id: int | None = None
    possible_duplicate: bool = False
    candidates: list[str] = field(default_factory=list)
    reason: str | None = None


@dataclass
class IntakeResult:
    """Per-line outcomes of one delivery confirmation."""

    dispatch_id: str
    lines: list[LineResult] = field(default_factory=list)

    def _with(self, outcome: LineOutcome) -> list[LineResult]:
        return [line for line in self.lines if line.outcome == outcome]

    @property
    def received(self) -> list[LineResult]:
        return self._with(LineOutcome.RECEIVED)

    @property
    def skipped(self) -> list[LineResult]:
        return self._with(LineOutcome.SKIPPED)

    @property
    def unresolved(self) -> list[LineResult]:
        return self._with(LineOutcome.UNRESOLVED)

    @property
    def failed(self) -> list[LineResult]:
        return self._with(LineOutcome.FAILED)

    @property
    def possible_duplicates(self) -> list[LineResult]:
        return [line for line in self.lines if line.possible_duplicate]


class DispatchIntake:
    """Applies delivered dispatch lines to stock through the ledger."""

    def __init__(
        self,
        ledger: StockLedger,
        resolver: MaterialResolver,
        stock_store: IStockStore,
        delivered_statuses: list[str] | tuple[str, ...] = DEFAULT_DELIVERED_STATUSES,
    ) -> None:
        self._ledger = ledger
        self._resolver = resolver
        self._stock_store = stock_store
        self._delivered = {s.lower() for s in delivered_statuses}

    async def on_delivery_confirmed(self, confirmation: DeliveryConfirmation) -> IntakeResult:
        """
        Book every delivered line of a dispatch note as an IN receipt.

        Returns:
            IntakeResult listing received, skipped, unresolved and failed lines
        """
        result = IntakeResult(dispatch_id=confirmation.dispatch_id)
        logger.info(
            "delivery_intake_started",
            dispatch_id=confirmation.dispatch_id,
            dispatch_number=confirmation.dispatch_number,
            lines=len(confirmation.lines),
        )

        # Receipts booked by this call, per stock row; earlier ones flag duplicates.
        booked: dict[int, int] = {}
        for index, line in enumerate(confirmation.lines):
            result.lines.append(await self._process_line(confirmation, index, line, booked))

        logger.info(
            "delivery_intake_completed",
            dispatch_id=confirmation.dispatch_id,
            received=len(result.received),
            skipped=len(result.skipped),
            unresolved=len(result.unresolved),
            failed=len(result.failed),
            possible_duplicates=len(result.possible_duplicates),
        )
        return result

    async def _process_line(
        self,
        confirmation: DeliveryConfirmation,
        index: int,
        line: DeliveryLine,
        booked: dict[int, int],
    ) -> LineResult:
        base = {
            "line_index": index,
            "material_ref": line.material_ref,
            "quantity": line.delivered_quantity,
        }

        if line.status.lower() not in self._delivered:
            return LineResult(
                outcome=LineOutcome.SKIPPED,
                reason=f"status '{line.status}' is not a delivered status",
                **base,
            )

        resolution = await self._resolver.resolve(line.material_ref)
        if isinstance(resolution, Ambiguous):
            return LineResult(
                outcome=LineOutcome.UNRESOLVED,
                candidates=resolution.candidates,
                reason="reference matches several catalog materials",
                **base,
            )
        if isinstance(resolution, NotFound):
            logger.warning(
                "delivery_line_unresolved",
                dispatch_id=confirmation.dispatch_id,
                material_ref=line.material_ref,
                reason=resolution.reason,
            )
            return LineResult(outcome=LineOutcome.UNRESOLVED, reason=resolution.reason, **base)

        duplicate = await self._already_received(
            resolution, confirmation.dispatch_id, booked.get(resolution.stock_id, 0)
        )
        if duplicate:
            # Known gap: booked anyway, only flagged.
            logger.warning(
                "possible_duplicate_receipt",
                dispatch_id=confirmation.dispatch_id,
                material_id=resolution.material_id,
            )

        try:
            ledger_result = await self._ledger.receive(
                resolution.material_id,
                line.delivered_quantity,
                unit_cost=line.unit_cost,
                reference=StockReference.dispatch(confirmation.dispatch_id),
                notes=line.notes or self._receipt_note(confirmation),
            )
        except LedgerError as e:
            logger.warning(
                "delivery_line_failed",
                dispatch_id=confirmation.dispatch_id,
                material_id=resolution.material_id,
                error_code=e.code,
            )
            return LineResult(
                outcome=LineOutcome.FAILED,
                material_id=resolution.material_id,
                possible_duplicate=duplicate,
                reason=e.message,
                **base,
            )

        booked[resolution.stock_id] = booked.get(resolution.stock_id, 0) + 1
        return LineResult(
            outcome=LineOutcome.RECEIVED,
            material_id=resolution.material_id,
            transaction_id=ledger_result.transaction.id,
            possible_duplicate=duplicate,
            **base,
        )

    async def _already_received(
        self, resolution: Matched, dispatch_id: str, booked_in_this_call: int
    ) -> bool:
        existing = await self._stock_store.find_transactions(
            resolution.stock_id, TransactionType.IN, ReferenceType.DISPATCH, dispatch_id
        )
        return len(existing) > booked_in_this_call

    @staticmethod
    def _receipt_note(confirmation: DeliveryConfirmation) -> str:
        label = confirmation.dispatch_number or confirmation.dispatch_id
        return f"Received from dispatch {label}"
