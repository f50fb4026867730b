"""LaborEntry — the per-request audit trail of work, charges and status moves.

Entries are appended and never edited.  The only mutation allowed is
marking a labor charge as superseded when the advisor replaces the
whole labor breakdown.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from servicebay.domain.exceptions import InvalidAmountError, ValidationError
from servicebay.domain.model.service_request import ServiceStatus
from servicebay.domain.model.value_objects import Money, to_decimal

MAX_DESCRIPTION_LENGTH = 250


class LaborEntryKind(Enum):
    WORK_NOTE = "WorkNote"
    LABOR_CHARGE = "LaborCharge"
    STATUS_CHANGE = "StatusChange"


@dataclass(frozen=True)
class LaborChargeSpec:
    """Input: one line of billable work as entered by the advisor."""

    description: str
    hours: Decimal
    rate_per_hour: Decimal

    @staticmethod
    def of(
        description: str,
        hours: str | int | Decimal,
        rate_per_hour: str | int | Decimal,
    ) -> LaborChargeSpec:
        if not description or not description.strip():
            raise ValidationError("Labor description is required")
        parsed_hours = to_decimal(hours, "labor hours")
        parsed_rate = to_decimal(rate_per_hour, "hourly rate")
        if parsed_hours <= 0:
            raise InvalidAmountError(f"Labor hours must be positive, got {parsed_hours}")
        if parsed_rate <= 0:
            raise InvalidAmountError(f"Hourly rate must be positive, got {parsed_rate}")
        return LaborChargeSpec(description.strip(), parsed_hours, parsed_rate)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _clip(text: str) -> str:
    text = text.strip()
    if len(text) > MAX_DESCRIPTION_LENGTH:
        return text[: MAX_DESCRIPTION_LENGTH - 3] + "..."
    return text


@dataclass
class LaborEntry:
    id: int | None
    request_id: int
    kind: LaborEntryKind
    description: str
    advisor_id: int | None = None
    hours: Decimal | None = None
    rate_per_hour: Decimal | None = None
    labor_minutes: int = 0
    labor_cost: Money = field(default_factory=Money.zero)
    old_status: ServiceStatus | None = None
    new_status: ServiceStatus | None = None
    created_at: datetime = field(default_factory=_now)
    superseded_at: datetime | None = None

    # --- Factories ------------------------------------------------------------

    @staticmethod
    def labor_charge(
        request_id: int,
        spec: LaborChargeSpec,
        advisor_id: int | None = None,
    ) -> LaborEntry:
        minutes = (spec.hours * 60).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        return LaborEntry(
            id=None,
            request_id=request_id,
            kind=LaborEntryKind.LABOR_CHARGE,
            description=_clip(spec.description),
            advisor_id=advisor_id,
            hours=spec.hours,
            rate_per_hour=spec.rate_per_hour,
            labor_minutes=int(minutes),
            labor_cost=Money(spec.hours * spec.rate_per_hour),
        )

    @staticmethod
    def work_note(request_id: int, text: str, advisor_id: int | None = None) -> LaborEntry:
        if not text or not text.strip():
            raise ValidationError("Note text is required")
        return LaborEntry(
            id=None,
            request_id=request_id,
            kind=LaborEntryKind.WORK_NOTE,
            description=_clip(text),
            advisor_id=advisor_id,
        )

    @staticmethod
    def status_change(
        request_id: int,
        old_status: ServiceStatus,
        new_status: ServiceStatus,
        advisor_id: int | None = None,
        note: str | None = None,
    ) -> LaborEntry:
        summary = f"Status: {old_status.value} -> {new_status.value}"
        if note and note.strip():
            summary += f": {note.strip()}"
        return LaborEntry(
            id=None,
            request_id=request_id,
            kind=LaborEntryKind.STATUS_CHANGE,
            description=_clip(summary),
            advisor_id=advisor_id,
            old_status=old_status,
            new_status=new_status,
        )

    @staticmethod
    def dispatch_record(request_id: int, advisor_id: int | None = None) -> LaborEntry:
        return LaborEntry(
            id=None,
            request_id=request_id,
            kind=LaborEntryKind.STATUS_CHANGE,
            description="Vehicle dispatched to customer",
            advisor_id=advisor_id,
            old_status=ServiceStatus.COMPLETED,
            new_status=ServiceStatus.COMPLETED,
        )

    # --- Queries --------------------------------------------------------------

    @property
    def is_superseded(self) -> bool:
        return self.superseded_at is not None

    @property
    def is_billable(self) -> bool:
        return self.kind == LaborEntryKind.LABOR_CHARGE and not self.is_superseded

    def supersede(self, at: datetime | None = None) -> None:
        if self.kind != LaborEntryKind.LABOR_CHARGE:
            raise ValidationError("Only labor charges can be superseded")
        if self.superseded_at is None:
            self.superseded_at = at or _now()
