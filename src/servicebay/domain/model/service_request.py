"""ServiceRequest aggregate — the lifecycle of one vehicle visit.

Status only ever moves forward through an explicit transition table.
Once the vehicle has been dispatched the request is closed and refuses
every further mutation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum

from servicebay.domain.exceptions import (
    InvalidTransitionError,
    RequestClosedError,
    ValidationError,
)


class ServiceStatus(Enum):
    RECEIVED = "Received"
    DIAGNOSIS = "Diagnosis"
    REPAIR = "Repair"
    COMPLETED = "Completed"

    @staticmethod
    def parse(raw: str) -> ServiceStatus:
        key = raw.strip().lower()
        for status in ServiceStatus:
            if key in (status.value.lower(), status.name.lower()):
                return status
        raise ValidationError(
            f"Unknown status {raw!r} "
            f"(expected one of: {', '.join(s.value for s in ServiceStatus)})"
        )


# Forward-only; stages may be skipped but never revisited.
TRANSITIONS: dict[ServiceStatus, frozenset[ServiceStatus]] = {
    ServiceStatus.RECEIVED: frozenset(
        {ServiceStatus.DIAGNOSIS, ServiceStatus.REPAIR, ServiceStatus.COMPLETED}
    ),
    ServiceStatus.DIAGNOSIS: frozenset({ServiceStatus.REPAIR, ServiceStatus.COMPLETED}),
    ServiceStatus.REPAIR: frozenset({ServiceStatus.COMPLETED}),
    ServiceStatus.COMPLETED: frozenset(),
}

# Statuses in which materials and labor may be booked against the request.
ACTIVE_STATUSES = frozenset(
    {ServiceStatus.DIAGNOSIS, ServiceStatus.REPAIR, ServiceStatus.COMPLETED}
)


def next_status(current: ServiceStatus, target: ServiceStatus) -> ServiceStatus:
    """Return *target* if the table allows ``current -> target``, else raise."""
    if target not in TRANSITIONS[current]:
        raise InvalidTransitionError(
            f"Cannot move service request from {current.value} to {target.value}"
        )
    return target


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ServiceRequest:
    """Aggregate root for a service visit.

    Use ``ServiceRequest.book()`` for new requests.  ``version`` is the
    optimistic-concurrency counter maintained by the repository.
    """

    id: int | None
    vehicle_id: int
    service_type: str
    description: str | None = None
    delivery_date: date | None = None
    advisor_id: int | None = None
    status: ServiceStatus = ServiceStatus.RECEIVED
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)
    dispatched_at: datetime | None = None
    version: int = 0

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def book(
        vehicle_id: int,
        service_type: str,
        description: str | None = None,
        delivery_date: date | None = None,
    ) -> ServiceRequest:
        if not service_type or not service_type.strip():
            raise ValidationError("Service type is required")
        return ServiceRequest(
            id=None,
            vehicle_id=vehicle_id,
            service_type=service_type.strip(),
            description=description.strip() if description else None,
            delivery_date=delivery_date,
        )

    # --- Queries --------------------------------------------------------------

    @property
    def reference(self) -> str:
        return f"REQ-{self.id}"

    @property
    def is_dispatched(self) -> bool:
        return self.dispatched_at is not None

    @property
    def is_active(self) -> bool:
        return not self.is_dispatched and self.status in ACTIVE_STATUSES

    def ensure_open(self) -> None:
        if self.is_dispatched:
            raise RequestClosedError(
                f"Service request {self.reference} has been dispatched and is closed"
            )

    def ensure_active(self) -> None:
        """Materials and labor may only be booked while work is under way."""
        self.ensure_open()
        if self.status not in ACTIVE_STATUSES:
            raise InvalidTransitionError(
                f"Service request {self.reference} is {self.status.value}; "
                f"assign an advisor before booking work"
            )

    # --- State transitions ----------------------------------------------------

    def assign_advisor(self, advisor_id: int) -> bool:
        """Assign the first advisor and move Received -> Diagnosis.

        Returns False (and changes nothing) if an advisor is already
        assigned; re-assignment goes through ``reassign_advisor``.
        """
        self.ensure_open()
        if self.advisor_id is not None:
            return False
        if self.status != ServiceStatus.RECEIVED:
            raise InvalidTransitionError(
                f"Cannot assign an advisor — current status is {self.status.value}, "
                f"expected Received"
            )
        self.advisor_id = advisor_id
        self.status = next_status(self.status, ServiceStatus.DIAGNOSIS)
        self._touch()
        return True

    def reassign_advisor(self, advisor_id: int) -> int | None:
        """Hand the request to another advisor; returns the previous one."""
        self.ensure_open()
        if self.advisor_id == advisor_id:
            raise ValidationError(
                f"Advisor #{advisor_id} is already assigned to {self.reference}"
            )
        previous = self.advisor_id
        self.advisor_id = advisor_id
        self._touch()
        return previous

    def transition_to(self, target: ServiceStatus) -> ServiceStatus:
        """Move to *target*; returns the status we left."""
        self.ensure_open()
        previous = self.status
        self.status = next_status(previous, target)
        self._touch()
        return previous

    def mark_dispatched(self) -> None:
        self.ensure_open()
        if self.status != ServiceStatus.COMPLETED:
            raise InvalidTransitionError(
                f"Cannot dispatch {self.reference} — current status is "
                f"{self.status.value}, expected Completed"
            )
        self.dispatched_at = _now()
        self._touch()

    def _touch(self) -> None:
        self.updated_at = _now()
