"""Application service: Transition Status use case.

Moves a request forward through the status table and records the move.
The customer notification is best effort: a failing notifier is logged
and never undoes or fails the transition.
"""

from __future__ import annotations

import logging

from servicebay.application.common import load_vehicle_and_customer
from servicebay.application.dto import TransitionResultDTO
from servicebay.application.mapping import to_audit_entry
from servicebay.domain.model.service_request import ServiceRequest, ServiceStatus
from servicebay.domain.repository.labor_repository import LaborRepository
from servicebay.domain.repository.party_repository import PartyRepository
from servicebay.domain.repository.service_request_repository import (
    ServiceRequestRepository,
)
from servicebay.domain.service.labor_ledger import LaborLedger
from servicebay.domain.service.notifications import Notifier, StatusChangeEvent

logger = logging.getLogger(__name__)


class TransitionStatusHandler:

    def __init__(
        self,
        request_repo: ServiceRequestRepository,
        party_repo: PartyRepository,
        labor_repo: LaborRepository,
        notifier: Notifier,
    ) -> None:
        self._request_repo = request_repo
        self._party_repo = party_repo
        self._ledger = LaborLedger(labor_repo)
        self._notifier = notifier

    def handle(
        self,
        request_id: int,
        new_status: ServiceStatus,
        note: str | None = None,
        notify_customer: bool = False,
        actor_id: int | None = None,
    ) -> TransitionResultDTO:
        with self._request_repo.locked(request_id) as request:
            old_status = request.transition_to(new_status)
            self._request_repo.save(request)

            actor = actor_id if actor_id is not None else request.advisor_id
            entry = self._ledger.record_status_change(
                request_id, old_status, new_status, actor, note
            )
        logger.info(
            "%s moved from %s to %s", request.reference, old_status.value, new_status.value
        )

        sent = False
        if notify_customer:
            sent = self._notify(request, old_status, note)

        return TransitionResultDTO(
            request_id=request_id,
            old_status=old_status.value,
            new_status=new_status.value,
            audit_entry=to_audit_entry(entry),
            notification_sent=sent,
        )

    def _notify(self, request: ServiceRequest, old_status: ServiceStatus, note: str | None) -> bool:
        try:
            vehicle, customer = load_vehicle_and_customer(self._party_repo, request)
            self._notifier.status_changed(
                StatusChangeEvent(
                    request_id=request.id,  # type: ignore[arg-type]
                    old_status=old_status.value,
                    new_status=request.status.value,
                    customer_name=customer.name,
                    customer_email=customer.email,
                    vehicle=vehicle.display_name,
                    registration_number=vehicle.registration_number,
                    note=note,
                )
            )
        except Exception:
            logger.exception("Status notification for %s failed", request.reference)
            return False
        return True
