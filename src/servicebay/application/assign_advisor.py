"""Application service: Assign Advisor use case.

Assigning the first advisor is what starts work on a request: it moves
Received -> Diagnosis and leaves a StatusChange entry in the audit trail.
A request that already has an advisor is left untouched.
"""

from __future__ import annotations

import logging
from datetime import date

from servicebay.application.common import load_advisor, load_vehicle_and_customer
from servicebay.application.dto import RequestSummaryDTO
from servicebay.application.mapping import to_request_summary
from servicebay.domain.model.service_request import ServiceStatus
from servicebay.domain.repository.labor_repository import LaborRepository
from servicebay.domain.repository.party_repository import PartyRepository
from servicebay.domain.repository.service_request_repository import (
    ServiceRequestRepository,
)
from servicebay.domain.service.labor_ledger import LaborLedger

logger = logging.getLogger(__name__)


class AssignAdvisorHandler:

    def __init__(
        self,
        request_repo: ServiceRequestRepository,
        party_repo: PartyRepository,
        labor_repo: LaborRepository,
    ) -> None:
        self._request_repo = request_repo
        self._party_repo = party_repo
        self._ledger = LaborLedger(labor_repo)

    def handle(
        self,
        request_id: int,
        advisor_id: int,
        delivery_date: date | None = None,
        notes: str | None = None,
    ) -> RequestSummaryDTO:
        advisor = load_advisor(self._party_repo, advisor_id)

        with self._request_repo.locked(request_id) as request:
            if request.assign_advisor(advisor_id):
                if delivery_date is not None:
                    request.delivery_date = delivery_date
                self._request_repo.save(request)
                self._ledger.record_status_change(
                    request_id,
                    ServiceStatus.RECEIVED,
                    request.status,
                    advisor_id,
                    note=f"Assigned to {advisor.name}" + (f". {notes}" if notes else ""),
                )
                logger.info("Assigned %s to advisor %s", request.reference, advisor.name)
            else:
                logger.info(
                    "%s already has advisor #%s; assignment ignored",
                    request.reference, request.advisor_id,
                )

        vehicle, customer = load_vehicle_and_customer(self._party_repo, request)
        current = load_advisor(self._party_repo, request.advisor_id)  # type: ignore[arg-type]
        return to_request_summary(request, vehicle, customer, current)
