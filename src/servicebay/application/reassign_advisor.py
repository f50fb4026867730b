"""Application service: Reassign Advisor use case.

Handing an open request to a different advisor is an explicit operation
with its own WorkNote in the audit trail; it never changes the status.
"""

from __future__ import annotations

import logging

from servicebay.application.common import load_advisor, load_vehicle_and_customer
from servicebay.application.dto import RequestSummaryDTO
from servicebay.application.mapping import to_request_summary
from servicebay.domain.model.labor import LaborEntry
from servicebay.domain.repository.labor_repository import LaborRepository
from servicebay.domain.repository.party_repository import PartyRepository
from servicebay.domain.repository.service_request_repository import (
    ServiceRequestRepository,
)

logger = logging.getLogger(__name__)


class ReassignAdvisorHandler:

    def __init__(
        self,
        request_repo: ServiceRequestRepository,
        party_repo: PartyRepository,
        labor_repo: LaborRepository,
    ) -> None:
        self._request_repo = request_repo
        self._party_repo = party_repo
        self._labor_repo = labor_repo

    def handle(self, request_id: int, advisor_id: int, reason: str) -> RequestSummaryDTO:
        advisor = load_advisor(self._party_repo, advisor_id)

        with self._request_repo.locked(request_id) as request:
            previous_id = request.reassign_advisor(advisor_id)
            self._request_repo.save(request)

            previous = (
                self._party_repo.get_advisor(previous_id) if previous_id is not None else None
            )
            text = (
                f"Advisor reassigned from {previous.name if previous else 'nobody'} "
                f"to {advisor.name}"
            )
            if reason and reason.strip():
                text += f": {reason.strip()}"
            self._labor_repo.append([LaborEntry.work_note(request_id, text, advisor_id)])
        logger.info("%s: %s", request.reference, text)

        vehicle, customer = load_vehicle_and_customer(self._party_repo, request)
        return to_request_summary(request, vehicle, customer, advisor)
