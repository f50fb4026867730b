"""Application service: Show Request History use case (query).

Returns the request's full audit trail: labor charges (superseded ones
included), work notes and status changes, in commit order.
"""

from __future__ import annotations

from servicebay.application.common import load_request
from servicebay.application.dto import AuditEntryDTO
from servicebay.application.mapping import to_audit_entry
from servicebay.domain.repository.labor_repository import LaborRepository
from servicebay.domain.repository.service_request_repository import (
    ServiceRequestRepository,
)


class ShowHistoryHandler:

    def __init__(
        self,
        request_repo: ServiceRequestRepository,
        labor_repo: LaborRepository,
    ) -> None:
        self._request_repo = request_repo
        self._labor_repo = labor_repo

    def handle(self, request_id: int) -> list[AuditEntryDTO]:
        load_request(self._request_repo, request_id)
        return [to_audit_entry(e) for e in self._labor_repo.list_for_request(request_id)]
