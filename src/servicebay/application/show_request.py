"""Application service: service request queries."""

from __future__ import annotations

from servicebay.application.common import (
    load_advisor,
    load_request,
    load_vehicle_and_customer,
)
from servicebay.application.dto import RequestSummaryDTO
from servicebay.application.mapping import to_request_summary
from servicebay.domain.model.party import VehicleCategory
from servicebay.domain.model.service_request import ServiceRequest, ServiceStatus
from servicebay.domain.repository.party_repository import PartyRepository
from servicebay.domain.repository.service_request_repository import (
    ServiceRequestRepository,
)


class _RequestQuery:

    def __init__(
        self,
        request_repo: ServiceRequestRepository,
        party_repo: PartyRepository,
    ) -> None:
        self._request_repo = request_repo
        self._party_repo = party_repo

    def _summary(self, request: ServiceRequest) -> RequestSummaryDTO:
        vehicle, customer = load_vehicle_and_customer(self._party_repo, request)
        advisor = (
            self._party_repo.get_advisor(request.advisor_id)
            if request.advisor_id is not None
            else None
        )
        return to_request_summary(request, vehicle, customer, advisor)

    def _summaries(self, requests: list[ServiceRequest]) -> list[RequestSummaryDTO]:
        return [self._summary(r) for r in sorted(requests, key=lambda r: r.id or 0)]


class ShowRequestHandler(_RequestQuery):

    def handle(self, request_id: int) -> RequestSummaryDTO:
        return self._summary(load_request(self._request_repo, request_id))


class ListRequestsHandler(_RequestQuery):

    def handle(self, status: ServiceStatus) -> list[RequestSummaryDTO]:
        return self._summaries(self._request_repo.list_by_status(status))


class AdvisorQueueHandler(_RequestQuery):
    """The advisor's work queue: assigned requests not yet Completed."""

    def handle(self, advisor_id: int) -> list[RequestSummaryDTO]:
        load_advisor(self._party_repo, advisor_id)
        requests = [
            r
            for r in self._request_repo.list_by_advisor(advisor_id)
            if r.status != ServiceStatus.COMPLETED
        ]
        return self._summaries(requests)


class CompletedServicesHandler(_RequestQuery):
    """Completed requests, optionally narrowed by vehicle category and a search term.

    The search term matches the vehicle name, the registration number or
    the customer name, case-insensitively.
    """

    def handle(
        self,
        category: str | None = None,
        search: str | None = None,
    ) -> list[RequestSummaryDTO]:
        wanted = VehicleCategory.parse(category) if category else None
        term = search.strip().lower() if search and search.strip() else None

        matches = []
        for request in self._request_repo.list_by_status(ServiceStatus.COMPLETED):
            vehicle, customer = load_vehicle_and_customer(self._party_repo, request)
            if wanted is not None and vehicle.category != wanted:
                continue
            if term is not None and not any(
                term in field.lower()
                for field in (vehicle.display_name, vehicle.registration_number, customer.name)
            ):
                continue
            matches.append(request)
        return self._summaries(matches)
