"""Application service: Book Service Request use case.

Creates a request in Received for an existing vehicle.  When no delivery
date is given it is estimated from the service catalogue.
"""

from __future__ import annotations

import logging
from datetime import date

from servicebay.application.common import load_vehicle_and_customer
from servicebay.application.dto import RequestSummaryDTO
from servicebay.application.mapping import to_request_summary
from servicebay.domain.exceptions import NotFoundError
from servicebay.domain.model.service_request import ServiceRequest
from servicebay.domain.repository.party_repository import PartyRepository
from servicebay.domain.repository.service_request_repository import (
    ServiceRequestRepository,
)
from servicebay.domain.service.service_catalog import estimated_completion

logger = logging.getLogger(__name__)


class BookServiceRequestHandler:

    def __init__(
        self,
        request_repo: ServiceRequestRepository,
        party_repo: PartyRepository,
    ) -> None:
        self._request_repo = request_repo
        self._party_repo = party_repo

    def handle(
        self,
        vehicle_id: int,
        service_type: str,
        description: str | None = None,
        delivery_date: date | None = None,
    ) -> RequestSummaryDTO:
        vehicle = self._party_repo.get_vehicle(vehicle_id)
        if vehicle is None:
            raise NotFoundError(f"Vehicle #{vehicle_id} not found")

        request = ServiceRequest.book(vehicle_id, service_type, description, delivery_date)
        if request.delivery_date is None:
            request.delivery_date = estimated_completion(
                request.service_type, vehicle.category, request.created_at.date()
            )
        self._request_repo.save(request)
        logger.info(
            "Booked %s: %s for %s", request.reference, request.service_type,
            vehicle.registration_number,
        )

        vehicle, customer = load_vehicle_and_customer(self._party_repo, request)
        return to_request_summary(request, vehicle, customer, advisor=None)
