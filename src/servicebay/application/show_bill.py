"""Application service: Show Bill use case (query)."""

from __future__ import annotations

from servicebay.application.common import compute_bill
from servicebay.application.dto import BillDTO
from servicebay.application.mapping import to_bill_dto
from servicebay.domain.repository.inventory_repository import InventoryRepository
from servicebay.domain.repository.labor_repository import LaborRepository
from servicebay.domain.repository.party_repository import PartyRepository
from servicebay.domain.repository.service_request_repository import (
    ServiceRequestRepository,
)
from servicebay.domain.service.billing_calculator import BillingCalculator


class ShowBillHandler:

    def __init__(
        self,
        request_repo: ServiceRequestRepository,
        party_repo: PartyRepository,
        inventory_repo: InventoryRepository,
        labor_repo: LaborRepository,
        calculator: BillingCalculator,
    ) -> None:
        self._request_repo = request_repo
        self._party_repo = party_repo
        self._inventory_repo = inventory_repo
        self._labor_repo = labor_repo
        self._calculator = calculator

    def handle(self, request_id: int) -> BillDTO:
        with self._request_repo.locked(request_id) as request:
            bill = compute_bill(
                request, self._party_repo, self._inventory_repo, self._labor_repo,
                self._calculator,
            )
        return to_bill_dto(bill, request)
