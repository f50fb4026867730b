"""Application service: Reverse Material Usage use case.

Corrects a mistaken consumption: the usage is marked reversed, its
quantity goes back into stock, and the bill no longer includes it.
"""

from __future__ import annotations

from servicebay.application.common import compute_bill
from servicebay.application.dto import BillDTO
from servicebay.application.mapping import to_bill_dto
from servicebay.domain.exceptions import NotFoundError
from servicebay.domain.repository.inventory_repository import InventoryRepository
from servicebay.domain.repository.labor_repository import LaborRepository
from servicebay.domain.repository.party_repository import PartyRepository
from servicebay.domain.repository.service_request_repository import (
    ServiceRequestRepository,
)
from servicebay.domain.service.billing_calculator import BillingCalculator
from servicebay.domain.service.inventory_ledger import InventoryLedger


class ReverseMaterialUsageHandler:

    def __init__(
        self,
        request_repo: ServiceRequestRepository,
        party_repo: PartyRepository,
        inventory_repo: InventoryRepository,
        labor_repo: LaborRepository,
        ledger: InventoryLedger,
        calculator: BillingCalculator,
    ) -> None:
        self._request_repo = request_repo
        self._party_repo = party_repo
        self._inventory_repo = inventory_repo
        self._labor_repo = labor_repo
        self._ledger = ledger
        self._calculator = calculator

    def handle(self, usage_id: int) -> BillDTO:
        usage = self._inventory_repo.get_usage(usage_id)
        if usage is None:
            raise NotFoundError(f"Material usage #{usage_id} not found")

        # A dispatched request's bill is final.
        with self._request_repo.locked(usage.request_id) as request:
            request.ensure_open()
            self._ledger.reverse(usage_id)

            bill = compute_bill(
                request, self._party_repo, self._inventory_repo, self._labor_repo,
                self._calculator,
            )
        return to_bill_dto(bill, request)
