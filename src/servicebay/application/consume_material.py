"""Application service: Consume Material use case.

Books stock against an active request through the InventoryLedger and
returns the request's recomputed bill.
"""

from __future__ import annotations

from decimal import Decimal

from servicebay.application.common import compute_bill
from servicebay.application.dto import BillDTO
from servicebay.application.mapping import to_bill_dto
from servicebay.domain.model.value_objects import Quantity
from servicebay.domain.repository.inventory_repository import InventoryRepository
from servicebay.domain.repository.labor_repository import LaborRepository
from servicebay.domain.repository.party_repository import PartyRepository
from servicebay.domain.repository.service_request_repository import (
    ServiceRequestRepository,
)
from servicebay.domain.service.billing_calculator import BillingCalculator
from servicebay.domain.service.inventory_ledger import InventoryLedger


class ConsumeMaterialHandler:

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

    def handle(
        self,
        request_id: int,
        item_id: int,
        quantity: str | int | Decimal,
        advisor_id: int | None = None,
    ) -> BillDTO:
        qty = Quantity.of(quantity)
        # Dispatch waits for the request, so it cannot close it between
        # the check and the stock commit.
        with self._request_repo.locked(request_id) as request:
            request.ensure_active()
            actor = advisor_id if advisor_id is not None else request.advisor_id
            self._ledger.consume(item_id, request_id, qty, actor)

            bill = compute_bill(
                request, self._party_repo, self._inventory_repo, self._labor_repo,
                self._calculator,
            )
        return to_bill_dto(bill, request)
