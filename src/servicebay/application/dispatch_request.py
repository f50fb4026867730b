"""Application service: Dispatch Request use case.

Hands the vehicle back to the customer.  Requires a Completed, paid
request; generates the invoice if none exists yet, then closes the
request for good.
"""

from __future__ import annotations

import logging

from servicebay.application.common import compute_bill
from servicebay.application.dto import DispatchConfirmationDTO
from servicebay.application.generate_invoice import issue_invoice, require_payment
from servicebay.domain.exceptions import InvalidTransitionError
from servicebay.domain.model.labor import LaborEntry
from servicebay.domain.model.service_request import ServiceStatus
from servicebay.domain.repository.billing_repository import (
    InvoiceRepository,
    PaymentRepository,
)
from servicebay.domain.repository.inventory_repository import InventoryRepository
from servicebay.domain.repository.labor_repository import LaborRepository
from servicebay.domain.repository.party_repository import PartyRepository
from servicebay.domain.repository.service_request_repository import (
    ServiceRequestRepository,
)
from servicebay.domain.service.billing_calculator import BillingCalculator

logger = logging.getLogger(__name__)


class DispatchRequestHandler:

    def __init__(
        self,
        request_repo: ServiceRequestRepository,
        party_repo: PartyRepository,
        inventory_repo: InventoryRepository,
        labor_repo: LaborRepository,
        payment_repo: PaymentRepository,
        invoice_repo: InvoiceRepository,
        calculator: BillingCalculator,
    ) -> None:
        self._request_repo = request_repo
        self._party_repo = party_repo
        self._inventory_repo = inventory_repo
        self._labor_repo = labor_repo
        self._payment_repo = payment_repo
        self._invoice_repo = invoice_repo
        self._calculator = calculator

    def handle(self, request_id: int, advisor_id: int | None = None) -> DispatchConfirmationDTO:
        # Material and labor writes hold the request too, so the invoice
        # below covers every ledger entry the request will ever have.
        with self._request_repo.locked(request_id) as request:
            # --- Preconditions (checked before any write) ---
            request.ensure_open()
            if request.status != ServiceStatus.COMPLETED:
                raise InvalidTransitionError(
                    f"Cannot dispatch {request.reference} — current status is "
                    f"{request.status.value}, expected Completed"
                )
            payment = require_payment(self._payment_repo, request_id)

            # --- Invoice ---
            invoice = self._invoice_repo.get_for_request(request_id)
            generated = invoice is None
            if invoice is None:
                bill = compute_bill(
                    request, self._party_repo, self._inventory_repo, self._labor_repo,
                    self._calculator,
                )
                invoice = issue_invoice(bill, payment, self._invoice_repo)

            # --- Close ---
            request.mark_dispatched()
            self._request_repo.save(request)
            actor = advisor_id if advisor_id is not None else request.advisor_id
            self._labor_repo.append([LaborEntry.dispatch_record(request_id, actor)])
        logger.info("Dispatched %s (invoice %s)", request.reference, invoice.reference)

        return DispatchConfirmationDTO(
            request_id=request_id,
            reference=request.reference,
            invoice_reference=invoice.reference,
            invoice_generated=generated,
            net_amount=invoice.net_amount.amount,
            dispatched_at=request.dispatched_at,  # type: ignore[arg-type]
        )
