"""Application service: Generate Invoice use case.

The invoice freezes the bill as it stands at generation time.  A request
has at most one invoice: generating again overwrites the amounts and
keeps the invoice number, until the request is dispatched.
"""

from __future__ import annotations

import logging

from servicebay.application.common import compute_bill, load_vehicle_and_customer
from servicebay.application.dto import InvoiceDocument
from servicebay.application.mapping import to_invoice_document
from servicebay.domain.exceptions import PaymentRequiredError
from servicebay.domain.model.bill import Bill
from servicebay.domain.model.payment import Invoice, Payment
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


def issue_invoice(
    bill: Bill,
    payment: Payment,
    invoice_repo: InvoiceRepository,
) -> Invoice:
    """Write (or overwrite) the request's invoice from *bill*."""
    existing = invoice_repo.get_for_request(bill.request_id)
    invoice = Invoice(
        id=existing.id if existing else None,
        request_id=bill.request_id,
        payment_id=payment.id,  # type: ignore[arg-type]
        materials_total=bill.materials_total.rounded(),
        labor_total=bill.labor_total.rounded(),
        discount=bill.discount.rounded(),
        total_amount=bill.subtotal.rounded(),
        taxes=bill.tax.rounded(),
        net_amount=bill.grand_total.rounded(),
    )
    invoice_repo.save(invoice)
    logger.info(
        "%s invoice %s for REQ-%s: net %s",
        "Regenerated" if existing else "Generated",
        invoice.reference, bill.request_id, invoice.net_amount,
    )
    return invoice


def require_payment(payment_repo: PaymentRepository, request_id: int) -> Payment:
    payment = payment_repo.get_active_for_request(request_id)
    if payment is None:
        raise PaymentRequiredError(f"Service request REQ-{request_id} has not been paid")
    return payment


class GenerateInvoiceHandler:

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

    def handle(self, request_id: int) -> InvoiceDocument:
        with self._request_repo.locked(request_id) as request:
            # The invoice handed over at dispatch is final.
            request.ensure_open()
            payment = require_payment(self._payment_repo, request_id)

            bill = compute_bill(
                request, self._party_repo, self._inventory_repo, self._labor_repo,
                self._calculator,
            )
            invoice = issue_invoice(bill, payment, self._invoice_repo)

        vehicle, customer = load_vehicle_and_customer(self._party_repo, request)
        return to_invoice_document(invoice, bill, request, vehicle, customer, payment)
