"""Application service: Record Payment use case.

A request can be paid once it is Completed and before it is dispatched.
The amount defaults to the bill's grand total rounded to cents.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from servicebay.application.common import compute_bill
from servicebay.application.dto import PaymentDTO
from servicebay.application.mapping import to_payment_dto
from servicebay.domain.exceptions import InvalidTransitionError
from servicebay.domain.model.payment import Payment, PaymentMethod
from servicebay.domain.model.service_request import ServiceStatus
from servicebay.domain.model.value_objects import Money
from servicebay.domain.repository.billing_repository import PaymentRepository
from servicebay.domain.repository.inventory_repository import InventoryRepository
from servicebay.domain.repository.labor_repository import LaborRepository
from servicebay.domain.repository.party_repository import PartyRepository
from servicebay.domain.repository.service_request_repository import (
    ServiceRequestRepository,
)
from servicebay.domain.service.billing_calculator import BillingCalculator

logger = logging.getLogger(__name__)


class RecordPaymentHandler:

    def __init__(
        self,
        request_repo: ServiceRequestRepository,
        party_repo: PartyRepository,
        inventory_repo: InventoryRepository,
        labor_repo: LaborRepository,
        payment_repo: PaymentRepository,
        calculator: BillingCalculator,
        default_method: PaymentMethod = PaymentMethod.CARD,
    ) -> None:
        self._request_repo = request_repo
        self._party_repo = party_repo
        self._inventory_repo = inventory_repo
        self._labor_repo = labor_repo
        self._payment_repo = payment_repo
        self._calculator = calculator
        self._default_method = default_method

    def handle(
        self,
        request_id: int,
        method: str | None = None,
        amount: str | int | Decimal | None = None,
        transaction_id: str | None = None,
    ) -> PaymentDTO:
        payment_method = PaymentMethod.parse(method) if method else self._default_method
        paid = Money.of(amount) if amount is not None else None

        with self._request_repo.locked(request_id) as request:
            request.ensure_open()
            if request.status != ServiceStatus.COMPLETED:
                raise InvalidTransitionError(
                    f"Cannot take payment for {request.reference} — current status is "
                    f"{request.status.value}, expected Completed"
                )
            if paid is None:
                bill = compute_bill(
                    request, self._party_repo, self._inventory_repo, self._labor_repo,
                    self._calculator,
                )
                paid = bill.grand_total.rounded()

            payment = Payment.record(request_id, paid, payment_method, transaction_id)
            # Raises ValidationError if the request already has an active payment.
            self._payment_repo.add(payment)
        logger.info(
            "Recorded %s payment of %s for %s (%s)",
            payment.method.value, payment.amount, request.reference, payment.transaction_id,
        )
        return to_payment_dto(payment)
