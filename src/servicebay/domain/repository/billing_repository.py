"""Abstract repositories for payments and invoices."""

from __future__ import annotations

from abc import ABC, abstractmethod

from servicebay.domain.model.payment import Invoice, Payment


class PaymentRepository(ABC):

    @abstractmethod
    def get_active_for_request(self, request_id: int) -> Payment | None:
        """Return the request's non-failed payment, or None."""

    @abstractmethod
    def add(self, payment: Payment) -> None:
        """Insert a payment, assigning its ID.

        Raises ValidationError if the request already has an active payment.
        """


class InvoiceRepository(ABC):

    @abstractmethod
    def get_for_request(self, request_id: int) -> Invoice | None:
        """Return the request's invoice, or None."""

    @abstractmethod
    def save(self, invoice: Invoice) -> None:
        """Insert the request's invoice or replace the existing one.

        A replacement keeps the existing invoice ID.
        """
