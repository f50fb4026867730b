"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class InvalidAmountError(ValidationError):
    """A monetary input is non-positive or cannot be parsed."""


class NotFoundError(DomainException):
    """A requested entity does not exist."""


class InsufficientStockError(DomainException):
    """A consumption asked for more than the item currently holds."""

    def __init__(self, item_name: str, requested, available) -> None:
        super().__init__(
            f"Insufficient stock for {item_name} "
            f"(requested {requested}, available {available})"
        )
        self.item_name = item_name
        self.requested = requested
        self.available = available


class InvalidTransitionError(DomainException):
    """The request's status does not allow the attempted operation."""


class RequestClosedError(InvalidTransitionError):
    """The request has been dispatched and accepts no further changes."""


class PaymentRequiredError(DomainException):
    """Invoicing or dispatch was attempted before a payment exists."""


class ConcurrencyConflictError(DomainException):
    """The stored version changed since it was read; the caller may retry."""
