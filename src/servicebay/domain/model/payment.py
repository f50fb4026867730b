"""Payment and Invoice records for a service request."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4

from servicebay.domain.exceptions import InvalidAmountError, ValidationError
from servicebay.domain.model.value_objects import Money


class PaymentMethod(Enum):
    UPI = "UPI"
    CARD = "Card"
    NET_BANKING = "Net_Banking"

    @staticmethod
    def parse(raw: str) -> PaymentMethod:
        """Match a method by value or name, case-insensitively."""
        key = raw.strip().lower().replace(" ", "_")
        for method in PaymentMethod:
            if key in (method.value.lower(), method.name.lower()):
                return method
        raise ValidationError(
            f"Unknown payment method {raw!r} "
            f"(expected one of: {', '.join(m.value for m in PaymentMethod)})"
        )


class PaymentStatus(Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"
    FAILED = "Failed"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def new_transaction_id() -> str:
    return f"TXN{uuid4().hex[:12].upper()}"


@dataclass
class Payment:
    id: int | None
    request_id: int
    amount: Money
    method: PaymentMethod
    transaction_id: str
    status: PaymentStatus = PaymentStatus.COMPLETED
    paid_at: datetime = field(default_factory=_now)

    @staticmethod
    def record(
        request_id: int,
        amount: Money,
        method: PaymentMethod,
        transaction_id: str | None = None,
    ) -> Payment:
        if amount.is_zero:
            raise InvalidAmountError("Payment amount must be greater than zero")
        if transaction_id is not None and not transaction_id.strip():
            raise ValidationError("Transaction ID cannot be blank")
        return Payment(
            id=None,
            request_id=request_id,
            amount=amount,
            method=method,
            transaction_id=transaction_id.strip() if transaction_id else new_transaction_id(),
        )

    @property
    def is_active(self) -> bool:
        return self.status != PaymentStatus.FAILED


@dataclass
class Invoice:
    """The persisted point-in-time financial document for a request.

    ``total_amount`` is the pre-tax subtotal, ``net_amount`` what the
    customer owes.  All amounts are stored rounded to cents.
    """

    id: int | None
    request_id: int
    payment_id: int
    materials_total: Money
    labor_total: Money
    discount: Money
    total_amount: Money
    taxes: Money
    net_amount: Money
    generated_at: datetime = field(default_factory=_now)

    @property
    def reference(self) -> str:
        return f"INV-{self.id}"
