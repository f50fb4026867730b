"""JSON-file-backed implementations of PaymentRepository and InvoiceRepository."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

from servicebay.domain.exceptions import ValidationError
from servicebay.domain.model.payment import (
    Invoice,
    Payment,
    PaymentMethod,
    PaymentStatus,
)
from servicebay.domain.model.value_objects import Money
from servicebay.domain.repository.billing_repository import (
    InvoiceRepository,
    PaymentRepository,
)
from servicebay.infrastructure.persistence.json_store import (
    JsonFile,
    dump_decimal,
    dump_dt,
    load_dt,
    next_id,
)


def _money(raw: str) -> Money:
    return Money(Decimal(raw))


class JsonPaymentRepository(PaymentRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    def get_active_for_request(self, request_id: int) -> Payment | None:
        for raw in self._file.read():
            if raw["request_id"] == request_id and raw["status"] != PaymentStatus.FAILED.value:
                return self._to_domain(raw)
        return None

    def add(self, payment: Payment) -> None:
        with self._file.transaction() as records:
            for raw in records:
                if (
                    raw["request_id"] == payment.request_id
                    and raw["status"] != PaymentStatus.FAILED.value
                ):
                    raise ValidationError(
                        f"Service request REQ-{payment.request_id} is already paid "
                        f"(transaction {raw['transaction_id']})"
                    )
            payment.id = next_id(records)
            records.append(self._to_raw(payment))

    @staticmethod
    def _to_raw(payment: Payment) -> dict:
        return {
            "id": payment.id,
            "request_id": payment.request_id,
            "amount": dump_decimal(payment.amount.amount),
            "method": payment.method.value,
            "transaction_id": payment.transaction_id,
            "status": payment.status.value,
            "paid_at": dump_dt(payment.paid_at),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Payment:
        return Payment(
            id=raw["id"],
            request_id=raw["request_id"],
            amount=_money(raw["amount"]),
            method=PaymentMethod(raw["method"]),
            transaction_id=raw["transaction_id"],
            status=PaymentStatus(raw["status"]),
            paid_at=load_dt(raw["paid_at"]),
        )


class JsonInvoiceRepository(InvoiceRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    def get_for_request(self, request_id: int) -> Invoice | None:
        for raw in self._file.read():
            if raw["request_id"] == request_id:
                return self._to_domain(raw)
        return None

    def save(self, invoice: Invoice) -> None:
        with self._file.transaction() as records:
            for i, raw in enumerate(records):
                if raw["request_id"] == invoice.request_id:
                    invoice.id = raw["id"]
                    records[i] = self._to_raw(invoice)
                    return
            invoice.id = next_id(records)
            records.append(self._to_raw(invoice))

    @staticmethod
    def _to_raw(invoice: Invoice) -> dict:
        return {
            "id": invoice.id,
            "request_id": invoice.request_id,
            "payment_id": invoice.payment_id,
            "materials_total": dump_decimal(invoice.materials_total.amount),
            "labor_total": dump_decimal(invoice.labor_total.amount),
            "discount": dump_decimal(invoice.discount.amount),
            "total_amount": dump_decimal(invoice.total_amount.amount),
            "taxes": dump_decimal(invoice.taxes.amount),
            "net_amount": dump_decimal(invoice.net_amount.amount),
            "generated_at": dump_dt(invoice.generated_at),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Invoice:
        return Invoice(
            id=raw["id"],
            request_id=raw["request_id"],
            payment_id=raw["payment_id"],
            materials_total=_money(raw["materials_total"]),
            labor_total=_money(raw["labor_total"]),
            discount=_money(raw["discount"]),
            total_amount=_money(raw["total_amount"]),
            taxes=_money(raw["taxes"]),
            net_amount=_money(raw["net_amount"]),
            generated_at=load_dt(raw["generated_at"]),
        )
