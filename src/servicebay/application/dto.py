"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI (or any other caller) and the application
layer without exposing domain internals.  Money values are Decimals
already rounded to cents, so a renderer never needs to compute anything.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal


# ── Inputs ───────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class LaborChargeInput:
    """Input: one line of work as the advisor typed it."""

    description: str
    hours: str | int | Decimal
    rate_per_hour: str | int | Decimal


# ── Service requests ─────────────────────────────────────────────────────────


@dataclass(frozen=True)
class RequestSummaryDTO:
    id: int
    reference: str
    status: str
    dispatched: bool
    service_type: str
    description: str | None
    vehicle: str
    registration_number: str
    customer_name: str
    membership_tier: str
    advisor_name: str | None
    delivery_date: date | None
    quoted_base_fee: Decimal
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class AuditEntryDTO:
    id: int
    kind: str
    description: str
    advisor_id: int | None
    old_status: str | None
    new_status: str | None
    labor_cost: Decimal | None
    superseded: bool
    created_at: datetime


@dataclass(frozen=True)
class TransitionResultDTO:
    request_id: int
    old_status: str
    new_status: str
    audit_entry: AuditEntryDTO
    notification_sent: bool


@dataclass(frozen=True)
class DispatchConfirmationDTO:
    request_id: int
    reference: str
    invoice_reference: str
    invoice_generated: bool
    net_amount: Decimal
    dispatched_at: datetime


# ── Bills, payments and invoices ─────────────────────────────────────────────


@dataclass(frozen=True)
class MaterialLineDTO:
    item_name: str
    quantity: Decimal
    unit_price: Decimal
    total: Decimal


@dataclass(frozen=True)
class LaborLineDTO:
    description: str
    hours: Decimal
    rate_per_hour: Decimal
    total: Decimal


@dataclass(frozen=True)
class BillDTO:
    request_id: int
    reference: str
    membership_tier: str
    materials: list[MaterialLineDTO]
    labor: list[LaborLineDTO]
    materials_total: Decimal
    labor_total: Decimal
    discount: Decimal
    subtotal: Decimal
    tax: Decimal
    grand_total: Decimal


@dataclass(frozen=True)
class PaymentDTO:
    id: int
    request_id: int
    amount: Decimal
    method: str
    transaction_id: str
    status: str
    paid_at: datetime


@dataclass(frozen=True)
class DiscountLine:
    label: str
    rate: Decimal
    amount: Decimal


@dataclass(frozen=True)
class TaxLine:
    label: str
    rate: Decimal
    amount: Decimal


@dataclass(frozen=True)
class InvoiceDocument:
    """Output: everything a PDF/HTML renderer needs, fully computed."""

    reference: str
    request_reference: str
    generated_at: datetime
    status: str
    customer_name: str
    customer_email: str | None
    customer_phone: str | None
    membership_tier: str
    vehicle: str
    registration_number: str
    vehicle_category: str
    vehicle_year: int | None
    service_type: str
    materials: list[MaterialLineDTO]
    labor: list[LaborLineDTO]
    materials_total: Decimal
    labor_total: Decimal
    discount: DiscountLine | None
    subtotal: Decimal
    tax: TaxLine
    grand_total: Decimal
    payment_method: str
    transaction_id: str
    amount_paid: Decimal


# ── Inventory ────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class StockLineDTO:
    item_id: int
    name: str
    category: str
    current_stock: Decimal
    reorder_level: Decimal
    unit_price: Decimal
    stock_value: Decimal
    level: str


@dataclass(frozen=True)
class UsageLineDTO:
    usage_id: int
    request_reference: str
    item_name: str
    quantity: Decimal
    unit_price: Decimal
    used_at: datetime
    reversed: bool


# ── Dashboard ────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class DashboardDTO:
    vehicles_due: int
    vehicles_in_progress: int
    vehicles_completed: int
    vehicles_dispatched: int
    total_items: int
    low_stock_items: int
    critical_stock_items: int
