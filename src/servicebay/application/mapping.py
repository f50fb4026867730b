"""One explicit construction function per output DTO.

Every field is filled from the domain objects passed in; nothing is
patched in afterwards.
"""

from __future__ import annotations

from decimal import Decimal

from servicebay.application.dto import (
    AuditEntryDTO,
    BillDTO,
    DiscountLine,
    InvoiceDocument,
    LaborLineDTO,
    MaterialLineDTO,
    PaymentDTO,
    RequestSummaryDTO,
    StockLineDTO,
    TaxLine,
    UsageLineDTO,
)
from servicebay.domain.model.bill import Bill
from servicebay.domain.model.inventory import InventoryItem, MaterialUsage
from servicebay.domain.model.labor import LaborEntry, LaborEntryKind
from servicebay.domain.model.party import Customer, ServiceAdvisor, Vehicle
from servicebay.domain.model.payment import Invoice, Payment
from servicebay.domain.model.service_request import ServiceRequest
from servicebay.domain.model.value_objects import Money
from servicebay.domain.service.service_catalog import quoted_base_fee


def _cents(money: Money) -> Decimal:
    return money.rounded().amount


def to_request_summary(
    request: ServiceRequest,
    vehicle: Vehicle,
    customer: Customer,
    advisor: ServiceAdvisor | None,
) -> RequestSummaryDTO:
    return RequestSummaryDTO(
        id=request.id,  # type: ignore[arg-type]
        reference=request.reference,
        status=request.status.value,
        dispatched=request.is_dispatched,
        service_type=request.service_type,
        description=request.description,
        vehicle=vehicle.display_name,
        registration_number=vehicle.registration_number,
        customer_name=customer.name,
        membership_tier=customer.membership_tier.value,
        advisor_name=advisor.name if advisor is not None else None,
        delivery_date=request.delivery_date,
        quoted_base_fee=_cents(quoted_base_fee(request.service_type, vehicle.category)),
        created_at=request.created_at,
        updated_at=request.updated_at,
    )


def to_audit_entry(entry: LaborEntry) -> AuditEntryDTO:
    return AuditEntryDTO(
        id=entry.id,  # type: ignore[arg-type]
        kind=entry.kind.value,
        description=entry.description,
        advisor_id=entry.advisor_id,
        old_status=entry.old_status.value if entry.old_status else None,
        new_status=entry.new_status.value if entry.new_status else None,
        labor_cost=(
            _cents(entry.labor_cost) if entry.kind == LaborEntryKind.LABOR_CHARGE else None
        ),
        superseded=entry.is_superseded,
        created_at=entry.created_at,
    )


def _material_lines(bill: Bill) -> list[MaterialLineDTO]:
    return [
        MaterialLineDTO(
            item_name=line.item_name,
            quantity=line.quantity,
            unit_price=_cents(line.unit_price),
            total=_cents(line.total),
        )
        for line in bill.materials
    ]


def _labor_lines(bill: Bill) -> list[LaborLineDTO]:
    return [
        LaborLineDTO(
            description=line.description,
            hours=line.hours,
            rate_per_hour=line.rate_per_hour,
            total=_cents(line.total),
        )
        for line in bill.labor
    ]


def to_bill_dto(bill: Bill, request: ServiceRequest) -> BillDTO:
    return BillDTO(
        request_id=bill.request_id,
        reference=request.reference,
        membership_tier=bill.membership_tier.value,
        materials=_material_lines(bill),
        labor=_labor_lines(bill),
        materials_total=_cents(bill.materials_total),
        labor_total=_cents(bill.labor_total),
        discount=_cents(bill.discount),
        subtotal=_cents(bill.subtotal),
        tax=_cents(bill.tax),
        grand_total=_cents(bill.grand_total),
    )


def to_payment_dto(payment: Payment) -> PaymentDTO:
    return PaymentDTO(
        id=payment.id,  # type: ignore[arg-type]
        request_id=payment.request_id,
        amount=_cents(payment.amount),
        method=payment.method.value,
        transaction_id=payment.transaction_id,
        status=payment.status.value,
        paid_at=payment.paid_at,
    )


def to_invoice_document(
    invoice: Invoice,
    bill: Bill,
    request: ServiceRequest,
    vehicle: Vehicle,
    customer: Customer,
    payment: Payment,
) -> InvoiceDocument:
    discount = None
    if not invoice.discount.is_zero:
        discount = DiscountLine(
            label=f"{customer.membership_tier.value} discount on labor",
            rate=bill.discount_rate,
            amount=invoice.discount.amount,
        )
    return InvoiceDocument(
        reference=invoice.reference,
        request_reference=request.reference,
        generated_at=invoice.generated_at,
        status=request.status.value,
        customer_name=customer.name,
        customer_email=customer.email,
        customer_phone=customer.phone,
        membership_tier=customer.membership_tier.value,
        vehicle=vehicle.display_name,
        registration_number=vehicle.registration_number,
        vehicle_category=vehicle.category.value,
        vehicle_year=vehicle.year,
        service_type=request.service_type,
        materials=_material_lines(bill),
        labor=_labor_lines(bill),
        materials_total=invoice.materials_total.amount,
        labor_total=invoice.labor_total.amount,
        discount=discount,
        subtotal=invoice.total_amount.amount,
        tax=TaxLine(label="GST", rate=bill.tax_rate, amount=invoice.taxes.amount),
        grand_total=invoice.net_amount.amount,
        payment_method=payment.method.value,
        transaction_id=payment.transaction_id,
        amount_paid=_cents(payment.amount),
    )


def to_stock_line(item: InventoryItem) -> StockLineDTO:
    return StockLineDTO(
        item_id=item.id,  # type: ignore[arg-type]
        name=item.name,
        category=item.category,
        current_stock=item.current_stock,
        reorder_level=item.reorder_level,
        unit_price=_cents(item.unit_price),
        stock_value=_cents(item.stock_value),
        level=item.stock_level.value,
    )


def to_usage_line(usage: MaterialUsage) -> UsageLineDTO:
    return UsageLineDTO(
        usage_id=usage.id,  # type: ignore[arg-type]
        request_reference=f"REQ-{usage.request_id}",
        item_name=usage.item_name,
        quantity=usage.quantity.value,
        unit_price=_cents(usage.unit_price),
        used_at=usage.used_at,
        reversed=usage.is_reversed,
    )
