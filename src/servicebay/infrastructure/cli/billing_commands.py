"""CLI commands for bills, payments and invoices."""

from __future__ import annotations

import json
from dataclasses import asdict

import click

from servicebay.application.dto import InvoiceDocument
from servicebay.application.generate_invoice import GenerateInvoiceHandler
from servicebay.application.record_payment import RecordPaymentHandler
from servicebay.application.show_bill import ShowBillHandler
from servicebay.domain.exceptions import DomainException
from servicebay.infrastructure.bootstrap import (
    billing_calculator,
    inventory_repository,
    invoice_repository,
    labor_repository,
    party_repository,
    payment_repository,
    request_repository,
    settings,
)
from servicebay.infrastructure.cli.formatting import echo_bill


@click.command("show")
@click.option("--request", "request_id", required=True, type=int, help="Request ID.")
def bill_show(request_id: int) -> None:
    """Show the current bill of a request."""
    handler = ShowBillHandler(
        request_repo=request_repository(),
        party_repo=party_repository(),
        inventory_repo=inventory_repository(),
        labor_repo=labor_repository(),
        calculator=billing_calculator(),
    )

    try:
        bill = handler.handle(request_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    echo_bill(bill)


@click.command("pay")
@click.option("--request", "request_id", required=True, type=int, help="Request ID.")
@click.option("--method", default=None, help="UPI, Card or Net_Banking (default from config).")
@click.option("--amount", default=None, help="Amount paid (default: the grand total).")
@click.option("--txn", "transaction_id", default=None, help="Gateway transaction ID.")
def bill_pay(
    request_id: int, method: str | None, amount: str | None, transaction_id: str | None
) -> None:
    """Record the payment for a completed request."""
    handler = RecordPaymentHandler(
        request_repo=request_repository(),
        party_repo=party_repository(),
        inventory_repo=inventory_repository(),
        labor_repo=labor_repository(),
        payment_repo=payment_repository(),
        calculator=billing_calculator(),
        default_method=settings().billing.default_payment_method,
    )

    try:
        dto = handler.handle(request_id, method, amount, transaction_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Payment #{dto.id} of {dto.amount:,.2f} by {dto.method} recorded "
        f"(transaction {dto.transaction_id})."
    )


def _echo_invoice(doc: InvoiceDocument) -> None:
    click.echo(f"INVOICE {doc.reference}   for {doc.request_reference}")
    click.echo(f"Generated: {doc.generated_at:%Y-%m-%d %H:%M}")
    click.echo(f"Customer:  {doc.customer_name} ({doc.membership_tier})")
    if doc.customer_email or doc.customer_phone:
        click.echo(f"           {doc.customer_email or ''} {doc.customer_phone or ''}".rstrip())
    click.echo(
        f"Vehicle:   {doc.vehicle} [{doc.registration_number}] {doc.vehicle_category}"
        + (f" {doc.vehicle_year}" if doc.vehicle_year else "")
    )
    click.echo(f"Service:   {doc.service_type}")
    click.echo()
    for m in doc.materials:
        click.echo(
            f"  {m.item_name:<30} {m.quantity:>6} x {m.unit_price:>10,.2f} = {m.total:>12,.2f}"
        )
    for line in doc.labor:
        click.echo(
            f"  {line.description[:30]:<30} {line.hours:>6} h @ {line.rate_per_hour:>8,.2f} "
            f"= {line.total:>12,.2f}"
        )
    click.echo(f"  {'-'*66}")
    click.echo(f"  {'Materials':<52} {doc.materials_total:>12,.2f}")
    click.echo(f"  {'Labor':<52} {doc.labor_total:>12,.2f}")
    if doc.discount is not None:
        label = f"{doc.discount.label} ({doc.discount.rate:.0%})"
        click.echo(f"  {label:<52} {-doc.discount.amount:>12,.2f}")
    click.echo(f"  {'Subtotal':<52} {doc.subtotal:>12,.2f}")
    tax_label = f"{doc.tax.label} ({doc.tax.rate:.0%})"
    click.echo(f"  {tax_label:<52} {doc.tax.amount:>12,.2f}")
    click.echo(f"  {'Grand Total':<52} {doc.grand_total:>12,.2f}")
    click.echo()
    click.echo(
        f"Paid {doc.amount_paid:,.2f} by {doc.payment_method} (transaction {doc.transaction_id})"
    )


@click.command("invoice")
@click.option("--request", "request_id", required=True, type=int, help="Request ID.")
@click.option("--json", "as_json", is_flag=True, default=False, help="Emit the document as JSON.")
def bill_invoice(request_id: int, as_json: bool) -> None:
    """Generate (or regenerate) the invoice of a paid request."""
    handler = GenerateInvoiceHandler(
        request_repo=request_repository(),
        party_repo=party_repository(),
        inventory_repo=inventory_repository(),
        labor_repo=labor_repository(),
        payment_repo=payment_repository(),
        invoice_repo=invoice_repository(),
        calculator=billing_calculator(),
    )

    try:
        doc = handler.handle(request_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if as_json:
        click.echo(json.dumps(asdict(doc), indent=2, default=str))
    else:
        _echo_invoice(doc)
