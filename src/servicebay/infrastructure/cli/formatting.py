"""Table layouts shared by several command groups."""

from __future__ import annotations

import click

from servicebay.application.dto import (
    AuditEntryDTO,
    BillDTO,
    DashboardDTO,
    RequestSummaryDTO,
    StockLineDTO,
)


def echo_summary(dto: RequestSummaryDTO) -> None:
    state = "Dispatched" if dto.dispatched else dto.status
    click.echo(f"{dto.reference}  ({state})")
    click.echo(f"Service:   {dto.service_type}")
    if dto.description:
        click.echo(f"Notes:     {dto.description}")
    click.echo(f"Vehicle:   {dto.vehicle} [{dto.registration_number}]")
    click.echo(f"Customer:  {dto.customer_name} ({dto.membership_tier})")
    click.echo(f"Advisor:   {dto.advisor_name or '-'}")
    click.echo(f"Delivery:  {dto.delivery_date or '-'}")
    click.echo(f"Quoted:    {dto.quoted_base_fee:,.2f}")


def echo_requests(summaries: list[RequestSummaryDTO]) -> None:
    click.echo(
        f"  {'Ref':<8} {'Status':<10} {'Service':<22} {'Vehicle':<14} "
        f"{'Advisor':<16} {'Delivery':<10}"
    )
    click.echo(f"  {'-'*85}")
    for s in summaries:
        state = "Dispatched" if s.dispatched else s.status
        click.echo(
            f"  {s.reference:<8} {state:<10} {s.service_type:<22} {s.registration_number:<14} "
            f"{s.advisor_name or '-':<16} {str(s.delivery_date or '-'):<10}"
        )


def echo_bill(dto: BillDTO) -> None:
    click.echo(f"Bill for {dto.reference}  ({dto.membership_tier})")
    click.echo()
    if dto.materials:
        click.echo(f"  {'Material':<24} {'Qty':>8} {'Price':>10} {'Total':>12}")
        click.echo(f"  {'-'*57}")
        for m in dto.materials:
            click.echo(
                f"  {m.item_name:<24} {m.quantity:>8} {m.unit_price:>10,.2f} {m.total:>12,.2f}"
            )
        click.echo()
    if dto.labor:
        click.echo(f"  {'Labor':<24} {'Hours':>8} {'Rate':>10} {'Total':>12}")
        click.echo(f"  {'-'*57}")
        for line in dto.labor:
            click.echo(
                f"  {line.description[:24]:<24} {line.hours:>8} "
                f"{line.rate_per_hour:>10,.2f} {line.total:>12,.2f}"
            )
        click.echo()
    click.echo(f"  {'Materials':<44} {dto.materials_total:>12,.2f}")
    click.echo(f"  {'Labor':<44} {dto.labor_total:>12,.2f}")
    if dto.discount:
        click.echo(f"  {'Discount':<44} {-dto.discount:>12,.2f}")
    click.echo(f"  {'Subtotal':<44} {dto.subtotal:>12,.2f}")
    click.echo(f"  {'GST':<44} {dto.tax:>12,.2f}")
    click.echo(f"  {'-'*57}")
    click.echo(f"  {'Grand Total':<44} {dto.grand_total:>12,.2f}")


def echo_audit(entries: list[AuditEntryDTO]) -> None:
    click.echo(f"  {'#':>4} {'When':<19} {'Kind':<12} {'Cost':>10}  Description")
    click.echo(f"  {'-'*72}")
    for e in entries:
        cost = f"{e.labor_cost:,.2f}" if e.labor_cost is not None else ""
        mark = " (superseded)" if e.superseded else ""
        click.echo(
            f"  {e.id:>4} {e.created_at:%Y-%m-%d %H:%M:%S} {e.kind:<12} {cost:>10}  "
            f"{e.description}{mark}"
        )


def echo_stock(lines: list[StockLineDTO]) -> None:
    click.echo(
        f"  {'ID':>4} {'Item':<22} {'Category':<12} {'Stock':>8} {'Reorder':>8} "
        f"{'Price':>10} {'Level':<8}"
    )
    click.echo(f"  {'-'*78}")
    for s in lines:
        click.echo(
            f"  {s.item_id:>4} {s.name:<22} {s.category:<12} {s.current_stock:>8} "
            f"{s.reorder_level:>8} {s.unit_price:>10,.2f} {s.level:<8}"
        )


def echo_dashboard(dto: DashboardDTO) -> None:
    click.echo("Workshop")
    click.echo(f"  Due:          {dto.vehicles_due}")
    click.echo(f"  In progress:  {dto.vehicles_in_progress}")
    click.echo(f"  Completed:    {dto.vehicles_completed}")
    click.echo(f"  Dispatched:   {dto.vehicles_dispatched}")
    click.echo("Stock")
    click.echo(f"  Items:        {dto.total_items}")
    click.echo(f"  Low:          {dto.low_stock_items}")
    click.echo(f"  Critical:     {dto.critical_stock_items}")
