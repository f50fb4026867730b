"""CLI commands for the ServiceRequest lifecycle."""

from __future__ import annotations

from datetime import datetime

import click

from servicebay.application.assign_advisor import AssignAdvisorHandler
from servicebay.application.book_service_request import BookServiceRequestHandler
from servicebay.application.dispatch_request import DispatchRequestHandler
from servicebay.application.reassign_advisor import ReassignAdvisorHandler
from servicebay.application.show_history import ShowHistoryHandler
from servicebay.application.show_request import (
    AdvisorQueueHandler,
    CompletedServicesHandler,
    ListRequestsHandler,
    ShowRequestHandler,
)
from servicebay.application.transition_status import TransitionStatusHandler
from servicebay.domain.exceptions import DomainException
from servicebay.domain.model.service_request import ServiceStatus
from servicebay.infrastructure.bootstrap import (
    billing_calculator,
    inventory_repository,
    invoice_repository,
    labor_repository,
    notifier,
    party_repository,
    payment_repository,
    request_repository,
)
from servicebay.infrastructure.cli.formatting import echo_audit, echo_requests, echo_summary

_DATE = click.DateTime(formats=["%Y-%m-%d"])


@click.command("book")
@click.option("--vehicle", "vehicle_id", required=True, type=int, help="Vehicle ID.")
@click.option("--service", "service_type", required=True, help="Service type, e.g. 'Oil Change'.")
@click.option("--description", default=None, help="What the customer reported.")
@click.option("--delivery", "delivery", type=_DATE, default=None, help="Promised date (YYYY-MM-DD).")
def request_book(
    vehicle_id: int, service_type: str, description: str | None, delivery: datetime | None
) -> None:
    """Book a new service request (status Received)."""
    handler = BookServiceRequestHandler(
        request_repo=request_repository(),
        party_repo=party_repository(),
    )

    try:
        dto = handler.handle(
            vehicle_id, service_type, description, delivery.date() if delivery else None
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"{dto.reference} booked.")
    echo_summary(dto)


@click.command("show")
@click.option("--id", "request_id", required=True, type=int, help="Request ID to display.")
def request_show(request_id: int) -> None:
    """Show a service request."""
    handler = ShowRequestHandler(request_repo=request_repository(), party_repo=party_repository())

    try:
        dto = handler.handle(request_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    echo_summary(dto)


@click.command("list")
@click.option(
    "--status", default=ServiceStatus.RECEIVED.value, show_default=True,
    help="Received, Diagnosis, Repair or Completed.",
)
def request_list(status: str) -> None:
    """List service requests in one status."""
    handler = ListRequestsHandler(request_repo=request_repository(), party_repo=party_repository())

    try:
        summaries = handler.handle(ServiceStatus.parse(status))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not summaries:
        click.echo(f"No requests in {status}.")
        return
    echo_requests(summaries)


@click.command("queue")
@click.option("--advisor", "advisor_id", required=True, type=int, help="Advisor ID.")
def request_queue(advisor_id: int) -> None:
    """List an advisor's requests that are not yet Completed."""
    handler = AdvisorQueueHandler(request_repo=request_repository(), party_repo=party_repository())

    try:
        summaries = handler.handle(advisor_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not summaries:
        click.echo(f"Advisor #{advisor_id} has nothing in progress.")
        return
    echo_requests(summaries)


@click.command("completed")
@click.option("--category", default=None, help="Bike, Car or Truck.")
@click.option("--search", default=None, help="Vehicle, registration or customer name.")
def request_completed(category: str | None, search: str | None) -> None:
    """List completed services, dispatched or awaiting pickup."""
    handler = CompletedServicesHandler(
        request_repo=request_repository(),
        party_repo=party_repository(),
    )

    try:
        summaries = handler.handle(category, search)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not summaries:
        click.echo("No completed services match.")
        return
    echo_requests(summaries)


@click.command("assign")
@click.option("--id", "request_id", required=True, type=int, help="Request ID.")
@click.option("--advisor", "advisor_id", required=True, type=int, help="Advisor ID.")
@click.option("--delivery", "delivery", type=_DATE, default=None, help="Revised date (YYYY-MM-DD).")
@click.option("--notes", default=None, help="Assignment notes.")
def request_assign(
    request_id: int, advisor_id: int, delivery: datetime | None, notes: str | None
) -> None:
    """Assign the first advisor (moves Received -> Diagnosis)."""
    handler = AssignAdvisorHandler(
        request_repo=request_repository(),
        party_repo=party_repository(),
        labor_repo=labor_repository(),
    )

    try:
        dto = handler.handle(request_id, advisor_id, delivery.date() if delivery else None, notes)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"{dto.reference} assigned to {dto.advisor_name}  (status={dto.status})")


@click.command("reassign")
@click.option("--id", "request_id", required=True, type=int, help="Request ID.")
@click.option("--advisor", "advisor_id", required=True, type=int, help="New advisor ID.")
@click.option("--reason", required=True, help="Why the request changes hands.")
def request_reassign(request_id: int, advisor_id: int, reason: str) -> None:
    """Hand an open request to a different advisor."""
    handler = ReassignAdvisorHandler(
        request_repo=request_repository(),
        party_repo=party_repository(),
        labor_repo=labor_repository(),
    )

    try:
        dto = handler.handle(request_id, advisor_id, reason)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"{dto.reference} reassigned to {dto.advisor_name}.")


@click.command("status")
@click.option("--id", "request_id", required=True, type=int, help="Request ID.")
@click.option("--to", "new_status", required=True, help="Diagnosis, Repair or Completed.")
@click.option("--note", default=None, help="Note recorded with the change.")
@click.option("--notify", is_flag=True, default=False, help="Notify the customer.")
@click.option("--actor", "actor_id", type=int, default=None, help="Advisor making the change.")
def request_status(
    request_id: int, new_status: str, note: str | None, notify: bool, actor_id: int | None
) -> None:
    """Move a request forward to a new status."""
    handler = TransitionStatusHandler(
        request_repo=request_repository(),
        party_repo=party_repository(),
        labor_repo=labor_repository(),
        notifier=notifier(),
    )

    try:
        result = handler.handle(
            request_id, ServiceStatus.parse(new_status), note, notify, actor_id
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"REQ-{request_id}: {result.old_status} -> {result.new_status}")
    if notify:
        click.echo("Customer notified." if result.notification_sent else "Notification failed.")


@click.command("dispatch")
@click.option("--id", "request_id", required=True, type=int, help="Request ID.")
def request_dispatch(request_id: int) -> None:
    """Hand the vehicle back (requires Completed and paid)."""
    handler = DispatchRequestHandler(
        request_repo=request_repository(),
        party_repo=party_repository(),
        inventory_repo=inventory_repository(),
        labor_repo=labor_repository(),
        payment_repo=payment_repository(),
        invoice_repo=invoice_repository(),
        calculator=billing_calculator(),
    )

    try:
        dto = handler.handle(request_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if dto.invoice_generated:
        click.echo(f"Invoice {dto.invoice_reference} generated.")
    click.echo(f"{dto.reference} dispatched — net {dto.net_amount:,.2f}.")


@click.command("history")
@click.option("--id", "request_id", required=True, type=int, help="Request ID.")
def request_history(request_id: int) -> None:
    """Show the audit trail of a request."""
    handler = ShowHistoryHandler(request_repo=request_repository(), labor_repo=labor_repository())

    try:
        entries = handler.handle(request_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    echo_audit(entries)
