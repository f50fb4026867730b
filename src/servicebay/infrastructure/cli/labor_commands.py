"""CLI commands for labor charges and work notes."""

from __future__ import annotations

import click

from servicebay.application.dto import LaborChargeInput
from servicebay.application.record_labor import (
    AddLaborChargesHandler,
    AddWorkNoteHandler,
    ReplaceLaborChargesHandler,
)
from servicebay.domain.exceptions import DomainException
from servicebay.infrastructure.bootstrap import (
    billing_calculator,
    inventory_repository,
    labor_repository,
    party_repository,
    request_repository,
)
from servicebay.infrastructure.cli.formatting import echo_bill


def _parse_charges(raw: tuple[str, ...]) -> list[LaborChargeInput]:
    """Parse ('Brake pads:1.5:800', ...) into LaborChargeInput list."""
    charges: list[LaborChargeInput] = []
    for item in raw:
        parts = item.rsplit(":", 2)
        if len(parts) != 3:
            raise click.BadParameter(
                f"Invalid charge '{item}'. Expected 'Description:Hours:Rate'."
            )
        description, hours, rate = parts
        charges.append(LaborChargeInput(description.strip(), hours.strip(), rate.strip()))
    return charges


def _handler_args() -> dict:
    return dict(
        request_repo=request_repository(),
        party_repo=party_repository(),
        inventory_repo=inventory_repository(),
        labor_repo=labor_repository(),
        calculator=billing_calculator(),
    )


@click.command("add")
@click.option("--request", "request_id", required=True, type=int, help="Request ID.")
@click.option(
    "--charge", "charges", required=True, multiple=True,
    help="'Description:Hours:Rate'; repeat for several lines.",
)
@click.option("--advisor", "advisor_id", type=int, default=None, help="Advisor doing the work.")
def labor_add(request_id: int, charges: tuple[str, ...], advisor_id: int | None) -> None:
    """Append labor charges to a request."""
    specs = _parse_charges(charges)
    handler = AddLaborChargesHandler(**_handler_args())

    try:
        bill = handler.handle(request_id, specs, advisor_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    echo_bill(bill)


@click.command("replace")
@click.option("--request", "request_id", required=True, type=int, help="Request ID.")
@click.option(
    "--charge", "charges", multiple=True,
    help="'Description:Hours:Rate'; omit entirely to clear the labor breakdown.",
)
@click.option("--advisor", "advisor_id", type=int, default=None, help="Advisor doing the work.")
def labor_replace(request_id: int, charges: tuple[str, ...], advisor_id: int | None) -> None:
    """Replace the whole labor breakdown of a request."""
    specs = _parse_charges(charges)
    handler = ReplaceLaborChargesHandler(**_handler_args())

    try:
        bill = handler.handle(request_id, specs, advisor_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    echo_bill(bill)


@click.command("note")
@click.option("--request", "request_id", required=True, type=int, help="Request ID.")
@click.option("--text", required=True, help="Note text.")
@click.option("--advisor", "advisor_id", type=int, default=None, help="Author.")
def labor_note(request_id: int, text: str, advisor_id: int | None) -> None:
    """Add a work note (no effect on the bill)."""
    handler = AddWorkNoteHandler(request_repo=request_repository(), labor_repo=labor_repository())

    try:
        entry = handler.handle(request_id, text, advisor_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Note #{entry.id} added to REQ-{request_id}.")
