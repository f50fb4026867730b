"""CLI commands for consuming and reversing materials."""

from __future__ import annotations

import click

from servicebay.application.consume_material import ConsumeMaterialHandler
from servicebay.application.reverse_material_usage import ReverseMaterialUsageHandler
from servicebay.domain.exceptions import DomainException
from servicebay.infrastructure.bootstrap import (
    billing_calculator,
    inventory_ledger,
    inventory_repository,
    labor_repository,
    party_repository,
    request_repository,
)
from servicebay.infrastructure.cli.formatting import echo_bill


@click.command("consume")
@click.option("--request", "request_id", required=True, type=int, help="Request ID.")
@click.option("--item", "item_id", required=True, type=int, help="Inventory item ID.")
@click.option("--qty", "quantity", required=True, help="Quantity, e.g. 2 or 3.5.")
@click.option("--advisor", "advisor_id", type=int, default=None, help="Advisor using it.")
def material_consume(request_id: int, item_id: int, quantity: str, advisor_id: int | None) -> None:
    """Book stock against a request."""
    handler = ConsumeMaterialHandler(
        request_repo=request_repository(),
        party_repo=party_repository(),
        inventory_repo=inventory_repository(),
        labor_repo=labor_repository(),
        ledger=inventory_ledger(),
        calculator=billing_calculator(),
    )

    try:
        bill = handler.handle(request_id, item_id, quantity, advisor_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    echo_bill(bill)


@click.command("reverse")
@click.option("--usage", "usage_id", required=True, type=int, help="Material usage ID.")
def material_reverse(usage_id: int) -> None:
    """Undo a material usage and restore the stock."""
    handler = ReverseMaterialUsageHandler(
        request_repo=request_repository(),
        party_repo=party_repository(),
        inventory_repo=inventory_repository(),
        labor_repo=labor_repository(),
        ledger=inventory_ledger(),
        calculator=billing_calculator(),
    )

    try:
        bill = handler.handle(usage_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Usage #{usage_id} reversed.")
    echo_bill(bill)
