import logging
from pathlib import Path

import click

from servicebay.application.show_dashboard import DashboardHandler
from servicebay.infrastructure import bootstrap
from servicebay.infrastructure.cli.billing_commands import bill_invoice, bill_pay, bill_show
from servicebay.infrastructure.cli.formatting import echo_dashboard
from servicebay.infrastructure.cli.inventory_commands import (
    inventory_add,
    inventory_delete,
    inventory_low_stock,
    inventory_restock,
    inventory_show,
    inventory_update,
    inventory_usage,
)
from servicebay.infrastructure.cli.labor_commands import labor_add, labor_note, labor_replace
from servicebay.infrastructure.cli.material_commands import material_consume, material_reverse
from servicebay.infrastructure.cli.party_commands import (
    party_add_advisor,
    party_add_customer,
    party_add_vehicle,
    party_set_tier,
)
from servicebay.infrastructure.cli.request_commands import (
    request_assign,
    request_book,
    request_completed,
    request_dispatch,
    request_history,
    request_list,
    request_queue,
    request_reassign,
    request_show,
    request_status,
)
from servicebay.infrastructure.config import CONFIG_ENV_VAR, ConfigError, load_settings


@click.group()
@click.option(
    "--config", "config_path", default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help=f"Settings file (default: ${CONFIG_ENV_VAR} or ./servicebay.toml).",
)
def cli(config_path: Path | None) -> None:
    """ServiceBay — vehicle service requests, billing and invoices"""
    try:
        settings = load_settings(config_path)
    except ConfigError as exc:
        raise click.ClickException(str(exc))

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    bootstrap.configure(settings)


@cli.command("dashboard")
def dashboard() -> None:
    """Show workshop and stock counts at a glance."""
    handler = DashboardHandler(
        request_repo=bootstrap.request_repository(),
        inventory_repo=bootstrap.inventory_repository(),
        ledger=bootstrap.inventory_ledger(),
    )
    echo_dashboard(handler.handle())


@cli.group()
def request() -> None:
    """Manage service requests."""


@cli.group()
def material() -> None:
    """Consume and reverse materials."""


@cli.group()
def labor() -> None:
    """Record labor and work notes."""


@cli.group()
def billing() -> None:
    """Bills, payments and invoices."""


@cli.group()
def inventory() -> None:
    """Manage inventory."""


@cli.group()
def party() -> None:
    """Manage customers, vehicles and advisors."""


# Register subcommands
request.add_command(request_assign)
request.add_command(request_book)
request.add_command(request_completed)
request.add_command(request_dispatch)
request.add_command(request_history)
request.add_command(request_list)
request.add_command(request_queue)
request.add_command(request_reassign)
request.add_command(request_show)
request.add_command(request_status)
material.add_command(material_consume)
material.add_command(material_reverse)
labor.add_command(labor_add)
labor.add_command(labor_note)
labor.add_command(labor_replace)
billing.add_command(bill_invoice)
billing.add_command(bill_pay)
billing.add_command(bill_show)
inventory.add_command(inventory_add)
inventory.add_command(inventory_delete)
inventory.add_command(inventory_low_stock)
inventory.add_command(inventory_restock)
inventory.add_command(inventory_show)
inventory.add_command(inventory_update)
inventory.add_command(inventory_usage)
party.add_command(party_add_advisor)
party.add_command(party_add_customer)
party.add_command(party_add_vehicle)
party.add_command(party_set_tier)
