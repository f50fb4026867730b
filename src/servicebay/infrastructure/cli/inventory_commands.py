"""CLI commands for the InventoryItem aggregate."""

from __future__ import annotations

import click

from servicebay.application.manage_inventory import (
    AddInventoryItemHandler,
    DeleteInventoryItemHandler,
    RestockItemHandler,
    UpdateInventoryItemHandler,
)
from servicebay.application.show_inventory import (
    LowStockHandler,
    ShowInventoryHandler,
    ShowItemUsageHandler,
)
from servicebay.domain.exceptions import DomainException
from servicebay.infrastructure.bootstrap import inventory_ledger, inventory_repository
from servicebay.infrastructure.cli.formatting import echo_stock


@click.command("add")
@click.option("--name", required=True, help="Item name (unique).")
@click.option("--category", required=True, help="Item category, e.g. 'Fluids'.")
@click.option("--price", required=True, help="Unit price.")
@click.option("--stock", default="0", show_default=True, help="Opening stock.")
@click.option("--reorder", default="0", show_default=True, help="Reorder level.")
def inventory_add(name: str, category: str, price: str, stock: str, reorder: str) -> None:
    """Add a new inventory item."""
    handler = AddInventoryItemHandler(inventory_repo=inventory_repository())

    try:
        line = handler.handle(name, category, price, stock, reorder)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Item #{line.item_id} '{line.name}' added  (stock={line.current_stock})")


@click.command("update")
@click.option("--id", "item_id", required=True, type=int, help="Item ID.")
@click.option("--price", default=None, help="New unit price.")
@click.option("--reorder", default=None, help="New reorder level.")
@click.option("--category", default=None, help="New category.")
def inventory_update(
    item_id: int, price: str | None, reorder: str | None, category: str | None
) -> None:
    """Change an item's price, reorder level or category."""
    if price is None and reorder is None and category is None:
        raise click.ClickException("Nothing to update (use --price, --reorder or --category)")
    handler = UpdateInventoryItemHandler(inventory_repo=inventory_repository())

    try:
        line = handler.handle(item_id, price, reorder, category)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Item #{line.item_id} '{line.name}' updated.")


@click.command("restock")
@click.option("--id", "item_id", required=True, type=int, help="Item ID.")
@click.option("--qty", "quantity", required=True, help="Quantity received.")
def inventory_restock(item_id: int, quantity: str) -> None:
    """Add received stock to an item."""
    handler = RestockItemHandler(ledger=inventory_ledger())

    try:
        line = handler.handle(item_id, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"'{line.name}' restocked  (stock={line.current_stock})")


@click.command("show")
@click.option("--category", default=None, help="Only items in this category.")
def inventory_show(category: str | None) -> None:
    """Show stock levels for all items."""
    handler = ShowInventoryHandler(inventory_repo=inventory_repository())
    lines = handler.handle(category)

    if not lines:
        click.echo("No inventory records found.")
        return
    echo_stock(lines)


@click.command("delete")
@click.option("--id", "item_id", required=True, type=int, help="Item ID.")
def inventory_delete(item_id: int) -> None:
    """Delete an item that no service request is using."""
    handler = DeleteInventoryItemHandler(inventory_repo=inventory_repository())

    try:
        line = handler.handle(item_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Item #{line.item_id} '{line.name}' deleted")


@click.command("low-stock")
def inventory_low_stock() -> None:
    """List items at or below their reorder level."""
    handler = LowStockHandler(ledger=inventory_ledger())
    lines = handler.handle()

    if not lines:
        click.echo("All items are above their reorder level.")
        return
    echo_stock(lines)


@click.command("usage")
@click.option("--id", "item_id", required=True, type=int, help="Item ID.")
def inventory_usage(item_id: int) -> None:
    """Show where an item has been used."""
    handler = ShowItemUsageHandler(inventory_repo=inventory_repository())

    try:
        lines = handler.handle(item_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"  {'Usage':>5} {'Request':<9} {'Qty':>8} {'Price':>10}  {'Used at':<19}")
    click.echo(f"  {'-'*58}")
    for u in lines:
        mark = "  (reversed)" if u.reversed else ""
        click.echo(
            f"  {u.usage_id:>5} {u.request_reference:<9} {u.quantity:>8} "
            f"{u.unit_price:>10,.2f}  {u.used_at:%Y-%m-%d %H:%M:%S}{mark}"
        )
