"""CLI commands for customers, vehicles and service advisors."""

from __future__ import annotations

import click

from servicebay.application.register_parties import (
    ChangeMembershipHandler,
    RegisterAdvisorHandler,
    RegisterCustomerHandler,
    RegisterVehicleHandler,
)
from servicebay.domain.exceptions import DomainException
from servicebay.infrastructure.bootstrap import party_repository


@click.command("add-customer")
@click.option("--name", required=True, help="Customer name.")
@click.option("--email", default=None, help="E-mail address.")
@click.option("--phone", default=None, help="Phone number.")
@click.option("--tier", default="Standard", show_default=True, help="Standard or Premium.")
def party_add_customer(name: str, email: str | None, phone: str | None, tier: str) -> None:
    """Register a customer."""
    handler = RegisterCustomerHandler(party_repo=party_repository())

    try:
        customer = handler.handle(name, email, phone, tier)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Customer #{customer.id} {customer.name} ({customer.membership_tier.value})")


@click.command("set-tier")
@click.option("--customer", "customer_id", required=True, type=int, help="Customer ID.")
@click.option("--tier", required=True, help="Standard or Premium.")
def party_set_tier(customer_id: int, tier: str) -> None:
    """Change a customer's membership tier."""
    handler = ChangeMembershipHandler(party_repo=party_repository())

    try:
        customer = handler.handle(customer_id, tier)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Customer #{customer.id} is now {customer.membership_tier.value}.")


@click.command("add-vehicle")
@click.option("--customer", "customer_id", required=True, type=int, help="Owner's customer ID.")
@click.option("--brand", required=True, help="Make, e.g. 'Maruti'.")
@click.option("--model", required=True, help="Model, e.g. 'Swift'.")
@click.option("--reg", "registration", required=True, help="Registration number.")
@click.option("--category", default="Car", show_default=True, help="Bike, Car or Truck.")
@click.option("--year", type=int, default=None, help="Model year.")
def party_add_vehicle(
    customer_id: int, brand: str, model: str, registration: str, category: str, year: int | None
) -> None:
    """Register a vehicle for a customer."""
    handler = RegisterVehicleHandler(party_repo=party_repository())

    try:
        vehicle = handler.handle(customer_id, brand, model, registration, category, year)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Vehicle #{vehicle.id} {vehicle.display_name} [{vehicle.registration_number}]")


@click.command("add-advisor")
@click.option("--name", required=True, help="Advisor name.")
@click.option("--email", default=None, help="E-mail address.")
def party_add_advisor(name: str, email: str | None) -> None:
    """Register a service advisor."""
    handler = RegisterAdvisorHandler(party_repo=party_repository())

    try:
        advisor = handler.handle(name, email)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Advisor #{advisor.id} {advisor.name}")
