"""Application services: register customers, vehicles and advisors.

These records belong to the surrounding system; the engine only needs
them to exist so requests, discounts and invoices can refer to them.
"""

from __future__ import annotations

from servicebay.domain.exceptions import NotFoundError
from servicebay.domain.model.party import (
    Customer,
    MembershipTier,
    ServiceAdvisor,
    Vehicle,
    VehicleCategory,
)
from servicebay.domain.repository.party_repository import PartyRepository


class RegisterCustomerHandler:

    def __init__(self, party_repo: PartyRepository) -> None:
        self._party_repo = party_repo

    def handle(
        self,
        name: str,
        email: str | None = None,
        phone: str | None = None,
        membership_tier: str = MembershipTier.STANDARD.value,
    ) -> Customer:
        customer = Customer.create(name, email, phone, MembershipTier.parse(membership_tier))
        self._party_repo.save_customer(customer)
        return customer


class ChangeMembershipHandler:

    def __init__(self, party_repo: PartyRepository) -> None:
        self._party_repo = party_repo

    def handle(self, customer_id: int, membership_tier: str) -> Customer:
        customer = self._party_repo.get_customer(customer_id)
        if customer is None:
            raise NotFoundError(f"Customer #{customer_id} not found")
        customer.membership_tier = MembershipTier.parse(membership_tier)
        self._party_repo.save_customer(customer)
        return customer


class RegisterVehicleHandler:

    def __init__(self, party_repo: PartyRepository) -> None:
        self._party_repo = party_repo

    def handle(
        self,
        customer_id: int,
        brand: str,
        model: str,
        registration_number: str,
        category: str = VehicleCategory.CAR.value,
        year: int | None = None,
    ) -> Vehicle:
        if self._party_repo.get_customer(customer_id) is None:
            raise NotFoundError(f"Customer #{customer_id} not found")
        vehicle = Vehicle.create(
            customer_id, brand, model, registration_number, VehicleCategory.parse(category), year
        )
        self._party_repo.save_vehicle(vehicle)
        return vehicle


class RegisterAdvisorHandler:

    def __init__(self, party_repo: PartyRepository) -> None:
        self._party_repo = party_repo

    def handle(self, name: str, email: str | None = None) -> ServiceAdvisor:
        advisor = ServiceAdvisor.create(name, email)
        self._party_repo.save_advisor(advisor)
        return advisor
