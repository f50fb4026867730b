"""Abstract repository for customers, vehicles and service advisors."""

from __future__ import annotations

from abc import ABC, abstractmethod

from servicebay.domain.model.party import Customer, ServiceAdvisor, Vehicle


class PartyRepository(ABC):

    @abstractmethod
    def get_customer(self, customer_id: int) -> Customer | None:
        """Return a customer by ID, or None."""

    @abstractmethod
    def get_vehicle(self, vehicle_id: int) -> Vehicle | None:
        """Return a vehicle by ID, or None."""

    @abstractmethod
    def get_advisor(self, advisor_id: int) -> ServiceAdvisor | None:
        """Return a service advisor by ID, or None."""

    @abstractmethod
    def save_customer(self, customer: Customer) -> None:
        """Persist a new or updated customer (assigns ``id`` on insert)."""

    @abstractmethod
    def save_vehicle(self, vehicle: Vehicle) -> None:
        """Persist a new or updated vehicle (assigns ``id`` on insert)."""

    @abstractmethod
    def save_advisor(self, advisor: ServiceAdvisor) -> None:
        """Persist a new or updated advisor (assigns ``id`` on insert)."""
