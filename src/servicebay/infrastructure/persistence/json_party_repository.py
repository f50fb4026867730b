"""JSON-file-backed implementation of PartyRepository.

Customers, vehicles and advisors share one file, one list per kind.
"""

from __future__ import annotations

from pathlib import Path

from servicebay.domain.model.party import (
    Customer,
    MembershipTier,
    ServiceAdvisor,
    Vehicle,
    VehicleCategory,
)
from servicebay.domain.repository.party_repository import PartyRepository
from servicebay.infrastructure.persistence.json_store import JsonFile, next_id


def _empty() -> dict:
    return {"customers": [], "vehicles": [], "advisors": []}


class JsonPartyRepository(PartyRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path, empty=_empty)

    # --- PartyRepository interface --------------------------------------------

    def get_customer(self, customer_id: int) -> Customer | None:
        raw = self._find("customers", customer_id)
        return self._customer_to_domain(raw) if raw else None

    def get_vehicle(self, vehicle_id: int) -> Vehicle | None:
        raw = self._find("vehicles", vehicle_id)
        return self._vehicle_to_domain(raw) if raw else None

    def get_advisor(self, advisor_id: int) -> ServiceAdvisor | None:
        raw = self._find("advisors", advisor_id)
        return ServiceAdvisor(id=raw["id"], name=raw["name"], email=raw.get("email")) if raw else None

    def save_customer(self, customer: Customer) -> None:
        self._upsert("customers", customer, {
            "name": customer.name,
            "email": customer.email,
            "phone": customer.phone,
            "membership_tier": customer.membership_tier.value,
        })

    def save_vehicle(self, vehicle: Vehicle) -> None:
        self._upsert("vehicles", vehicle, {
            "customer_id": vehicle.customer_id,
            "brand": vehicle.brand,
            "model": vehicle.model,
            "registration_number": vehicle.registration_number,
            "category": vehicle.category.value,
            "year": vehicle.year,
        })

    def save_advisor(self, advisor: ServiceAdvisor) -> None:
        self._upsert("advisors", advisor, {"name": advisor.name, "email": advisor.email})

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _customer_to_domain(raw: dict) -> Customer:
        return Customer(
            id=raw["id"],
            name=raw["name"],
            email=raw.get("email"),
            phone=raw.get("phone"),
            membership_tier=MembershipTier(raw.get("membership_tier", "Standard")),
        )

    @staticmethod
    def _vehicle_to_domain(raw: dict) -> Vehicle:
        return Vehicle(
            id=raw["id"],
            customer_id=raw["customer_id"],
            brand=raw["brand"],
            model=raw["model"],
            registration_number=raw["registration_number"],
            category=VehicleCategory(raw.get("category", "Car")),
            year=raw.get("year"),
        )

    # --- File helpers ---------------------------------------------------------

    def _find(self, kind: str, entity_id: int) -> dict | None:
        for raw in self._file.read()[kind]:
            if raw["id"] == entity_id:
                return raw
        return None

    def _upsert(self, kind: str, entity, fields: dict) -> None:
        with self._file.transaction() as data:
            records = data[kind]
            if entity.id is None:
                entity.id = next_id(records)
                records.append({"id": entity.id, **fields})
                return
            for i, raw in enumerate(records):
                if raw["id"] == entity.id:
                    records[i] = {"id": entity.id, **fields}
                    return
            records.append({"id": entity.id, **fields})
