"""Customers, their vehicles, and the service advisors who work on them.

These records are owned outside the billing core; the engine only reads
them (membership tier for the discount, identity for invoices and
notifications).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from servicebay.domain.exceptions import ValidationError


def _parse_enum(enum_cls, raw: str, what: str):
    for member in enum_cls:
        if raw.strip().lower() in (member.value.lower(), member.name.lower()):
            return member
    choices = ", ".join(m.value for m in enum_cls)
    raise ValidationError(f"Unknown {what} {raw!r} (expected one of: {choices})")


class MembershipTier(Enum):
    STANDARD = "Standard"
    PREMIUM = "Premium"

    @staticmethod
    def parse(raw: str) -> MembershipTier:
        return _parse_enum(MembershipTier, raw, "membership tier")


class VehicleCategory(Enum):
    BIKE = "Bike"
    CAR = "Car"
    TRUCK = "Truck"

    @staticmethod
    def parse(raw: str) -> VehicleCategory:
        return _parse_enum(VehicleCategory, raw, "vehicle category")


@dataclass
class Customer:
    id: int | None
    name: str
    email: str | None = None
    phone: str | None = None
    membership_tier: MembershipTier = MembershipTier.STANDARD

    @property
    def is_premium(self) -> bool:
        return self.membership_tier == MembershipTier.PREMIUM

    @staticmethod
    def create(
        name: str,
        email: str | None = None,
        phone: str | None = None,
        membership_tier: MembershipTier = MembershipTier.STANDARD,
    ) -> Customer:
        if not name or not name.strip():
            raise ValidationError("Customer name is required")
        return Customer(
            id=None,
            name=name.strip(),
            email=email.strip() if email else None,
            phone=phone.strip() if phone else None,
            membership_tier=membership_tier,
        )


@dataclass
class Vehicle:
    id: int | None
    customer_id: int
    brand: str
    model: str
    registration_number: str
    category: VehicleCategory = VehicleCategory.CAR
    year: int | None = None

    @property
    def display_name(self) -> str:
        return f"{self.brand} {self.model}"

    @staticmethod
    def create(
        customer_id: int,
        brand: str,
        model: str,
        registration_number: str,
        category: VehicleCategory = VehicleCategory.CAR,
        year: int | None = None,
    ) -> Vehicle:
        if not registration_number or not registration_number.strip():
            raise ValidationError("Registration number is required")
        if not brand or not brand.strip() or not model or not model.strip():
            raise ValidationError("Vehicle brand and model are required")
        return Vehicle(
            id=None,
            customer_id=customer_id,
            brand=brand.strip(),
            model=model.strip(),
            registration_number=registration_number.strip().upper(),
            category=category,
            year=year,
        )


@dataclass
class ServiceAdvisor:
    id: int | None
    name: str
    email: str | None = None

    @staticmethod
    def create(name: str, email: str | None = None) -> ServiceAdvisor:
        if not name or not name.strip():
            raise ValidationError("Advisor name is required")
        return ServiceAdvisor(id=None, name=name.strip(), email=email.strip() if email else None)
