"""Service catalogue: quoted base fees and turnaround estimates.

The quote is informational (shown when a request is booked); the bill
is always computed from the material and labor ledgers.
"""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

from servicebay.domain.model.party import VehicleCategory
from servicebay.domain.model.value_objects import Money

DEFAULT_BASE_FEE = Money(Decimal("5000.00"))

BASE_FEES: dict[str, Money] = {
    "Oil Change": Money(Decimal("2000.00")),
    "Brake Service": Money(Decimal("5000.00")),
    "Tire Rotation": Money(Decimal("1500.00")),
    "Engine Repair": Money(Decimal("15000.00")),
    "Transmission Service": Money(Decimal("10000.00")),
    "Regular Maintenance": Money(Decimal("3500.00")),
    "Battery Replacement": Money(Decimal("4000.00")),
    "Diagnostics": Money(Decimal("2500.00")),
}

CATEGORY_MULTIPLIERS: dict[VehicleCategory, Decimal] = {
    VehicleCategory.BIKE: Decimal("0.8"),
    VehicleCategory.CAR: Decimal("1.2"),
    VehicleCategory.TRUCK: Decimal("1.5"),
}

DEFAULT_TURNAROUND_DAYS = 2

TURNAROUND_DAYS: dict[str, int] = {
    "Oil Change": 1,
    "Tire Rotation": 1,
    "Brake Service": 2,
    "Battery Replacement": 2,
    "Engine Repair": 5,
    "Transmission Service": 5,
    "Regular Maintenance": 3,
}


def quoted_base_fee(service_type: str, category: VehicleCategory) -> Money:
    base = BASE_FEES.get(service_type, DEFAULT_BASE_FEE)
    return (base * CATEGORY_MULTIPLIERS[category]).rounded()


def estimated_completion(service_type: str, category: VehicleCategory, start: date) -> date:
    days = TURNAROUND_DAYS.get(service_type, DEFAULT_TURNAROUND_DAYS)
    if category == VehicleCategory.BIKE:
        days = max(1, days - 1)
    elif category == VehicleCategory.TRUCK:
        days += 1
    return start + timedelta(days=days)
