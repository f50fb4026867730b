"""Lookups shared by several use cases.

Each raises NotFoundError instead of returning None, so handlers can
stay linear.
"""

from __future__ import annotations

from servicebay.domain.exceptions import NotFoundError
from servicebay.domain.model.bill import Bill
from servicebay.domain.model.party import Customer, ServiceAdvisor, Vehicle
from servicebay.domain.model.service_request import ServiceRequest
from servicebay.domain.repository.inventory_repository import InventoryRepository
from servicebay.domain.repository.labor_repository import LaborRepository
from servicebay.domain.repository.party_repository import PartyRepository
from servicebay.domain.repository.service_request_repository import (
    ServiceRequestRepository,
)
from servicebay.domain.service.billing_calculator import BillingCalculator


def load_request(request_repo: ServiceRequestRepository, request_id: int) -> ServiceRequest:
    request = request_repo.get_by_id(request_id)
    if request is None:
        raise NotFoundError(f"Service request #{request_id} not found")
    return request


def load_advisor(party_repo: PartyRepository, advisor_id: int) -> ServiceAdvisor:
    advisor = party_repo.get_advisor(advisor_id)
    if advisor is None:
        raise NotFoundError(f"Service advisor #{advisor_id} not found")
    return advisor


def load_vehicle_and_customer(
    party_repo: PartyRepository, request: ServiceRequest
) -> tuple[Vehicle, Customer]:
    vehicle = party_repo.get_vehicle(request.vehicle_id)
    if vehicle is None:
        raise NotFoundError(f"Vehicle #{request.vehicle_id} not found")
    customer = party_repo.get_customer(vehicle.customer_id)
    if customer is None:
        raise NotFoundError(f"Customer #{vehicle.customer_id} not found")
    return vehicle, customer


def compute_bill(
    request: ServiceRequest,
    party_repo: PartyRepository,
    inventory_repo: InventoryRepository,
    labor_repo: LaborRepository,
    calculator: BillingCalculator,
) -> Bill:
    """Recompute the request's bill from the ledgers as they stand now.

    Call it inside ``request_repo.locked(request.id)``: every material and
    labor write for the request holds the same lock, so the two ledgers
    are read as one snapshot.  The membership tier is read fresh on every
    call, never cached.
    """
    _, customer = load_vehicle_and_customer(party_repo, request)
    return calculator.calculate(
        request_id=request.id,  # type: ignore[arg-type]
        usages=inventory_repo.list_usages_for_request(request.id),  # type: ignore[arg-type]
        labor_entries=labor_repo.list_for_request(request.id),  # type: ignore[arg-type]
        membership_tier=customer.membership_tier,
    )
