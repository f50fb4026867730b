"""Application service: Dashboard use case (query).

Counts for the front desk: vehicles waiting for an advisor, vehicles
being worked on, vehicles ready for pickup, and the state of the stock
room.  A Completed request counts as completed until it is dispatched.
"""

from __future__ import annotations

from servicebay.application.dto import DashboardDTO
from servicebay.domain.model.inventory import StockLevel
from servicebay.domain.model.service_request import ServiceStatus
from servicebay.domain.repository.inventory_repository import InventoryRepository
from servicebay.domain.repository.service_request_repository import (
    ServiceRequestRepository,
)
from servicebay.domain.service.inventory_ledger import InventoryLedger


class DashboardHandler:

    def __init__(
        self,
        request_repo: ServiceRequestRepository,
        inventory_repo: InventoryRepository,
        ledger: InventoryLedger,
    ) -> None:
        self._request_repo = request_repo
        self._inventory_repo = inventory_repo
        self._ledger = ledger

    def handle(self) -> DashboardDTO:
        def count(status: ServiceStatus) -> int:
            return len(self._request_repo.list_by_status(status))

        completed = self._request_repo.list_by_status(ServiceStatus.COMPLETED)
        dispatched = sum(1 for r in completed if r.is_dispatched)
        low = self._ledger.low_stock()

        return DashboardDTO(
            vehicles_due=count(ServiceStatus.RECEIVED),
            vehicles_in_progress=count(ServiceStatus.DIAGNOSIS) + count(ServiceStatus.REPAIR),
            vehicles_completed=len(completed) - dispatched,
            vehicles_dispatched=dispatched,
            total_items=len(self._inventory_repo.list_all()),
            low_stock_items=len(low),
            critical_stock_items=sum(1 for i in low if i.stock_level == StockLevel.CRITICAL),
        )
