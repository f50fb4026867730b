"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.  The CLI calls
``configure()`` once with the loaded settings before building anything.
"""

from __future__ import annotations

from pathlib import Path

from servicebay.domain.service.billing_calculator import BillingCalculator
from servicebay.domain.service.inventory_ledger import InventoryLedger
from servicebay.infrastructure.config import Settings
from servicebay.infrastructure.notification.logging_notifier import LoggingNotifier
from servicebay.infrastructure.persistence.json_billing_repository import (
    JsonInvoiceRepository,
    JsonPaymentRepository,
)
from servicebay.infrastructure.persistence.json_inventory_repository import (
    JsonInventoryRepository,
)
from servicebay.infrastructure.persistence.json_labor_repository import (
    JsonLaborRepository,
)
from servicebay.infrastructure.persistence.json_party_repository import (
    JsonPartyRepository,
)
from servicebay.infrastructure.persistence.json_service_request_repository import (
    JsonServiceRequestRepository,
)

_settings = Settings()


def configure(settings: Settings) -> None:
    global _settings
    _settings = settings


def settings() -> Settings:
    return _settings


def _data_dir() -> Path:
    return _settings.store.data_dir


# --- Repositories -------------------------------------------------------------


def request_repository() -> JsonServiceRequestRepository:
    return JsonServiceRequestRepository(_data_dir() / "service_requests.json")


def party_repository() -> JsonPartyRepository:
    return JsonPartyRepository(_data_dir() / "parties.json")


def inventory_repository() -> JsonInventoryRepository:
    return JsonInventoryRepository(_data_dir() / "inventory.json")


def labor_repository() -> JsonLaborRepository:
    return JsonLaborRepository(_data_dir() / "labor_entries.json")


def payment_repository() -> JsonPaymentRepository:
    return JsonPaymentRepository(_data_dir() / "payments.json")


def invoice_repository() -> JsonInvoiceRepository:
    return JsonInvoiceRepository(_data_dir() / "invoices.json")


# --- Services -----------------------------------------------------------------


def billing_calculator() -> BillingCalculator:
    return BillingCalculator(_settings.billing.policy())


def inventory_ledger() -> InventoryLedger:
    return InventoryLedger(inventory_repository(), _settings.inventory.max_attempts)


def notifier() -> LoggingNotifier:
    return LoggingNotifier()
