"""Application service: Labor Charges and Work Notes use cases.

Adding charges appends to the breakdown; replacing supersedes every
active charge and writes the new set as one batch.  Either way the
caller gets the recomputed bill back.
"""

from __future__ import annotations

import logging

from servicebay.application.common import compute_bill
from servicebay.application.dto import AuditEntryDTO, BillDTO, LaborChargeInput
from servicebay.application.mapping import to_audit_entry, to_bill_dto
from servicebay.domain.model.labor import LaborChargeSpec
from servicebay.domain.model.service_request import ServiceRequest
from servicebay.domain.repository.inventory_repository import InventoryRepository
from servicebay.domain.repository.labor_repository import LaborRepository
from servicebay.domain.repository.party_repository import PartyRepository
from servicebay.domain.repository.service_request_repository import (
    ServiceRequestRepository,
)
from servicebay.domain.service.billing_calculator import BillingCalculator
from servicebay.domain.service.labor_ledger import LaborLedger

logger = logging.getLogger(__name__)


def _specs(charges: list[LaborChargeInput]) -> list[LaborChargeSpec]:
    # Validate every line before anything is written.
    return [LaborChargeSpec.of(c.description, c.hours, c.rate_per_hour) for c in charges]


class _LaborHandler:

    def __init__(
        self,
        request_repo: ServiceRequestRepository,
        party_repo: PartyRepository,
        inventory_repo: InventoryRepository,
        labor_repo: LaborRepository,
        calculator: BillingCalculator,
    ) -> None:
        self._request_repo = request_repo
        self._party_repo = party_repo
        self._inventory_repo = inventory_repo
        self._labor_repo = labor_repo
        self._ledger = LaborLedger(labor_repo)
        self._calculator = calculator

    def _bill(self, request: ServiceRequest) -> BillDTO:
        # Called while the request is held.
        bill = compute_bill(
            request, self._party_repo, self._inventory_repo, self._labor_repo,
            self._calculator,
        )
        return to_bill_dto(bill, request)


class AddLaborChargesHandler(_LaborHandler):

    def handle(
        self,
        request_id: int,
        charges: list[LaborChargeInput],
        advisor_id: int | None = None,
    ) -> BillDTO:
        specs = _specs(charges)
        with self._request_repo.locked(request_id) as request:
            request.ensure_active()
            actor = advisor_id if advisor_id is not None else request.advisor_id
            entries = self._ledger.add_labor_charges(request_id, specs, actor)
            logger.info("Added %d labor charge(s) to %s", len(entries), request.reference)
            return self._bill(request)


class ReplaceLaborChargesHandler(_LaborHandler):

    def handle(
        self,
        request_id: int,
        charges: list[LaborChargeInput],
        advisor_id: int | None = None,
    ) -> BillDTO:
        specs = _specs(charges)
        with self._request_repo.locked(request_id) as request:
            request.ensure_active()
            actor = advisor_id if advisor_id is not None else request.advisor_id
            entries = self._ledger.replace_labor_charges(request_id, specs, actor)
            logger.info(
                "Replaced labor breakdown of %s with %d charge(s)",
                request.reference, len(entries),
            )
            return self._bill(request)


class AddWorkNoteHandler:

    def __init__(
        self,
        request_repo: ServiceRequestRepository,
        labor_repo: LaborRepository,
    ) -> None:
        self._request_repo = request_repo
        self._ledger = LaborLedger(labor_repo)

    def handle(self, request_id: int, text: str, advisor_id: int | None = None) -> AuditEntryDTO:
        with self._request_repo.locked(request_id) as request:
            request.ensure_open()
            actor = advisor_id if advisor_id is not None else request.advisor_id
            entry = self._ledger.add_note(request_id, text, actor)
        return to_audit_entry(entry)
