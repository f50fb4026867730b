"""Domain service: Labor Ledger.

There is no single labor row per request: the labor total is always the
sum of the charges that have not been superseded.
"""

from __future__ import annotations

from servicebay.domain.exceptions import ValidationError
from servicebay.domain.model.labor import LaborChargeSpec, LaborEntry
from servicebay.domain.model.service_request import ServiceStatus
from servicebay.domain.model.value_objects import Money
from servicebay.domain.repository.labor_repository import LaborRepository


class LaborLedger:

    def __init__(self, labor_repo: LaborRepository) -> None:
        self._labor_repo = labor_repo

    def add_labor_charge(
        self,
        request_id: int,
        description: str,
        hours,
        rate_per_hour,
        advisor_id: int | None = None,
    ) -> LaborEntry:
        spec = LaborChargeSpec.of(description, hours, rate_per_hour)
        return self.add_labor_charges(request_id, [spec], advisor_id)[0]

    def add_labor_charges(
        self,
        request_id: int,
        charges: list[LaborChargeSpec],
        advisor_id: int | None = None,
    ) -> list[LaborEntry]:
        if not charges:
            raise ValidationError("At least one labor charge is required")
        entries = [LaborEntry.labor_charge(request_id, c, advisor_id) for c in charges]
        self._labor_repo.append(entries)
        return entries

    def replace_labor_charges(
        self,
        request_id: int,
        charges: list[LaborChargeSpec],
        advisor_id: int | None = None,
    ) -> list[LaborEntry]:
        """Supersede every active charge and append *charges* in one batch.

        An empty list clears the labor breakdown; history is kept.
        """
        entries = [LaborEntry.labor_charge(request_id, c, advisor_id) for c in charges]
        self._labor_repo.replace_charges(request_id, entries)
        return entries

    def add_note(self, request_id: int, text: str, advisor_id: int | None = None) -> LaborEntry:
        entry = LaborEntry.work_note(request_id, text, advisor_id)
        self._labor_repo.append([entry])
        return entry

    def record_status_change(
        self,
        request_id: int,
        old_status: ServiceStatus,
        new_status: ServiceStatus,
        advisor_id: int | None = None,
        note: str | None = None,
    ) -> LaborEntry:
        entry = LaborEntry.status_change(request_id, old_status, new_status, advisor_id, note)
        self._labor_repo.append([entry])
        return entry

    def entries(self, request_id: int) -> list[LaborEntry]:
        return self._labor_repo.list_for_request(request_id)

    def total_labor_cost(self, request_id: int) -> Money:
        return sum(
            (e.labor_cost for e in self._labor_repo.list_for_request(request_id) if e.is_billable),
            Money.zero(),
        )
