"""JSON-file-backed implementation of LaborRepository."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

from servicebay.domain.model.labor import LaborEntry, LaborEntryKind
from servicebay.domain.model.service_request import ServiceStatus
from servicebay.domain.model.value_objects import Money
from servicebay.domain.repository.labor_repository import LaborRepository
from servicebay.infrastructure.persistence.json_store import (
    JsonFile,
    dump_decimal,
    dump_dt,
    load_decimal,
    load_dt,
    next_id,
)


class JsonLaborRepository(LaborRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    # --- LaborRepository interface --------------------------------------------

    def append(self, entries: list[LaborEntry]) -> None:
        with self._file.transaction() as records:
            self._append(records, entries)

    def list_for_request(self, request_id: int) -> list[LaborEntry]:
        return [
            self._to_domain(raw)
            for raw in self._file.read()
            if raw["request_id"] == request_id
        ]

    def replace_charges(self, request_id: int, entries: list[LaborEntry]) -> None:
        with self._file.transaction() as records:
            now = dump_dt(datetime.now(timezone.utc))
            for raw in records:
                if (
                    raw["request_id"] == request_id
                    and raw["kind"] == LaborEntryKind.LABOR_CHARGE.value
                    and raw.get("superseded_at") is None
                ):
                    raw["superseded_at"] = now
            self._append(records, entries)

    def _append(self, records: list[dict], entries: list[LaborEntry]) -> None:
        new_id = next_id(records)
        for entry in entries:
            entry.id = new_id
            records.append(self._to_raw(entry))
            new_id += 1

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(entry: LaborEntry) -> dict:
        return {
            "id": entry.id,
            "request_id": entry.request_id,
            "kind": entry.kind.value,
            "description": entry.description,
            "advisor_id": entry.advisor_id,
            "hours": dump_decimal(entry.hours),
            "rate_per_hour": dump_decimal(entry.rate_per_hour),
            "labor_minutes": entry.labor_minutes,
            "labor_cost": dump_decimal(entry.labor_cost.amount),
            "old_status": entry.old_status.value if entry.old_status else None,
            "new_status": entry.new_status.value if entry.new_status else None,
            "created_at": dump_dt(entry.created_at),
            "superseded_at": dump_dt(entry.superseded_at),
        }

    @staticmethod
    def _to_domain(raw: dict) -> LaborEntry:
        return LaborEntry(
            id=raw["id"],
            request_id=raw["request_id"],
            kind=LaborEntryKind(raw["kind"]),
            description=raw["description"],
            advisor_id=raw.get("advisor_id"),
            hours=load_decimal(raw.get("hours")),
            rate_per_hour=load_decimal(raw.get("rate_per_hour")),
            labor_minutes=raw.get("labor_minutes", 0),
            labor_cost=Money(Decimal(raw.get("labor_cost", "0"))),
            old_status=ServiceStatus(raw["old_status"]) if raw.get("old_status") else None,
            new_status=ServiceStatus(raw["new_status"]) if raw.get("new_status") else None,
            created_at=load_dt(raw["created_at"]),
            superseded_at=load_dt(raw.get("superseded_at")),
        )
