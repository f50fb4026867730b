"""JSON-file-backed implementation of ServiceRequestRepository."""

from __future__ import annotations

from contextlib import contextmanager
from datetime import date
from pathlib import Path
from typing import Iterator

from servicebay.domain.exceptions import ConcurrencyConflictError, NotFoundError
from servicebay.domain.model.service_request import ServiceRequest, ServiceStatus
from servicebay.domain.repository.service_request_repository import (
    ServiceRequestRepository,
)
from servicebay.infrastructure.persistence.json_store import (
    JsonFile,
    dump_dt,
    load_dt,
    next_id,
)


class JsonServiceRequestRepository(ServiceRequestRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    # --- ServiceRequestRepository interface -----------------------------------

    def get_by_id(self, request_id: int) -> ServiceRequest | None:
        for raw in self._file.read():
            if raw["id"] == request_id:
                return self._to_domain(raw)
        return None

    def list_by_status(self, status: ServiceStatus) -> list[ServiceRequest]:
        return [
            self._to_domain(raw)
            for raw in self._file.read()
            if raw["status"] == status.value
        ]

    def list_by_advisor(self, advisor_id: int) -> list[ServiceRequest]:
        return [
            self._to_domain(raw)
            for raw in self._file.read()
            if raw.get("advisor_id") == advisor_id
        ]

    def save(self, request: ServiceRequest) -> None:
        with self._file.transaction() as records:
            if request.id is None:
                request.id = next_id(records)
                request.version = 1
                records.append(self._to_raw(request))
                return

            for i, raw in enumerate(records):
                if raw["id"] == request.id:
                    if raw["version"] != request.version:
                        raise ConcurrencyConflictError(
                            f"Service request REQ-{request.id} was modified concurrently"
                        )
                    request.version += 1
                    records[i] = self._to_raw(request)
                    return
            raise ConcurrencyConflictError(
                f"Service request REQ-{request.id} does not exist in the store"
            )

    @contextmanager
    def locked(self, request_id: int) -> Iterator[ServiceRequest]:
        with self._file.hold() as records:
            raw = next((r for r in records if r["id"] == request_id), None)
            if raw is None:
                raise NotFoundError(f"Service request #{request_id} not found")
            yield self._to_domain(raw)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(request: ServiceRequest) -> dict:
        return {
            "id": request.id,
            "vehicle_id": request.vehicle_id,
            "service_type": request.service_type,
            "description": request.description,
            "delivery_date": (
                request.delivery_date.isoformat() if request.delivery_date else None
            ),
            "advisor_id": request.advisor_id,
            "status": request.status.value,
            "created_at": dump_dt(request.created_at),
            "updated_at": dump_dt(request.updated_at),
            "dispatched_at": dump_dt(request.dispatched_at),
            "version": request.version,
        }

    @staticmethod
    def _to_domain(raw: dict) -> ServiceRequest:
        return ServiceRequest(
            id=raw["id"],
            vehicle_id=raw["vehicle_id"],
            service_type=raw["service_type"],
            description=raw.get("description"),
            delivery_date=(
                date.fromisoformat(raw["delivery_date"]) if raw.get("delivery_date") else None
            ),
            advisor_id=raw.get("advisor_id"),
            status=ServiceStatus(raw["status"]),
            created_at=load_dt(raw["created_at"]),
            updated_at=load_dt(raw["updated_at"]),
            dispatched_at=load_dt(raw.get("dispatched_at")),
            version=raw["version"],
        )
