"""Abstract repository for the ServiceRequest aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager

from servicebay.domain.model.service_request import ServiceRequest, ServiceStatus


class ServiceRequestRepository(ABC):

    @abstractmethod
    def get_by_id(self, request_id: int) -> ServiceRequest | None:
        """Return a detached copy of the request, or None if not found."""

    @abstractmethod
    def list_by_status(self, status: ServiceStatus) -> list[ServiceRequest]:
        """Return every request currently in *status*."""

    @abstractmethod
    def list_by_advisor(self, advisor_id: int) -> list[ServiceRequest]:
        """Return every request assigned to *advisor_id*."""

    @abstractmethod
    def save(self, request: ServiceRequest) -> None:
        """Insert a new request or compare-and-set an existing one.

        Assigns ``id`` on insert.  On update the stored version must equal
        ``request.version``, otherwise ConcurrencyConflictError is raised
        and nothing is written.  Bumps ``request.version`` on success.
        """

    @abstractmethod
    def locked(self, request_id: int) -> AbstractContextManager[ServiceRequest]:
        """Hold the request for the duration of a ``with`` block.

        Yields a fresh copy, or raises NotFoundError.  Until the block
        exits, saves of the request from other threads or processes wait,
        so a check made on the copy (open, active) still holds when the
        block writes the material and labor ledgers, and ledger reads made
        inside the block see one consistent state.  ``save`` may be called
        inside the block.
        """
