"""Abstract repository for the append-only LaborEntry ledger."""

from __future__ import annotations

from abc import ABC, abstractmethod

from servicebay.domain.model.labor import LaborEntry


class LaborRepository(ABC):

    @abstractmethod
    def append(self, entries: list[LaborEntry]) -> None:
        """Insert a batch of new entries as one unit, assigning their IDs."""

    @abstractmethod
    def list_for_request(self, request_id: int) -> list[LaborEntry]:
        """Return every entry for the request in commit order."""

    @abstractmethod
    def replace_charges(self, request_id: int, entries: list[LaborEntry]) -> None:
        """Atomically supersede the request's active charges and append *entries*."""
