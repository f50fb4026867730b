"""Abstract repository for InventoryItem and its MaterialUsage ledger."""

from __future__ import annotations

from abc import ABC, abstractmethod

from servicebay.domain.model.inventory import InventoryItem, MaterialUsage


class InventoryRepository(ABC):

    @abstractmethod
    def get_by_id(self, item_id: int) -> InventoryItem | None:
        """Return a detached copy of the item, or None."""

    @abstractmethod
    def get_by_name(self, name: str) -> InventoryItem | None:
        """Return the item with this name (case-insensitive), or None."""

    @abstractmethod
    def list_all(self) -> list[InventoryItem]:
        """Return every inventory item."""

    @abstractmethod
    def save(self, item: InventoryItem) -> None:
        """Insert or compare-and-set an item (see ServiceRequestRepository.save)."""

    @abstractmethod
    def delete(self, item: InventoryItem) -> None:
        """Remove *item* if its stored version still equals ``item.version``.

        Raises ConcurrencyConflictError otherwise, so an item consumed or
        restocked after the caller checked it is never removed.  Usage
        rows referring to the item are kept.
        """

    @abstractmethod
    def get_usage(self, usage_id: int) -> MaterialUsage | None:
        """Return a material usage by ID, or None."""

    @abstractmethod
    def list_usages_for_request(self, request_id: int) -> list[MaterialUsage]:
        """Return the request's usages (reversed ones included) in commit order."""

    @abstractmethod
    def list_usages_for_item(self, item_id: int) -> list[MaterialUsage]:
        """Return every usage of an item in commit order."""

    @abstractmethod
    def commit_consumption(self, item: InventoryItem, usage: MaterialUsage) -> None:
        """Atomically compare-and-set *item* and insert *usage*.

        Either both are written or neither is; a version mismatch raises
        ConcurrencyConflictError.
        """

    @abstractmethod
    def commit_reversal(self, item: InventoryItem, usage: MaterialUsage) -> None:
        """Atomically compare-and-set *item* and store the reversal mark on *usage*."""
