"""Domain service: Inventory Ledger.

Owns the cross-record rule that a stock decrement and the MaterialUsage
explaining it are committed together.  Each attempt re-reads the item,
checks stock, and hands both records to the repository's atomic
compare-and-set; losing a race to another writer triggers a bounded
retry on fresh data, so two consumers can never both take the last unit.
"""

from __future__ import annotations

import logging

from servicebay.domain.exceptions import ConcurrencyConflictError, NotFoundError
from servicebay.domain.model.inventory import InventoryItem, MaterialUsage, StockLevel
from servicebay.domain.model.value_objects import Quantity
from servicebay.domain.repository.inventory_repository import InventoryRepository

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3


class InventoryLedger:

    def __init__(
        self,
        inventory_repo: InventoryRepository,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._inventory_repo = inventory_repo
        self._max_attempts = max_attempts

    def consume(
        self,
        item_id: int,
        request_id: int,
        quantity: Quantity,
        advisor_id: int | None = None,
    ) -> MaterialUsage:
        """Take *quantity* of an item for a request.

        Raises InsufficientStockError (nothing written) if stock is short,
        or ConcurrencyConflictError once the retry budget is spent.
        """
        for attempt in range(1, self._max_attempts + 1):
            item = self._load(item_id)
            item.consume(quantity)
            usage = MaterialUsage.record(request_id, item, quantity, advisor_id)
            try:
                self._inventory_repo.commit_consumption(item, usage)
            except ConcurrencyConflictError:
                logger.debug(
                    "Stock of item %s changed during consume (attempt %d/%d)",
                    item_id, attempt, self._max_attempts,
                )
                continue
            logger.info(
                "Consumed %s x %s for request %s (stock now %s)",
                quantity, item.name, request_id, item.current_stock,
            )
            return usage

        raise ConcurrencyConflictError(
            f"Could not consume item #{item_id} after {self._max_attempts} attempts"
        )

    def reverse(self, usage_id: int) -> MaterialUsage:
        """Undo a usage: restore its quantity and mark it reversed."""
        for attempt in range(1, self._max_attempts + 1):
            usage = self._inventory_repo.get_usage(usage_id)
            if usage is None:
                raise NotFoundError(f"Material usage #{usage_id} not found")
            usage.reverse()
            item = self._load(usage.item_id)
            item.restore(usage.quantity)
            try:
                self._inventory_repo.commit_reversal(item, usage)
            except ConcurrencyConflictError:
                logger.debug(
                    "Stock of item %s changed during reversal (attempt %d/%d)",
                    usage.item_id, attempt, self._max_attempts,
                )
                continue
            logger.info(
                "Reversed usage #%s: restored %s x %s",
                usage_id, usage.quantity, usage.item_name,
            )
            return usage

        raise ConcurrencyConflictError(
            f"Could not reverse usage #{usage_id} after {self._max_attempts} attempts"
        )

    def restock(self, item_id: int, quantity: Quantity) -> InventoryItem:
        for attempt in range(1, self._max_attempts + 1):
            item = self._load(item_id)
            item.restock(quantity)
            try:
                self._inventory_repo.save(item)
            except ConcurrencyConflictError:
                logger.debug(
                    "Stock of item %s changed during restock (attempt %d/%d)",
                    item_id, attempt, self._max_attempts,
                )
                continue
            return item

        raise ConcurrencyConflictError(
            f"Could not restock item #{item_id} after {self._max_attempts} attempts"
        )

    def low_stock(self) -> list[InventoryItem]:
        """Items at or below their reorder level, most urgent first."""
        items = [
            item
            for item in self._inventory_repo.list_all()
            if item.current_stock <= item.reorder_level
        ]
        return sorted(items, key=lambda i: (i.stock_level != StockLevel.CRITICAL, i.name.lower()))

    def _load(self, item_id: int) -> InventoryItem:
        item = self._inventory_repo.get_by_id(item_id)
        if item is None:
            raise NotFoundError(f"Inventory item #{item_id} not found")
        return item
