"""Application service: inventory queries."""

from __future__ import annotations

from servicebay.application.dto import StockLineDTO, UsageLineDTO
from servicebay.application.mapping import to_stock_line, to_usage_line
from servicebay.domain.exceptions import NotFoundError
from servicebay.domain.repository.inventory_repository import InventoryRepository
from servicebay.domain.service.inventory_ledger import InventoryLedger


class ShowInventoryHandler:

    def __init__(self, inventory_repo: InventoryRepository) -> None:
        self._inventory_repo = inventory_repo

    def handle(self, category: str | None = None) -> list[StockLineDTO]:
        items = self._inventory_repo.list_all()
        if category and category.strip():
            wanted = category.strip().lower()
            items = [i for i in items if i.category.lower() == wanted]
        return [to_stock_line(item) for item in sorted(items, key=lambda i: i.name.lower())]


class LowStockHandler:

    def __init__(self, ledger: InventoryLedger) -> None:
        self._ledger = ledger

    def handle(self) -> list[StockLineDTO]:
        return [to_stock_line(item) for item in self._ledger.low_stock()]


class ShowItemUsageHandler:

    def __init__(self, inventory_repo: InventoryRepository) -> None:
        self._inventory_repo = inventory_repo

    def handle(self, item_id: int) -> list[UsageLineDTO]:
        if self._inventory_repo.get_by_id(item_id) is None:
            raise NotFoundError(f"Inventory item #{item_id} not found")
        usages = self._inventory_repo.list_usages_for_item(item_id)
        return [to_usage_line(u) for u in sorted(usages, key=lambda u: (u.used_at, u.id or 0))]
