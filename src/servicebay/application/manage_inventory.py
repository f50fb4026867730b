"""Application services: add, edit, restock and delete inventory items."""

from __future__ import annotations

import logging
from decimal import Decimal

from servicebay.application.dto import StockLineDTO
from servicebay.application.mapping import to_stock_line
from servicebay.domain.exceptions import NotFoundError, ValidationError
from servicebay.domain.model.inventory import InventoryItem
from servicebay.domain.model.value_objects import Money, Quantity, to_decimal
from servicebay.domain.repository.inventory_repository import InventoryRepository
from servicebay.domain.service.inventory_ledger import InventoryLedger

logger = logging.getLogger(__name__)


class AddInventoryItemHandler:

    def __init__(self, inventory_repo: InventoryRepository) -> None:
        self._inventory_repo = inventory_repo

    def handle(
        self,
        name: str,
        category: str,
        unit_price: str | int | Decimal,
        current_stock: str | int | Decimal = 0,
        reorder_level: str | int | Decimal = 0,
    ) -> StockLineDTO:
        if self._inventory_repo.get_by_name(name.strip()) is not None:
            raise ValidationError(f"Inventory item '{name.strip()}' already exists")

        price = Money.of(unit_price)
        if price.is_zero:
            raise ValidationError("Unit price must be greater than zero")
        item = InventoryItem.create(
            name=name,
            category=category,
            current_stock=to_decimal(current_stock, "stock"),
            unit_price=price,
            reorder_level=to_decimal(reorder_level, "reorder level"),
        )
        self._inventory_repo.save(item)
        logger.info("Added inventory item #%s %s (%s)", item.id, item.name, item.current_stock)
        return to_stock_line(item)


class UpdateInventoryItemHandler:

    def __init__(self, inventory_repo: InventoryRepository) -> None:
        self._inventory_repo = inventory_repo

    def handle(
        self,
        item_id: int,
        unit_price: str | int | Decimal | None = None,
        reorder_level: str | int | Decimal | None = None,
        category: str | None = None,
    ) -> StockLineDTO:
        item = self._inventory_repo.get_by_id(item_id)
        if item is None:
            raise NotFoundError(f"Inventory item #{item_id} not found")

        if unit_price is not None:
            item.update_price(Money.of(unit_price))
        if reorder_level is not None:
            item.update_reorder_level(to_decimal(reorder_level, "reorder level"))
        if category is not None:
            if not category.strip():
                raise ValidationError("Item category is required")
            item.category = category.strip()

        # Compare-and-set; a concurrent stock movement makes this raise.
        self._inventory_repo.save(item)
        return to_stock_line(item)


class RestockItemHandler:

    def __init__(self, ledger: InventoryLedger) -> None:
        self._ledger = ledger

    def handle(self, item_id: int, quantity: str | int | Decimal) -> StockLineDTO:
        item = self._ledger.restock(item_id, Quantity.of(quantity))
        logger.info("Restocked %s: now %s", item.name, item.current_stock)
        return to_stock_line(item)


class DeleteInventoryItemHandler:
    """Remove an item nothing is still billed for.

    Only usages that were reversed may refer to a deleted item; they stay
    in the usage ledger under the item's recorded name.
    """

    def __init__(self, inventory_repo: InventoryRepository) -> None:
        self._inventory_repo = inventory_repo

    def handle(self, item_id: int) -> StockLineDTO:
        item = self._inventory_repo.get_by_id(item_id)
        if item is None:
            raise NotFoundError(f"Inventory item #{item_id} not found")

        active = [
            u for u in self._inventory_repo.list_usages_for_item(item_id) if not u.is_reversed
        ]
        if active:
            raise ValidationError(
                f"Cannot delete '{item.name}': it is used on "
                f"{len({u.request_id for u in active})} service request(s)"
            )

        # Compare-and-set: a consumption committed since the check above
        # bumps the version and makes this raise.
        self._inventory_repo.delete(item)
        logger.info("Deleted inventory item #%s %s", item_id, item.name)
        return to_stock_line(item)
