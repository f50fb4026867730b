"""InventoryItem aggregate and the MaterialUsage ledger rows it backs.

Every MaterialUsage is the record of one stock decrement.  The two are
committed together by the repository, never separately.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from servicebay.domain.exceptions import InsufficientStockError, ValidationError
from servicebay.domain.model.value_objects import Money, Quantity


class StockLevel(Enum):
    HEALTHY = "Healthy"
    LOW = "Low"
    CRITICAL = "Critical"


@dataclass
class InventoryItem:
    """Aggregate root for stock tracking.

    Invariants:
    - ``current_stock`` is never negative
    - ``version`` changes on every committed write
    """

    id: int | None
    name: str
    category: str
    current_stock: Decimal
    unit_price: Money
    reorder_level: Decimal
    version: int = 0

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def create(
        name: str,
        category: str,
        current_stock: Decimal,
        unit_price: Money,
        reorder_level: Decimal,
    ) -> InventoryItem:
        if not name or not name.strip():
            raise ValidationError("Item name is required")
        if not category or not category.strip():
            raise ValidationError("Item category is required")
        if current_stock < 0:
            raise ValidationError("Current stock cannot be negative")
        if reorder_level < 0:
            raise ValidationError("Reorder level cannot be negative")
        return InventoryItem(
            id=None,
            name=name.strip(),
            category=category.strip(),
            current_stock=current_stock,
            unit_price=unit_price,
            reorder_level=reorder_level,
        )

    # --- Stock movements ------------------------------------------------------

    def consume(self, quantity: Quantity) -> None:
        """Take *quantity* out of stock, or raise without changing anything."""
        if quantity.value > self.current_stock:
            raise InsufficientStockError(self.name, quantity, self.current_stock)
        self.current_stock -= quantity.value

    def restore(self, quantity: Quantity) -> None:
        """Put back stock released by a usage reversal."""
        self.current_stock += quantity.value

    def restock(self, quantity: Quantity) -> None:
        self.current_stock += quantity.value

    # --- Catalogue edits ------------------------------------------------------

    def update_price(self, new_price: Money) -> None:
        """Change the unit price.

        Existing usages keep the price captured when they were recorded.
        """
        if new_price.is_zero:
            raise ValidationError("Unit price must be greater than zero")
        self.unit_price = new_price

    def update_reorder_level(self, level: Decimal) -> None:
        if level < 0:
            raise ValidationError("Reorder level cannot be negative")
        self.reorder_level = level

    # --- Computed properties --------------------------------------------------

    @property
    def stock_level(self) -> StockLevel:
        if self.current_stock <= self.reorder_level / 2:
            return StockLevel.CRITICAL
        if self.current_stock <= self.reorder_level:
            return StockLevel.LOW
        return StockLevel.HEALTHY

    @property
    def stock_value(self) -> Money:
        return self.unit_price * self.current_stock


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class MaterialUsage:
    """One consumption of an inventory item against a service request.

    ``unit_price`` is a snapshot taken at consumption time, so later price
    edits never change an existing bill.  The row is never edited; a
    correction sets ``reversed_at`` and restores the stock.
    """

    id: int | None
    request_id: int
    item_id: int
    item_name: str
    quantity: Quantity
    unit_price: Money
    advisor_id: int | None = None
    used_at: datetime = field(default_factory=_now)
    reversed_at: datetime | None = None

    @staticmethod
    def record(
        request_id: int,
        item: InventoryItem,
        quantity: Quantity,
        advisor_id: int | None = None,
    ) -> MaterialUsage:
        return MaterialUsage(
            id=None,
            request_id=request_id,
            item_id=item.id,  # type: ignore[arg-type]
            item_name=item.name,
            quantity=quantity,
            unit_price=item.unit_price,
            advisor_id=advisor_id,
        )

    @property
    def is_reversed(self) -> bool:
        return self.reversed_at is not None

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value

    def reverse(self) -> None:
        if self.is_reversed:
            raise ValidationError(f"Material usage #{self.id} is already reversed")
        self.reversed_at = _now()
