"""JSON-file-backed implementation of InventoryRepository.

Items and their usage ledger live in the same file so a stock decrement
and the usage row that explains it are written in one replace.
"""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

from servicebay.domain.exceptions import ConcurrencyConflictError
from servicebay.domain.model.inventory import InventoryItem, MaterialUsage
from servicebay.domain.model.value_objects import Money, Quantity
from servicebay.domain.repository.inventory_repository import InventoryRepository
from servicebay.infrastructure.persistence.json_store import (
    JsonFile,
    dump_decimal,
    dump_dt,
    load_dt,
    next_id,
)


def _empty() -> dict:
    return {"items": [], "usages": []}


class JsonInventoryRepository(InventoryRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path, empty=_empty)

    # --- Items ----------------------------------------------------------------

    def get_by_id(self, item_id: int) -> InventoryItem | None:
        for raw in self._file.read()["items"]:
            if raw["id"] == item_id:
                return self._item_to_domain(raw)
        return None

    def get_by_name(self, name: str) -> InventoryItem | None:
        key = name.strip().lower()
        for raw in self._file.read()["items"]:
            if raw["name"].lower() == key:
                return self._item_to_domain(raw)
        return None

    def list_all(self) -> list[InventoryItem]:
        return [self._item_to_domain(raw) for raw in self._file.read()["items"]]

    def save(self, item: InventoryItem) -> None:
        with self._file.transaction() as data:
            self._put_item(data, item)

    def delete(self, item: InventoryItem) -> None:
        with self._file.transaction() as data:
            for i, raw in enumerate(data["items"]):
                if raw["id"] == item.id:
                    if raw["version"] != item.version:
                        raise ConcurrencyConflictError(
                            f"Inventory item '{item.name}' was modified concurrently"
                        )
                    del data["items"][i]
                    return
            raise ConcurrencyConflictError(
                f"Inventory item #{item.id} does not exist in the store"
            )

    # --- Usages ---------------------------------------------------------------

    def get_usage(self, usage_id: int) -> MaterialUsage | None:
        for raw in self._file.read()["usages"]:
            if raw["id"] == usage_id:
                return self._usage_to_domain(raw)
        return None

    def list_usages_for_request(self, request_id: int) -> list[MaterialUsage]:
        return [
            self._usage_to_domain(raw)
            for raw in self._file.read()["usages"]
            if raw["request_id"] == request_id
        ]

    def list_usages_for_item(self, item_id: int) -> list[MaterialUsage]:
        return [
            self._usage_to_domain(raw)
            for raw in self._file.read()["usages"]
            if raw["item_id"] == item_id
        ]

    # --- Atomic units ---------------------------------------------------------

    def commit_consumption(self, item: InventoryItem, usage: MaterialUsage) -> None:
        with self._file.transaction() as data:
            self._put_item(data, item)
            usage.id = next_id(data["usages"])
            data["usages"].append(self._usage_to_raw(usage))

    def commit_reversal(self, item: InventoryItem, usage: MaterialUsage) -> None:
        with self._file.transaction() as data:
            for i, raw in enumerate(data["usages"]):
                if raw["id"] == usage.id:
                    if raw.get("reversed_at") is not None:
                        raise ConcurrencyConflictError(
                            f"Material usage #{usage.id} was reversed concurrently"
                        )
                    data["usages"][i] = self._usage_to_raw(usage)
                    break
            else:
                raise ConcurrencyConflictError(
                    f"Material usage #{usage.id} does not exist in the store"
                )
            self._put_item(data, item)

    # --- Helpers --------------------------------------------------------------

    def _put_item(self, data: dict, item: InventoryItem) -> None:
        """Insert or compare-and-set *item* inside an open transaction."""
        records = data["items"]
        if item.id is None:
            # Usages outlive deleted items; their item ids are never reused.
            used = max((u["item_id"] for u in data["usages"]), default=0)
            item.id = max(next_id(records), used + 1)
            item.version = 1
            records.append(self._item_to_raw(item))
            return
        for i, raw in enumerate(records):
            if raw["id"] == item.id:
                if raw["version"] != item.version:
                    raise ConcurrencyConflictError(
                        f"Inventory item '{item.name}' was modified concurrently"
                    )
                item.version += 1
                records[i] = self._item_to_raw(item)
                return
        raise ConcurrencyConflictError(f"Inventory item #{item.id} does not exist in the store")

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _item_to_raw(item: InventoryItem) -> dict:
        return {
            "id": item.id,
            "name": item.name,
            "category": item.category,
            "current_stock": dump_decimal(item.current_stock),
            "unit_price": dump_decimal(item.unit_price.amount),
            "reorder_level": dump_decimal(item.reorder_level),
            "version": item.version,
        }

    @staticmethod
    def _item_to_domain(raw: dict) -> InventoryItem:
        return InventoryItem(
            id=raw["id"],
            name=raw["name"],
            category=raw["category"],
            current_stock=Decimal(raw["current_stock"]),
            unit_price=Money(Decimal(raw["unit_price"])),
            reorder_level=Decimal(raw["reorder_level"]),
            version=raw["version"],
        )

    @staticmethod
    def _usage_to_raw(usage: MaterialUsage) -> dict:
        return {
            "id": usage.id,
            "request_id": usage.request_id,
            "item_id": usage.item_id,
            "item_name": usage.item_name,
            "quantity": dump_decimal(usage.quantity.value),
            "unit_price": dump_decimal(usage.unit_price.amount),
            "advisor_id": usage.advisor_id,
            "used_at": dump_dt(usage.used_at),
            "reversed_at": dump_dt(usage.reversed_at),
        }

    @staticmethod
    def _usage_to_domain(raw: dict) -> MaterialUsage:
        return MaterialUsage(
            id=raw["id"],
            request_id=raw["request_id"],
            item_id=raw["item_id"],
            item_name=raw["item_name"],
            quantity=Quantity(Decimal(raw["quantity"])),
            unit_price=Money(Decimal(raw["unit_price"])),
            advisor_id=raw.get("advisor_id"),
            used_at=load_dt(raw["used_at"]),
            reversed_at=load_dt(raw.get("reversed_at")),
        )
