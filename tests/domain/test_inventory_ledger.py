"""Unit tests for the InventoryLedger domain service."""

import threading
from decimal import Decimal

import pytest

from servicebay.domain.exceptions import (
    ConcurrencyConflictError,
    InsufficientStockError,
    NotFoundError,
    ValidationError,
)
from servicebay.domain.model.inventory import InventoryItem, StockLevel
from servicebay.domain.model.value_objects import Money, Quantity
from servicebay.domain.service.inventory_ledger import InventoryLedger
from tests.fakes import FakeInventoryRepository


def _item(name: str, stock: str, reorder: str = "2", price: str = "100") -> InventoryItem:
    return InventoryItem.create(name, "Parts", Decimal(stock), Money.of(price), Decimal(reorder))


class _ConflictingRepository(FakeInventoryRepository):
    """Loses the compare-and-set race a fixed number of times."""

    def __init__(self, items, conflicts: int) -> None:
        super().__init__(items)
        self.conflicts = conflicts
        self.attempts = 0

    def commit_consumption(self, item, usage):
        self.attempts += 1
        if self.conflicts > 0:
            self.conflicts -= 1
            raise ConcurrencyConflictError("lost the race")
        super().commit_consumption(item, usage)


class TestConsume:

    def test_consume_writes_stock_and_usage_together(self):
        repo = FakeInventoryRepository([_item("Brake pad", "10")])
        ledger = InventoryLedger(repo)

        usage = ledger.consume(1, request_id=5, quantity=Quantity.of("4"), advisor_id=2)

        assert repo.get_by_id(1).current_stock == Decimal("6")
        assert usage.id == 1
        assert [u.quantity.value for u in repo.list_usages_for_request(5)] == [Decimal("4")]

    def test_insufficient_stock_writes_nothing(self):
        repo = FakeInventoryRepository([_item("Brake pad", "1")])
        ledger = InventoryLedger(repo)

        with pytest.raises(InsufficientStockError):
            ledger.consume(1, 5, Quantity.of("2"))

        assert repo.get_by_id(1).current_stock == Decimal("1")
        assert repo.list_usages_for_request(5) == []

    def test_unknown_item(self):
        ledger = InventoryLedger(FakeInventoryRepository())
        with pytest.raises(NotFoundError, match="#9"):
            ledger.consume(9, 5, Quantity.of("1"))

    def test_conflict_is_retried(self):
        repo = _ConflictingRepository([_item("Brake pad", "10")], conflicts=2)
        ledger = InventoryLedger(repo, max_attempts=3)

        ledger.consume(1, 5, Quantity.of("1"))

        assert repo.attempts == 3
        assert repo.get_by_id(1).current_stock == Decimal("9")

    def test_retry_budget_exhausted(self):
        repo = _ConflictingRepository([_item("Brake pad", "10")], conflicts=5)
        ledger = InventoryLedger(repo, max_attempts=3)

        with pytest.raises(ConcurrencyConflictError, match="after 3 attempts"):
            ledger.consume(1, 5, Quantity.of("1"))
        assert repo.get_by_id(1).current_stock == Decimal("10")

    def test_max_attempts_must_be_positive(self):
        with pytest.raises(ValueError):
            InventoryLedger(FakeInventoryRepository(), max_attempts=0)


class TestConcurrentConsume:

    def test_last_units_go_to_exactly_one_consumer(self):
        repo = FakeInventoryRepository([_item("Battery", "3")])
        ledger = InventoryLedger(repo)
        barrier = threading.Barrier(2)
        results: list[object] = []

        def worker(request_id: int) -> None:
            barrier.wait(timeout=5)
            try:
                results.append(ledger.consume(1, request_id, Quantity.of("3")))
            except InsufficientStockError as exc:
                results.append(exc)

        threads = [threading.Thread(target=worker, args=(rid,)) for rid in (1, 2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10)

        errors = [r for r in results if isinstance(r, InsufficientStockError)]
        assert len(results) == 2
        assert len(errors) == 1
        assert repo.get_by_id(1).current_stock == 0
        assert len(repo.list_usages_for_item(1)) == 1


class TestReverse:

    def test_reverse_restores_stock(self):
        repo = FakeInventoryRepository([_item("Brake pad", "10")])
        ledger = InventoryLedger(repo)
        usage = ledger.consume(1, 5, Quantity.of("4"))

        ledger.reverse(usage.id)

        assert repo.get_by_id(1).current_stock == Decimal("10")
        assert repo.get_usage(usage.id).is_reversed

    def test_reverse_twice_rejected(self):
        repo = FakeInventoryRepository([_item("Brake pad", "10")])
        ledger = InventoryLedger(repo)
        usage = ledger.consume(1, 5, Quantity.of("4"))
        ledger.reverse(usage.id)

        with pytest.raises(ValidationError, match="already reversed"):
            ledger.reverse(usage.id)
        assert repo.get_by_id(1).current_stock == Decimal("10")

    def test_unknown_usage(self):
        ledger = InventoryLedger(FakeInventoryRepository())
        with pytest.raises(NotFoundError, match="usage #3"):
            ledger.reverse(3)


class TestLowStock:

    def test_critical_first_then_by_name(self):
        repo = FakeInventoryRepository([
            _item("Wiper", "2", reorder="2"),       # LOW
            _item("Air filter", "0", reorder="2"),  # CRITICAL
            _item("Coolant", "9", reorder="2"),     # healthy
            _item("Bulb", "1.5", reorder="2"),      # LOW
        ])
        low = InventoryLedger(repo).low_stock()

        assert [i.name for i in low] == ["Air filter", "Bulb", "Wiper"]
        assert low[0].stock_level == StockLevel.CRITICAL

    def test_restock(self):
        repo = FakeInventoryRepository([_item("Wiper", "1")])
        item = InventoryLedger(repo).restock(1, Quantity.of("5"))
        assert item.current_stock == Decimal("6")
        assert repo.get_by_id(1).version == item.version
