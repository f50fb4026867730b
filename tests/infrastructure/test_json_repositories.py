"""Tests for the JSON-file repositories."""

import json
import os
import subprocess
import sys
import textwrap
import threading
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

from servicebay.domain.exceptions import (
    ConcurrencyConflictError,
    InsufficientStockError,
    NotFoundError,
    ValidationError,
)
from servicebay.domain.model.inventory import InventoryItem
from servicebay.domain.model.labor import LaborChargeSpec, LaborEntry
from servicebay.domain.model.party import Customer, MembershipTier, Vehicle
from servicebay.domain.model.payment import Invoice, Payment, PaymentMethod
from servicebay.domain.model.service_request import ServiceRequest, ServiceStatus
from servicebay.domain.model.value_objects import Money, Quantity
from servicebay.domain.service.inventory_ledger import InventoryLedger
from servicebay.infrastructure.persistence.json_billing_repository import (
    JsonInvoiceRepository,
    JsonPaymentRepository,
)
from servicebay.infrastructure.persistence.json_inventory_repository import (
    JsonInventoryRepository,
)
from servicebay.infrastructure.persistence.json_labor_repository import JsonLaborRepository
from servicebay.infrastructure.persistence.json_party_repository import JsonPartyRepository
from servicebay.infrastructure.persistence.json_service_request_repository import (
    JsonServiceRequestRepository,
)


def _item(stock: str = "5") -> InventoryItem:
    return InventoryItem.create("Spark plug", "Ignition", Decimal(stock), Money.of("180.50"), Decimal("2"))


class TestServiceRequestStore:

    def test_round_trip_and_version(self, tmp_path):
        repo = JsonServiceRequestRepository(tmp_path / "requests.json")
        request = ServiceRequest.book(1, "Brake Service", "Squeal", date(2024, 3, 4))
        repo.save(request)
        assert (request.id, request.version) == (1, 1)

        loaded = repo.get_by_id(1)
        assert loaded == request

        loaded.assign_advisor(2)
        repo.save(loaded)
        assert repo.get_by_id(1).status == ServiceStatus.DIAGNOSIS
        assert repo.get_by_id(1).version == 2

    def test_stale_write_rejected(self, tmp_path):
        repo = JsonServiceRequestRepository(tmp_path / "requests.json")
        repo.save(ServiceRequest.book(1, "Oil Change"))
        first, second = repo.get_by_id(1), repo.get_by_id(1)

        first.transition_to(ServiceStatus.REPAIR)
        repo.save(first)
        second.transition_to(ServiceStatus.COMPLETED)

        with pytest.raises(ConcurrencyConflictError):
            repo.save(second)
        assert repo.get_by_id(1).status == ServiceStatus.REPAIR

    def test_separate_instances_share_the_file(self, tmp_path):
        path = tmp_path / "requests.json"
        JsonServiceRequestRepository(path).save(ServiceRequest.book(1, "Oil Change"))
        assert JsonServiceRequestRepository(path).get_by_id(1) is not None

    def test_list_by_advisor(self, tmp_path):
        repo = JsonServiceRequestRepository(tmp_path / "requests.json")
        for advisor_id in (1, 2, 1):
            request = ServiceRequest.book(1, "Oil Change")
            request.assign_advisor(advisor_id)
            repo.save(request)
        repo.save(ServiceRequest.book(1, "Wash"))

        assert [r.id for r in repo.list_by_advisor(1)] == [1, 3]
        assert repo.list_by_advisor(9) == []

    def test_locked_unknown_request(self, tmp_path):
        repo = JsonServiceRequestRepository(tmp_path / "requests.json")
        with pytest.raises(NotFoundError):
            with repo.locked(1):
                pass

    def test_save_waits_while_request_is_held(self, tmp_path):
        path = tmp_path / "requests.json"
        repo = JsonServiceRequestRepository(path)
        repo.save(ServiceRequest.book(1, "Oil Change"))
        stale = repo.get_by_id(1)
        stale.transition_to(ServiceStatus.REPAIR)
        outcomes: list[str] = []

        def writer() -> None:
            try:
                JsonServiceRequestRepository(path).save(stale)
                outcomes.append("saved")
            except ConcurrencyConflictError:
                outcomes.append("conflict")

        with repo.locked(1) as held:
            thread = threading.Thread(target=writer)
            thread.start()
            thread.join(timeout=0.3)
            assert thread.is_alive()
            assert outcomes == []

            held.transition_to(ServiceStatus.COMPLETED)
            repo.save(held)

        thread.join(timeout=5)
        assert outcomes == ["conflict"]
        assert repo.get_by_id(1).status == ServiceStatus.COMPLETED


class TestInventoryStore:

    def test_decimals_stored_as_strings(self, tmp_path):
        path = tmp_path / "inventory.json"
        JsonInventoryRepository(path).save(_item("2.5"))

        raw = json.loads(path.read_text(encoding="utf-8"))
        assert raw["items"][0]["current_stock"] == "2.5"
        assert raw["items"][0]["unit_price"] == "180.50"

    def test_consumption_and_reversal_persist_together(self, tmp_path):
        repo = JsonInventoryRepository(tmp_path / "inventory.json")
        repo.save(_item())
        ledger = InventoryLedger(repo)

        usage = ledger.consume(1, 7, Quantity.of("2"), advisor_id=3)
        assert repo.get_by_id(1).current_stock == Decimal("3")
        assert repo.get_usage(usage.id).unit_price == Money.of("180.50")

        ledger.reverse(usage.id)
        assert repo.get_by_id(1).current_stock == Decimal("5")
        assert repo.get_usage(usage.id).is_reversed
        assert repo.get_by_name("SPARK PLUG").id == 1

    def test_failed_consumption_leaves_file_untouched(self, tmp_path):
        path = tmp_path / "inventory.json"
        repo = JsonInventoryRepository(path)
        repo.save(_item("1"))
        before = path.read_text(encoding="utf-8")

        with pytest.raises(InsufficientStockError):
            InventoryLedger(repo).consume(1, 7, Quantity.of("2"))
        assert path.read_text(encoding="utf-8") == before

    def test_concurrent_consumers_of_the_last_unit(self, tmp_path):
        path = tmp_path / "inventory.json"
        JsonInventoryRepository(path).save(_item("1"))
        barrier = threading.Barrier(4)
        outcomes: list[str] = []

        def worker(request_id: int) -> None:
            ledger = InventoryLedger(JsonInventoryRepository(path), max_attempts=5)
            barrier.wait(timeout=5)
            try:
                ledger.consume(1, request_id, Quantity.of("1"))
                outcomes.append("ok")
            except InsufficientStockError:
                outcomes.append("short")

        threads = [threading.Thread(target=worker, args=(rid,)) for rid in range(1, 5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10)

        repo = JsonInventoryRepository(path)
        assert sorted(outcomes) == ["ok", "short", "short", "short"]
        assert repo.get_by_id(1).current_stock == 0
        assert len(repo.list_usages_for_item(1)) == 1

    def test_consumers_in_separate_processes(self, tmp_path):
        path = tmp_path / "inventory.json"
        JsonInventoryRepository(path).save(_item("400"))
        script = textwrap.dedent(
            """
            import sys
            from pathlib import Path

            from servicebay.domain.exceptions import ConcurrencyConflictError
            from servicebay.domain.model.value_objects import Quantity
            from servicebay.domain.service.inventory_ledger import InventoryLedger
            from servicebay.infrastructure.persistence.json_inventory_repository import (
                JsonInventoryRepository,
            )

            ledger = InventoryLedger(JsonInventoryRepository(Path(sys.argv[1])), max_attempts=50)
            done = 0
            for _ in range(int(sys.argv[3])):
                try:
                    ledger.consume(1, int(sys.argv[2]), Quantity.of("1"))
                except ConcurrencyConflictError:
                    continue
                done += 1
            print(done)
            """
        )
        src = str(Path(__file__).resolve().parents[2] / "src")
        env = dict(os.environ)
        env["PYTHONPATH"] = os.pathsep.join(filter(None, [src, env.get("PYTHONPATH")]))

        workers = [
            subprocess.Popen(
                [sys.executable, "-c", script, str(path), str(rid), "25"],
                env=env, stdout=subprocess.PIPE, text=True,
            )
            for rid in range(1, 5)
        ]
        acknowledged = {}
        for rid, worker in enumerate(workers, start=1):
            out, _ = worker.communicate(timeout=120)
            assert worker.returncode == 0
            acknowledged[rid] = int(out.strip())

        repo = JsonInventoryRepository(path)
        usages = repo.list_usages_for_item(1)
        assert sum(acknowledged.values()) > 0
        assert repo.get_by_id(1).current_stock == 400 - sum(acknowledged.values())
        assert len(usages) == sum(acknowledged.values())
        for rid, count in acknowledged.items():
            assert sum(1 for u in usages if u.request_id == rid) == count

    def test_delete_removes_item_and_keeps_usages(self, tmp_path):
        repo = JsonInventoryRepository(tmp_path / "inventory.json")
        repo.save(_item())
        ledger = InventoryLedger(repo)
        ledger.reverse(ledger.consume(1, 7, Quantity.of("1")).id)

        repo.delete(repo.get_by_id(1))

        assert repo.get_by_id(1) is None
        assert len(repo.list_usages_for_item(1)) == 1

    def test_delete_of_stale_item_rejected(self, tmp_path):
        repo = JsonInventoryRepository(tmp_path / "inventory.json")
        repo.save(_item())
        stale = repo.get_by_id(1)
        fresh = repo.get_by_id(1)
        fresh.restock(Quantity.of("1"))
        repo.save(fresh)

        with pytest.raises(ConcurrencyConflictError):
            repo.delete(stale)
        assert repo.get_by_id(1).current_stock == Decimal("6")

    def test_item_ids_not_reused_after_delete(self, tmp_path):
        repo = JsonInventoryRepository(tmp_path / "inventory.json")
        repo.save(_item())
        ledger = InventoryLedger(repo)
        ledger.reverse(ledger.consume(1, 7, Quantity.of("1")).id)
        repo.delete(repo.get_by_id(1))

        replacement = InventoryItem.create("Air filter", "Filters", Decimal("3"), Money.of("90"), Decimal("1"))
        repo.save(replacement)

        assert replacement.id == 2
        assert repo.list_usages_for_item(2) == []


class TestLaborStore:

    def test_replace_supersedes_in_one_write(self, tmp_path):
        repo = JsonLaborRepository(tmp_path / "labor.json")
        repo.append([
            LaborEntry.labor_charge(1, LaborChargeSpec.of("Guess", "2", "500")),
            LaborEntry.work_note(1, "Called customer"),
        ])
        repo.replace_charges(1, [LaborEntry.labor_charge(1, LaborChargeSpec.of("Actual", "1", "500"))])

        entries = repo.list_for_request(1)
        assert [e.id for e in entries] == [1, 2, 3]
        assert entries[0].is_superseded
        assert not entries[1].is_superseded
        assert entries[2].labor_cost == Money.of("500")
        assert entries[2].labor_minutes == 60


class TestPartyStore:

    def test_round_trip(self, tmp_path):
        repo = JsonPartyRepository(tmp_path / "parties.json")
        customer = Customer.create("Asha", membership_tier=MembershipTier.PREMIUM)
        repo.save_customer(customer)
        vehicle = Vehicle.create(customer.id, "Tata", "Nexon", "ka05mn4321", year=2022)
        repo.save_vehicle(vehicle)

        assert repo.get_customer(customer.id) == customer
        assert repo.get_vehicle(vehicle.id).registration_number == "KA05MN4321"
        assert repo.get_advisor(1) is None


class TestBillingStore:

    def test_one_active_payment_per_request(self, tmp_path):
        repo = JsonPaymentRepository(tmp_path / "payments.json")
        repo.add(Payment.record(4, Money.of("826.00"), PaymentMethod.UPI, "UPI-1"))

        with pytest.raises(ValidationError, match="already paid"):
            repo.add(Payment.record(4, Money.of("826.00"), PaymentMethod.CARD))
        assert repo.get_active_for_request(4).transaction_id == "UPI-1"

    def test_invoice_replaced_in_place(self, tmp_path):
        repo = JsonInvoiceRepository(tmp_path / "invoices.json")

        def invoice(net: str) -> Invoice:
            return Invoice(
                id=None, request_id=4, payment_id=1,
                materials_total=Money.of("400.00"), labor_total=Money.of("300.00"),
                discount=Money.zero(), total_amount=Money.of("700.00"),
                taxes=Money.of("126.00"), net_amount=Money.of(net),
            )

        repo.save(invoice("826.00"))
        replacement = invoice("830.00")
        repo.save(replacement)

        assert replacement.id == 1
        assert repo.get_for_request(4).net_amount == Money.of("830.00")
