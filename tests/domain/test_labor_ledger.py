"""Unit tests for LaborEntry and the LaborLedger."""

from decimal import Decimal

import pytest

from servicebay.domain.exceptions import InvalidAmountError, ValidationError
from servicebay.domain.model.labor import (
    MAX_DESCRIPTION_LENGTH,
    LaborChargeSpec,
    LaborEntry,
    LaborEntryKind,
)
from servicebay.domain.model.service_request import ServiceStatus
from servicebay.domain.model.value_objects import Money
from servicebay.domain.service.labor_ledger import LaborLedger
from tests.fakes import FakeLaborRepository


class TestLaborChargeSpec:

    def test_valid_spec(self):
        spec = LaborChargeSpec.of(" Brake pad replacement ", "1.5", "800")
        assert spec.description == "Brake pad replacement"
        assert spec.hours == Decimal("1.5")

    @pytest.mark.parametrize("hours, rate", [("0", "800"), ("-1", "800"), ("1", "0")])
    def test_non_positive_rejected(self, hours, rate):
        with pytest.raises(InvalidAmountError, match="must be positive"):
            LaborChargeSpec.of("Work", hours, rate)

    def test_unparseable_hours_rejected(self):
        with pytest.raises(InvalidAmountError, match="Invalid labor hours"):
            LaborChargeSpec.of("Work", "an hour", "800")

    def test_description_required(self):
        with pytest.raises(ValidationError, match="description is required"):
            LaborChargeSpec.of("   ", "1", "800")


class TestLaborEntry:

    def test_charge_cost_and_minutes(self):
        entry = LaborEntry.labor_charge(1, LaborChargeSpec.of("Diagnosis", "1.25", "640"))
        assert entry.kind == LaborEntryKind.LABOR_CHARGE
        assert entry.labor_cost == Money.of("800")
        assert entry.labor_minutes == 75
        assert entry.is_billable

    def test_minutes_round_half_up(self):
        # 0.0125 h = 0.75 min -> 1; 0.025 h = 1.5 min -> 2
        assert LaborEntry.labor_charge(1, LaborChargeSpec.of("x", "0.0125", "1")).labor_minutes == 1
        assert LaborEntry.labor_charge(1, LaborChargeSpec.of("x", "0.025", "1")).labor_minutes == 2

    def test_notes_and_status_changes_are_not_billable(self):
        note = LaborEntry.work_note(1, "Customer called")
        change = LaborEntry.status_change(1, ServiceStatus.DIAGNOSIS, ServiceStatus.REPAIR, note="parts in")
        assert not note.is_billable
        assert not change.is_billable
        assert change.description == "Status: Diagnosis -> Repair: parts in"

    def test_long_description_clipped(self):
        note = LaborEntry.work_note(1, "x" * 400)
        assert len(note.description) == MAX_DESCRIPTION_LENGTH
        assert note.description.endswith("...")

    def test_only_charges_can_be_superseded(self):
        with pytest.raises(ValidationError, match="Only labor charges"):
            LaborEntry.work_note(1, "hi").supersede()

    def test_dispatch_record(self):
        entry = LaborEntry.dispatch_record(4, advisor_id=2)
        assert entry.kind == LaborEntryKind.STATUS_CHANGE
        assert entry.description == "Vehicle dispatched to customer"
        assert entry.old_status == entry.new_status == ServiceStatus.COMPLETED


class TestLaborLedger:

    def test_total_ignores_superseded_and_notes(self):
        ledger = LaborLedger(FakeLaborRepository())
        ledger.add_labor_charge(1, "Diagnosis", "1", "500")
        ledger.add_note(1, "Waiting on parts")
        ledger.replace_labor_charges(1, [LaborChargeSpec.of("Full diagnosis", "2", "500")])
        ledger.add_labor_charge(2, "Other request", "3", "500")

        assert ledger.total_labor_cost(1) == Money.of("1000")
        entries = ledger.entries(1)
        assert [e.kind for e in entries] == [
            LaborEntryKind.LABOR_CHARGE,
            LaborEntryKind.WORK_NOTE,
            LaborEntryKind.LABOR_CHARGE,
        ]
        assert entries[0].is_superseded
        assert not entries[2].is_superseded

    def test_replace_with_nothing_clears_labor(self):
        ledger = LaborLedger(FakeLaborRepository())
        ledger.add_labor_charge(1, "Diagnosis", "1", "500")
        ledger.replace_labor_charges(1, [])
        assert ledger.total_labor_cost(1) == Money.zero()
        assert len(ledger.entries(1)) == 1

    def test_empty_batch_rejected(self):
        ledger = LaborLedger(FakeLaborRepository())
        with pytest.raises(ValidationError, match="At least one"):
            ledger.add_labor_charges(1, [])

    def test_batch_ids_in_order(self):
        ledger = LaborLedger(FakeLaborRepository())
        entries = ledger.add_labor_charges(
            1, [LaborChargeSpec.of("a", "1", "100"), LaborChargeSpec.of("b", "1", "100")]
        )
        assert [e.id for e in entries] == [1, 2]
