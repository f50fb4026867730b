"""Unit tests for the BillingCalculator."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from servicebay.domain.model.inventory import MaterialUsage
from servicebay.domain.model.labor import LaborChargeSpec, LaborEntry
from servicebay.domain.model.party import MembershipTier
from servicebay.domain.model.value_objects import Money, Quantity
from servicebay.domain.service.billing_calculator import BillingCalculator, BillingPolicy

T0 = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


def _usage(uid: int, name: str, qty: str, price: str, request_id: int = 1, minutes: int = 0):
    return MaterialUsage(
        id=uid,
        request_id=request_id,
        item_id=uid,
        item_name=name,
        quantity=Quantity.of(qty),
        unit_price=Money.of(price),
        used_at=T0 + timedelta(minutes=minutes),
    )


def _charge(eid: int, desc: str, hours: str, rate: str, request_id: int = 1, minutes: int = 0):
    entry = LaborEntry.labor_charge(request_id, LaborChargeSpec.of(desc, hours, rate))
    entry.id = eid
    entry.created_at = T0 + timedelta(minutes=minutes)
    return entry


def _ledgers():
    usages = [_usage(1, "Oil filter", "1", "150"), _usage(2, "Engine oil", "2", "125")]
    labor = [_charge(1, "Oil change", "1", "200"), _charge(2, "Inspection", "0.5", "200")]
    return usages, labor


class TestBillingExample:

    def test_standard_member(self):
        usages, labor = _ledgers()
        bill = BillingCalculator().calculate(1, usages, labor, MembershipTier.STANDARD)

        assert bill.materials_total == Money.of("400")
        assert bill.labor_total == Money.of("300")
        assert bill.discount == Money.zero()
        assert not bill.has_discount
        assert bill.subtotal == Money.of("700")
        assert bill.tax == Money.of("126.00")
        assert bill.grand_total == Money.of("826.00")

    def test_premium_member_gets_labor_discount(self):
        usages, labor = _ledgers()
        bill = BillingCalculator().calculate(1, usages, labor, MembershipTier.PREMIUM)

        assert bill.discount_rate == Decimal("0.20")
        assert bill.discount == Money.of("60")
        assert bill.subtotal == Money.of("640")
        assert bill.tax == Money.of("115.20")
        assert bill.grand_total == Money.of("755.20")

    def test_empty_ledgers(self):
        bill = BillingCalculator().calculate(1, [], [], MembershipTier.PREMIUM)
        assert bill.grand_total == Money.zero()
        assert bill.materials == () and bill.labor == ()


class TestBillingRules:

    def test_reversed_usages_excluded(self):
        usages, labor = _ledgers()
        usages[1].reverse()
        bill = BillingCalculator().calculate(1, usages, labor, MembershipTier.STANDARD)
        assert bill.materials_total == Money.of("150")
        assert [m.item_name for m in bill.materials] == ["Oil filter"]

    def test_superseded_and_non_charge_entries_excluded(self):
        usages, labor = _ledgers()
        labor[0].supersede()
        labor.append(LaborEntry.work_note(1, "Customer waiting"))
        bill = BillingCalculator().calculate(1, usages, labor, MembershipTier.STANDARD)
        assert bill.labor_total == Money.of("100")
        assert len(bill.labor) == 1

    def test_other_requests_ignored(self):
        usages, labor = _ledgers()
        usages.append(_usage(3, "Tyre", "4", "3000", request_id=2))
        labor.append(_charge(3, "Tyre fitting", "2", "500", request_id=2))
        bill = BillingCalculator().calculate(1, usages, labor, MembershipTier.STANDARD)
        assert bill.grand_total == Money.of("826.00")

    def test_tax_rounded_half_up(self):
        # 0.25 * 0.18 = 0.045 -> 0.05
        usages = [_usage(1, "Washer", "1", "0.25")]
        bill = BillingCalculator().calculate(1, usages, [], MembershipTier.STANDARD)
        assert bill.tax == Money.of("0.05")
        assert bill.grand_total == Money.of("0.30")

    def test_subtotal_kept_at_full_precision(self):
        usages = [_usage(1, "Coolant", "0.333", "100")]
        bill = BillingCalculator().calculate(1, usages, [], MembershipTier.STANDARD)
        assert bill.subtotal.amount == Decimal("33.300")
        assert bill.tax == Money.of("5.99")

    def test_lines_sorted_by_time(self):
        usages = [
            _usage(2, "Second", "1", "10", minutes=5),
            _usage(1, "First", "1", "10", minutes=1),
        ]
        bill = BillingCalculator().calculate(1, usages, [], MembershipTier.STANDARD)
        assert [m.item_name for m in bill.materials] == ["First", "Second"]

    def test_policy_overrides_rates(self):
        usages, labor = _ledgers()
        calc = BillingCalculator(BillingPolicy(Decimal("0.10"), Decimal("0.05")))
        bill = calc.calculate(1, usages, labor, MembershipTier.PREMIUM)
        assert bill.discount == Money.of("30")
        assert bill.tax == Money.of("33.50")


class TestDeterminism:

    @pytest.mark.parametrize("tier", list(MembershipTier))
    def test_same_inputs_same_bill(self, tier):
        usages, labor = _ledgers()
        calc = BillingCalculator()
        assert calc.calculate(1, usages, labor, tier) == calc.calculate(
            1, list(reversed(usages)), list(reversed(labor)), tier
        )
