"""Domain service: Billing Calculator.

Turns a consistent snapshot of the two ledgers plus the customer's
current membership tier into a Bill.  It holds no state and writes
nothing, so calling it twice over the same inputs yields equal Bills.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from servicebay.domain.model.bill import Bill, LaborLine, MaterialLine
from servicebay.domain.model.inventory import MaterialUsage
from servicebay.domain.model.labor import LaborEntry
from servicebay.domain.model.party import MembershipTier
from servicebay.domain.model.value_objects import CENT, Money

# ---------------------------------------------------------------------------
# Rates
# ---------------------------------------------------------------------------
PREMIUM_LABOR_DISCOUNT_RATE = Decimal("0.20")
GST_RATE = Decimal("0.18")


@dataclass(frozen=True)
class BillingPolicy:
    premium_labor_discount_rate: Decimal = PREMIUM_LABOR_DISCOUNT_RATE
    gst_rate: Decimal = GST_RATE


class BillingCalculator:

    def __init__(self, policy: BillingPolicy | None = None) -> None:
        self._policy = policy or BillingPolicy()

    @property
    def policy(self) -> BillingPolicy:
        return self._policy

    def calculate(
        self,
        request_id: int,
        usages: Iterable[MaterialUsage],
        labor_entries: Iterable[LaborEntry],
        membership_tier: MembershipTier,
    ) -> Bill:
        """Compute the bill for one request.

        Reversed usages and superseded or non-charge labor entries are
        ignored.  Only the tax is rounded here; everything else stays at
        full precision until presentation.
        """
        materials = tuple(
            MaterialLine(
                usage_id=u.id,  # type: ignore[arg-type]
                item_name=u.item_name,
                quantity=u.quantity.value,
                unit_price=u.unit_price,
                total=u.line_total,
            )
            for u in sorted(usages, key=lambda u: (u.used_at, u.id or 0))
            if u.request_id == request_id and not u.is_reversed
        )
        labor = tuple(
            LaborLine(
                entry_id=e.id,  # type: ignore[arg-type]
                description=e.description,
                hours=e.hours or Decimal("0"),
                rate_per_hour=e.rate_per_hour or Decimal("0"),
                minutes=e.labor_minutes,
                total=e.labor_cost,
            )
            for e in sorted(labor_entries, key=lambda e: (e.created_at, e.id or 0))
            if e.request_id == request_id and e.is_billable
        )

        materials_total = sum((line.total for line in materials), Money.zero())
        labor_total = sum((line.total for line in labor), Money.zero())

        if membership_tier == MembershipTier.PREMIUM:
            discount_rate = self._policy.premium_labor_discount_rate
        else:
            discount_rate = Decimal("0")
        discount = labor_total * discount_rate

        subtotal = materials_total + labor_total - discount
        tax = Money(
            (subtotal.amount * self._policy.gst_rate).quantize(CENT, rounding=ROUND_HALF_UP)
        )

        return Bill(
            request_id=request_id,
            membership_tier=membership_tier,
            materials=materials,
            labor=labor,
            materials_total=materials_total,
            labor_total=labor_total,
            discount_rate=discount_rate,
            discount=discount,
            subtotal=subtotal,
            tax_rate=self._policy.gst_rate,
            tax=tax,
            grand_total=subtotal + tax,
        )
