"""Bill — the always-current computed snapshot of what a request costs.

A Bill is never stored; it is recomputed from the ledgers whenever it
is needed.  Amounts are kept at full precision except ``tax``, which is
rounded to cents when it is computed.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from servicebay.domain.model.party import MembershipTier
from servicebay.domain.model.value_objects import Money


@dataclass(frozen=True)
class MaterialLine:
    usage_id: int
    item_name: str
    quantity: Decimal
    unit_price: Money
    total: Money


@dataclass(frozen=True)
class LaborLine:
    entry_id: int
    description: str
    hours: Decimal
    rate_per_hour: Decimal
    minutes: int
    total: Money


@dataclass(frozen=True)
class Bill:
    request_id: int
    membership_tier: MembershipTier
    materials: tuple[MaterialLine, ...]
    labor: tuple[LaborLine, ...]
    materials_total: Money
    labor_total: Money
    discount_rate: Decimal
    discount: Money
    subtotal: Money
    tax_rate: Decimal
    tax: Money
    grand_total: Money

    @property
    def has_discount(self) -> bool:
        return not self.discount.is_zero
