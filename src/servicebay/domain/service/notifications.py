"""Outbound port for customer notifications.

The core only builds the event; how (or whether) it reaches the customer
is the notifier's business.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass(frozen=True)
class StatusChangeEvent:
    request_id: int
    old_status: str
    new_status: str
    customer_name: str
    customer_email: str | None
    vehicle: str
    registration_number: str
    note: str | None = None
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class Notifier(ABC):

    @abstractmethod
    def status_changed(self, event: StatusChangeEvent) -> None:
        """Deliver a status-change notice. May raise; callers swallow errors."""
