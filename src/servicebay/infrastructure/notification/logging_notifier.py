"""Notifier that writes status-change events to the log.

Stands in for e-mail/SMS delivery, which lives outside this system.
"""

from __future__ import annotations

import logging

from servicebay.domain.service.notifications import Notifier, StatusChangeEvent

logger = logging.getLogger(__name__)


class LoggingNotifier(Notifier):

    def status_changed(self, event: StatusChangeEvent) -> None:
        recipient = event.customer_email or "(no e-mail on file)"
        logger.info(
            "Notify %s <%s>: %s %s is now %s (was %s)%s",
            event.customer_name, recipient, event.vehicle, event.registration_number,
            event.new_status, event.old_status,
            f" - {event.note}" if event.note else "",
        )
