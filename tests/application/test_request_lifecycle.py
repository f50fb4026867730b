"""Integration tests for booking, advisor assignment and status transitions."""

from datetime import date

import pytest

from servicebay.application.assign_advisor import AssignAdvisorHandler
from servicebay.application.book_service_request import BookServiceRequestHandler
from servicebay.application.reassign_advisor import ReassignAdvisorHandler
from servicebay.application.show_history import ShowHistoryHandler
from servicebay.application.show_request import (
    AdvisorQueueHandler,
    CompletedServicesHandler,
    ListRequestsHandler,
    ShowRequestHandler,
)
from servicebay.application.transition_status import TransitionStatusHandler
from servicebay.domain.exceptions import (
    ConcurrencyConflictError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from servicebay.domain.model.labor import LaborEntryKind
from servicebay.domain.model.party import Customer, Vehicle, VehicleCategory
from servicebay.domain.model.service_request import ServiceStatus
from tests.fakes import FailingNotifier, Shop

S = ServiceStatus


def _transition(shop: Shop, notifier=None) -> TransitionStatusHandler:
    return TransitionStatusHandler(
        shop.requests, shop.parties, shop.labor, notifier or shop.notifier
    )


class TestBookRequest:

    def test_booking_starts_in_received(self):
        shop = Shop()
        dto = BookServiceRequestHandler(shop.requests, shop.parties).handle(
            1, "Oil Change", "Due for service", date(2024, 3, 4)
        )
        assert dto.reference == f"REQ-{dto.id}"
        assert dto.status == "Received"
        assert dto.registration_number == "KA01AB1234"
        assert dto.advisor_name is None
        assert dto.delivery_date == date(2024, 3, 4)

    def test_delivery_date_estimated_when_missing(self):
        shop = Shop()
        dto = BookServiceRequestHandler(shop.requests, shop.parties).handle(1, "Engine Repair")
        assert (dto.delivery_date - dto.created_at.date()).days == 5

    def test_quote_uses_vehicle_category(self):
        shop = Shop()
        dto = ShowRequestHandler(shop.requests, shop.parties).handle(shop.book("Oil Change"))
        assert str(dto.quoted_base_fee) == "2400.00"

    def test_unknown_vehicle(self):
        shop = Shop()
        with pytest.raises(NotFoundError, match="Vehicle #9"):
            BookServiceRequestHandler(shop.requests, shop.parties).handle(9, "Oil Change")


class TestAssignAdvisor:

    def test_assignment_moves_to_diagnosis_and_is_audited(self):
        shop = Shop()
        rid = shop.book()

        dto = AssignAdvisorHandler(shop.requests, shop.parties, shop.labor).handle(rid, 1)

        assert dto.status == "Diagnosis"
        assert dto.advisor_name == "Ravi"
        entries = shop.labor.list_for_request(rid)
        assert len(entries) == 1
        assert entries[0].kind == LaborEntryKind.STATUS_CHANGE
        assert (entries[0].old_status, entries[0].new_status) == (S.RECEIVED, S.DIAGNOSIS)

    def test_second_assignment_is_a_no_op(self):
        shop = Shop()
        rid = shop.book()
        shop.assign(rid, 1)

        dto = AssignAdvisorHandler(shop.requests, shop.parties, shop.labor).handle(rid, 2)

        assert dto.advisor_name == "Ravi"
        assert len(shop.labor.list_for_request(rid)) == 1

    def test_unknown_advisor(self):
        shop = Shop()
        rid = shop.book()
        with pytest.raises(NotFoundError, match="advisor #42"):
            AssignAdvisorHandler(shop.requests, shop.parties, shop.labor).handle(rid, 42)
        assert shop.requests.get_by_id(rid).status == S.RECEIVED

    def test_unknown_request(self):
        shop = Shop()
        with pytest.raises(NotFoundError, match="#99"):
            AssignAdvisorHandler(shop.requests, shop.parties, shop.labor).handle(99, 1)

    def test_reassign_leaves_a_note(self):
        shop = Shop()
        rid = shop.book()
        shop.assign(rid, 1)

        dto = ReassignAdvisorHandler(shop.requests, shop.parties, shop.labor).handle(
            rid, 2, "Ravi on leave"
        )

        assert dto.advisor_name == "Meera"
        assert dto.status == "Diagnosis"
        note = shop.labor.list_for_request(rid)[-1]
        assert note.kind == LaborEntryKind.WORK_NOTE
        assert note.description == "Advisor reassigned from Ravi to Meera: Ravi on leave"


class TestTransitionStatus:

    def test_forward_move_is_audited(self):
        shop = Shop()
        rid = shop.book()
        shop.assign(rid)

        result = _transition(shop).handle(rid, S.REPAIR, note="Parts arrived")

        assert (result.old_status, result.new_status) == ("Diagnosis", "Repair")
        assert result.audit_entry.description == "Status: Diagnosis -> Repair: Parts arrived"
        assert result.audit_entry.advisor_id == 1
        assert result.notification_sent is False
        assert shop.requests.get_by_id(rid).status == S.REPAIR

    def test_skipping_forward_allowed(self):
        shop = Shop()
        rid = shop.book()
        assert _transition(shop).handle(rid, S.REPAIR).new_status == "Repair"

    def test_backward_move_rejected_without_audit(self):
        shop = Shop()
        rid = shop.book()
        shop.assign(rid)
        shop.move_to(rid, S.COMPLETED)

        with pytest.raises(InvalidTransitionError):
            _transition(shop).handle(rid, S.REPAIR)
        assert shop.requests.get_by_id(rid).status == S.COMPLETED
        assert len(shop.labor.list_for_request(rid)) == 2

    def test_customer_notified_on_request(self):
        shop = Shop()
        rid = shop.book()
        shop.assign(rid)

        result = _transition(shop).handle(rid, S.COMPLETED, note="Ready", notify_customer=True)

        assert result.notification_sent is True
        [event] = shop.notifier.events
        assert event.customer_email == "asha@example.com"
        assert (event.old_status, event.new_status) == ("Diagnosis", "Completed")
        assert event.note == "Ready"

    def test_notifier_failure_does_not_undo_transition(self):
        shop = Shop()
        rid = shop.book()
        shop.assign(rid)

        result = _transition(shop, FailingNotifier()).handle(
            rid, S.REPAIR, notify_customer=True
        )

        assert result.notification_sent is False
        assert shop.requests.get_by_id(rid).status == S.REPAIR

    def test_stale_copy_loses_the_race(self):
        shop = Shop()
        rid = shop.book()
        shop.assign(rid)
        stale = shop.requests.get_by_id(rid)

        shop.move_to(rid, S.REPAIR)
        stale.transition_to(S.COMPLETED)

        with pytest.raises(ConcurrencyConflictError):
            shop.requests.save(stale)
        assert shop.requests.get_by_id(rid).status == S.REPAIR


class TestQueries:

    def test_history_in_commit_order(self):
        shop = Shop()
        rid = shop.book()
        shop.assign(rid)
        shop.move_to(rid, S.REPAIR)
        shop.move_to(rid, S.COMPLETED)

        history = ShowHistoryHandler(shop.requests, shop.labor).handle(rid)

        assert [(h.old_status, h.new_status) for h in history] == [
            ("Received", "Diagnosis"),
            ("Diagnosis", "Repair"),
            ("Repair", "Completed"),
        ]

    def test_list_by_status(self):
        shop = Shop()
        first = shop.book()
        second = shop.book("Brake Service")
        shop.assign(second)

        received = ListRequestsHandler(shop.requests, shop.parties).handle(S.RECEIVED)
        diagnosis = ListRequestsHandler(shop.requests, shop.parties).handle(S.DIAGNOSIS)

        assert [r.id for r in received] == [first]
        assert [r.id for r in diagnosis] == [second]

    def test_advisor_queue_excludes_completed(self):
        shop = Shop()
        open_job, done_job, other = shop.book(), shop.book("Brake Service"), shop.book()
        shop.assign(open_job)
        shop.assign(done_job)
        shop.move_to(done_job, S.COMPLETED)
        shop.assign(other, advisor_id=2)

        queue = AdvisorQueueHandler(shop.requests, shop.parties).handle(1)

        assert [(r.id, r.advisor_name) for r in queue] == [(open_job, "Ravi")]

    def test_advisor_queue_unknown_advisor(self):
        shop = Shop()
        with pytest.raises(NotFoundError):
            AdvisorQueueHandler(shop.requests, shop.parties).handle(9)


class TestCompletedServices:

    def _shop(self) -> tuple[Shop, int, int]:
        shop = Shop()
        shop.parties.save_customer(Customer.create("Kiran Das"))
        bike = Vehicle.create(2, "Royal Enfield", "Classic", "ka02cd5678", VehicleCategory.BIKE, 2021)
        shop.parties.save_vehicle(bike)

        car_job = shop.book()
        bike_job = BookServiceRequestHandler(shop.requests, shop.parties).handle(
            bike.id, "Oil Change"
        ).id
        shop.book()
        for rid in (car_job, bike_job):
            shop.move_to(rid, S.COMPLETED)
        return shop, car_job, bike_job

    def test_lists_only_completed(self):
        shop, car_job, bike_job = self._shop()
        rows = CompletedServicesHandler(shop.requests, shop.parties).handle()
        assert [r.id for r in rows] == [car_job, bike_job]

    def test_category_filter(self):
        shop, _, bike_job = self._shop()
        rows = CompletedServicesHandler(shop.requests, shop.parties).handle(category="bike")
        assert [r.id for r in rows] == [bike_job]

    @pytest.mark.parametrize("term", ["enfield", "KA02CD", "kiran"])
    def test_search_matches_vehicle_registration_or_customer(self, term):
        shop, _, bike_job = self._shop()
        rows = CompletedServicesHandler(shop.requests, shop.parties).handle(search=term)
        assert [r.id for r in rows] == [bike_job]

    def test_unknown_category_rejected(self):
        shop, _, _ = self._shop()
        with pytest.raises(ValidationError, match="vehicle category"):
            CompletedServicesHandler(shop.requests, shop.parties).handle(category="Boat")
