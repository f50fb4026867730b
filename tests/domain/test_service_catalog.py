"""Unit tests for the service catalogue quotes and turnaround estimates."""

from datetime import date

import pytest

from servicebay.domain.model.party import VehicleCategory
from servicebay.domain.model.value_objects import Money
from servicebay.domain.service.service_catalog import estimated_completion, quoted_base_fee

V = VehicleCategory


class TestQuotedBaseFee:

    @pytest.mark.parametrize(
        "service, category, expected",
        [
            ("Oil Change", V.CAR, "2400.00"),
            ("Oil Change", V.BIKE, "1600.00"),
            ("Engine Repair", V.TRUCK, "22500.00"),
            ("Detailing", V.CAR, "6000.00"),
        ],
    )
    def test_fee_by_category(self, service, category, expected):
        assert quoted_base_fee(service, category) == Money.of(expected)


class TestEstimatedCompletion:

    START = date(2024, 3, 1)

    def test_car_uses_table(self):
        assert estimated_completion("Engine Repair", V.CAR, self.START) == date(2024, 3, 6)

    def test_bike_is_a_day_faster_but_never_same_day(self):
        assert estimated_completion("Engine Repair", V.BIKE, self.START) == date(2024, 3, 5)
        assert estimated_completion("Oil Change", V.BIKE, self.START) == date(2024, 3, 2)

    def test_truck_takes_a_day_longer(self):
        assert estimated_completion("Regular Maintenance", V.TRUCK, self.START) == date(2024, 3, 5)

    def test_unknown_service_defaults_to_two_days(self):
        assert estimated_completion("Detailing", V.CAR, self.START) == date(2024, 3, 3)
