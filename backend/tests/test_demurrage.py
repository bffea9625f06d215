"""Tests for demurrage free-time tracking."""

from datetime import date

import pytest

from app.models.shipment import DemurrageRisk
from app.schemas.shipment import DemurrageStatus, ShipmentSnapshot
from app.status_engine.demurrage import (
    days_remaining,
    demurrage_deadline,
    demurrage_risk_level,
    demurrage_status,
    is_clearance_entry_overdue,
)


class TestDaysRemaining:
    def test_free_time_left(self, now):
        data = ShipmentSnapshot(eta="2024-01-01", free_time_days=14)
        assert demurrage_deadline(data) == date(2024, 1, 15)
        assert days_remaining(data, now) == 3

    def test_free_time_exceeded(self, now):
        data = ShipmentSnapshot(eta="2024-01-01", free_time_days=6)
        assert days_remaining(data, now) == -5

    def test_clearance_date_stops_the_clock(self, now):
        data = ShipmentSnapshot(
            eta="2024-01-01", free_time_days=14, customs_clearance_date="2024-01-10"
        )
        assert days_remaining(data, now) == 5

    def test_time_of_day_ignored(self, now):
        data = ShipmentSnapshot(eta="2024-01-01T22:00:00", free_time_days="14")
        assert days_remaining(data, now) == 3

    def test_zero_free_time(self, now):
        data = ShipmentSnapshot(eta="2024-01-12", free_time_days=0)
        assert days_remaining(data, now) == 0

    @pytest.mark.parametrize(
        "snapshot",
        [
            ShipmentSnapshot(free_time_days=14),
            ShipmentSnapshot(eta="2024-01-01"),
            ShipmentSnapshot(eta="2024-01-01", free_time_days=""),
            ShipmentSnapshot(eta="not a date", free_time_days=14),
            ShipmentSnapshot(eta="2024-01-01", free_time_days="1e18"),
            ShipmentSnapshot(eta="2024-01-01", free_time_days="1e30"),
        ],
    )
    def test_missing_inputs(self, snapshot, now):
        assert days_remaining(snapshot, now) is None


class TestDemurrageStatus:
    def test_unknown(self, now):
        status = demurrage_status(ShipmentSnapshot(), now)
        assert status.status == DemurrageRisk.UNKNOWN
        assert status.message == "Missing ETA or free time information"
        assert status.deadline_date is None

    def test_safe(self, now):
        status = demurrage_status(ShipmentSnapshot(eta="2024-01-01", free_time_days=14), now)
        assert status.status == DemurrageRisk.SAFE
        assert status.days_remaining == 3
        assert status.deadline_date == date(2024, 1, 15)
        assert status.message == "3 day(s) remaining"

    @pytest.mark.parametrize("free_days, remaining", [(11, 0), (12, 1), (13, 2)])
    def test_warning_window(self, free_days, remaining, now):
        data = ShipmentSnapshot(eta="2024-01-01", free_time_days=free_days)
        status = demurrage_status(data, now)
        assert status.status == DemurrageRisk.WARNING
        assert status.days_remaining == remaining
        assert status.message == f"Warning: {remaining} day(s) until demurrage"

    def test_exceeded(self, now):
        status = demurrage_status(ShipmentSnapshot(eta="2024-01-01", free_time_days=6), now)
        assert status.status == DemurrageRisk.EXCEEDED
        assert status.days_overdue == 5
        assert status.days_remaining is None
        assert status.message == "Demurrage: 5 day(s) overdue"

    def test_custom_warning_window(self, now):
        data = ShipmentSnapshot(eta="2024-01-01", free_time_days=14)
        assert demurrage_status(data, now, warning_days=5).status == DemurrageRisk.WARNING


class TestRiskLevel:
    @pytest.mark.parametrize(
        "risk, level",
        [
            (DemurrageRisk.UNKNOWN, 0),
            (DemurrageRisk.SAFE, 1),
            (DemurrageRisk.WARNING, 2),
            (DemurrageRisk.EXCEEDED, 3),
        ],
    )
    def test_levels(self, risk, level):
        assert demurrage_risk_level(DemurrageStatus(status=risk, message="")) == level


class TestClearanceEntryOverdue:
    def test_overdue_three_days_after_arrival(self, now):
        data = ShipmentSnapshot(status="awaiting_clearance", eta="2024-01-09")
        assert is_clearance_entry_overdue(data, now) is True

    def test_not_yet_overdue(self, now):
        data = ShipmentSnapshot(status="awaiting_clearance", eta="2024-01-10")
        assert is_clearance_entry_overdue(data, now) is False

    def test_legacy_arrived_status(self, now):
        data = ShipmentSnapshot(status="arrived", eta="2024-01-01")
        assert is_clearance_entry_overdue(data, now) is True

    def test_clearance_recorded(self, now):
        data = ShipmentSnapshot(
            status="awaiting_clearance", eta="2024-01-01", customs_clearance_date="2024-01-03"
        )
        assert is_clearance_entry_overdue(data, now) is False

    @pytest.mark.parametrize("status", [None, "", "sailed", "planning"])
    def test_not_arrived(self, status, now):
        data = ShipmentSnapshot(status=status, eta="2024-01-01")
        assert is_clearance_entry_overdue(data, now) is False

    def test_missing_eta(self, now):
        assert is_clearance_entry_overdue(ShipmentSnapshot(status="arrived"), now) is False

    def test_eta_at_calendar_end(self, now):
        data = ShipmentSnapshot(status="arrived", eta="9999-12-31")
        assert is_clearance_entry_overdue(data, now) is False


def test_free_time_counted_from_eta(now):
    data = ShipmentSnapshot(eta="2024-01-10", free_time_days=5)
    assert days_remaining(data, now) == 3


def test_late_clearance_counts_against_free_time(now):
    data = ShipmentSnapshot(eta="2024-01-10", free_time_days=5, customs_clearance_date="2024-01-20")
    assert days_remaining(data, now) == -5
