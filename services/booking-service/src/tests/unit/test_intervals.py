# services/booking-service/src/tests/unit/test_intervals.py
"""
Unit Tests for Interval Utilities
"""

import uuid
from datetime import datetime, timedelta, timezone as dt_timezone
from types import SimpleNamespace

import pytest
from django.test import override_settings

from apps.core import intervals
from apps.core.intervals import Interval, IntervalKind


def ts(hour, minute=0):
    return datetime(2030, 6, 12, hour, minute, tzinfo=dt_timezone.utc)


class TestOverlaps:
    """Tests for the half-open overlap predicate."""

    @pytest.mark.parametrize('a, b, expected', [
        ((10, 0, 11, 0), (10, 30, 11, 30), True),
        ((10, 0, 11, 0), (11, 0, 12, 0), False),
        ((10, 0, 12, 0), (10, 30, 11, 0), True),
        ((10, 0, 11, 0), (9, 0, 10, 0), False),
        ((10, 0, 11, 0), (12, 0, 13, 0), False),
    ])
    def test_overlap_cases(self, a, b, expected):
        first = Interval(start=ts(a[0], a[1]), end=ts(a[2], a[3]))
        second = Interval(start=ts(b[0], b[1]), end=ts(b[2], b[3]))

        assert intervals.overlaps(first, second) is expected
        assert intervals.overlaps(second, first) is expected

    def test_touching_endpoints_do_not_overlap(self):
        first = Interval(start=ts(16), end=ts(17))
        second = Interval(start=ts(17), end=ts(18))

        assert not first.overlaps(second)

    def test_accepts_any_object_with_start_and_end(self):
        window = SimpleNamespace(start=ts(10, 30), end=ts(11, 30))

        assert intervals.overlaps(Interval(start=ts(10), end=ts(11)), window)


class TestRentalEnd:
    """Tests for rental end defaulting."""

    def test_explicit_end_is_kept(self):
        assert intervals.rental_end(ts(10), ts(12)) == ts(12)

    def test_missing_end_uses_default_duration(self):
        assert intervals.rental_end(ts(10)) == ts(11)

    @override_settings(DEFAULT_RENTAL_DURATION_MINUTES=90)
    def test_default_duration_is_configurable(self):
        assert intervals.default_rental_duration() == timedelta(minutes=90)
        assert intervals.rental_end(ts(10)) == ts(11, 30)


class TestNormalisers:
    """Tests for booking and schedule normalisation."""

    def test_rental_without_end(self):
        booking = SimpleNamespace(
            id=uuid.uuid4(),
            service_type='court_rental',
            booking_date=ts(10, 30),
            end_time=None,
            schedule=None,
        )

        interval = intervals.from_booking(booking)

        assert interval.start == ts(10, 30)
        assert interval.end == ts(11, 30)
        assert interval.kind == IntervalKind.COURT_RENTAL
        assert interval.booking_id == booking.id

    def test_lesson_uses_schedule_window(self):
        schedule = SimpleNamespace(id=uuid.uuid4(), start_time=ts(16), end_time=ts(17))
        booking = SimpleNamespace(
            id=uuid.uuid4(),
            service_type='individual_lesson',
            booking_date=ts(16),
            end_time=None,
            schedule=schedule,
        )

        interval = intervals.from_booking(booking)

        assert (interval.start, interval.end) == (ts(16), ts(17))
        assert interval.kind == IntervalKind.LESSON
        assert interval.schedule_id == schedule.id

    def test_lesson_without_schedule_occupies_nothing(self):
        booking = SimpleNamespace(
            id=uuid.uuid4(),
            service_type='group_lesson',
            booking_date=ts(16),
            end_time=None,
            schedule=None,
        )

        assert intervals.from_booking(booking) is None

    def test_blocked_schedule_kind(self):
        schedule = SimpleNamespace(
            id=uuid.uuid4(), start_time=ts(8), end_time=ts(9), is_blocked=True
        )

        assert intervals.from_schedule(schedule).kind == IntervalKind.BLOCKED_SCHEDULE

    def test_to_dict(self):
        interval = Interval(start=ts(10), end=ts(11), kind=IntervalKind.LESSON)

        data = interval.to_dict()

        assert data['kind'] == 'lesson'
        assert data['start'] == ts(10).isoformat()
        assert data['booking_id'] is None
