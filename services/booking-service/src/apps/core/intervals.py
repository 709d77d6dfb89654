# services/booking-service/src/apps/core/intervals.py
"""
Interval Utilities

Half-open [start, end) time windows and the normalisers that turn
bookings and schedules into them.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from django.conf import settings


class IntervalKind:
    COURT_RENTAL = 'court_rental'
    LESSON = 'lesson'
    BLOCKED_SCHEDULE = 'blocked_schedule'

    ALL = (COURT_RENTAL, LESSON, BLOCKED_SCHEDULE)


@dataclass(frozen=True)
class Interval:
    """An occupied window on a court."""

    start: datetime
    end: datetime
    kind: str = IntervalKind.COURT_RENTAL
    booking_id: Optional[uuid.UUID] = None
    schedule_id: Optional[uuid.UUID] = None

    def overlaps(self, other: 'Interval') -> bool:
        return overlaps(self, other)

    def to_dict(self) -> dict:
        return {
            'start': self.start.isoformat(),
            'end': self.end.isoformat(),
            'kind': self.kind,
            'booking_id': str(self.booking_id) if self.booking_id else None,
            'schedule_id': str(self.schedule_id) if self.schedule_id else None,
        }


def overlaps(a, b) -> bool:
    """
    Two half-open intervals intersect iff each starts before the other ends.
    Touching endpoints do not overlap.
    """
    return a.start < b.end and b.start < a.end


def default_rental_duration() -> timedelta:
    minutes = getattr(settings, 'DEFAULT_RENTAL_DURATION_MINUTES', 60)
    return timedelta(minutes=minutes)


def rental_end(start: datetime, end: Optional[datetime] = None) -> datetime:
    """End of a rental; a rental without an explicit end lasts the default duration."""
    return end if end is not None else start + default_rental_duration()


# =============================================================================
# NORMALISERS
# =============================================================================

def from_booking(booking) -> Optional[Interval]:
    """
    Occupied window of a booking.

    Rentals use booking_date and end_time (or the default duration);
    lessons use their schedule's window. A lesson without a schedule
    occupies nothing.
    """
    if booking.service_type == 'court_rental':
        return Interval(
            start=booking.booking_date,
            end=rental_end(booking.booking_date, booking.end_time),
            kind=IntervalKind.COURT_RENTAL,
            booking_id=booking.id,
        )

    schedule = booking.schedule
    if schedule is None:
        return None

    return Interval(
        start=schedule.start_time,
        end=schedule.end_time,
        kind=IntervalKind.LESSON,
        booking_id=booking.id,
        schedule_id=schedule.id,
    )


def from_schedule(schedule) -> Interval:
    """Window of a schedule; blocked slots are tagged as such."""
    kind = IntervalKind.BLOCKED_SCHEDULE if schedule.is_blocked else IntervalKind.LESSON
    return Interval(
        start=schedule.start_time,
        end=schedule.end_time,
        kind=kind,
        schedule_id=schedule.id,
    )
