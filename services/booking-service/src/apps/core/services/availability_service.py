# services/booking-service/src/apps/core/services/availability_service.py
"""
Availability Service

Court conflict resolution, hourly slot enumeration and operating hours.
"""

import uuid
import logging
from datetime import datetime, date
from typing import Optional, Dict, Any, List, Iterable, Tuple

from django.conf import settings
from django.core.cache import cache
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from shared.common.constants import CACHE_PREFIX_OPERATING_HOURS, CACHE_TTL_MEDIUM
from shared.common.utils import local_day_bounds, make_cache_key
from shared.common.validators import validate_hour_range

from apps.core import intervals
from apps.core.exceptions import ConfigurationError, InvalidRequestError, NotFoundError
from apps.core.intervals import Interval, IntervalKind
from apps.core.models import Booking, Court, OperatingHours, Schedule

logger = logging.getLogger(__name__)

DAY_NAMES = [
    'sunday', 'monday', 'tuesday', 'wednesday',
    'thursday', 'friday', 'saturday'
]


class AvailabilityService:
    """
    Service for court availability.

    Handles:
    - Conflict detection across rentals, lessons and blocked schedules
    - Hourly slot enumeration
    - Cross-kind filtering of available lesson schedules
    - Operating hours
    """

    # ==========================================================================
    # Conflict Detection
    # ==========================================================================

    def has_conflict(
        self,
        tenant_id: uuid.UUID,
        court_id: uuid.UUID,
        start: datetime,
        end: datetime,
        exclude_schedule_id: uuid.UUID = None
    ) -> bool:
        """Check whether any active booking or blocked schedule overlaps the window."""
        return bool(self.find_conflicts(
            tenant_id, court_id, start, end,
            exclude_schedule_id=exclude_schedule_id
        ))

    def find_conflicts(
        self,
        tenant_id: uuid.UUID,
        court_id: uuid.UUID,
        start: datetime,
        end: datetime,
        kinds: Iterable[str] = None,
        exclude_schedule_id: uuid.UUID = None
    ) -> List[Interval]:
        """
        Return the occupied intervals on a court overlapping [start, end).

        Intervals are ordered by start. `kinds` restricts the result to
        the given interval kinds.
        """
        if court_id is None:
            return []

        candidate = Interval(start=start, end=end)
        occupied = self._occupied_intervals(
            tenant_id, court_id, start, end,
            exclude_schedule_id=exclude_schedule_id
        )

        conflicts = [i for i in occupied if intervals.overlaps(i, candidate)]
        if kinds is not None:
            kinds = set(kinds)
            conflicts = [i for i in conflicts if i.kind in kinds]

        return sorted(conflicts, key=lambda i: i.start)

    def _occupied_intervals(
        self,
        tenant_id: uuid.UUID,
        court_id: uuid.UUID,
        start: datetime,
        end: datetime,
        exclude_schedule_id: uuid.UUID = None
    ) -> List[Interval]:
        """
        Load candidate occupants of a court near a window.

        The queries return a superset; callers apply the exact overlap test.
        """
        default_duration = intervals.default_rental_duration()

        bookings = Booking.objects.filter(
            tenant_id=tenant_id,
            status__in=Booking.ACTIVE_STATUSES,
        ).filter(
            Q(court_id=court_id) | Q(schedule__court_id=court_id)
        ).filter(
            Q(booking_date__lt=end) | Q(schedule__start_time__lt=end)
        ).filter(
            Q(end_time__gt=start)
            | Q(end_time__isnull=True, booking_date__gt=start - default_duration)
            | Q(schedule__end_time__gt=start)
        ).select_related('schedule')

        if exclude_schedule_id:
            bookings = bookings.exclude(schedule_id=exclude_schedule_id)

        occupied = []
        for booking in bookings:
            interval = intervals.from_booking(booking)
            if interval is not None:
                occupied.append(interval)

        blocked = Schedule.objects.filter(
            tenant_id=tenant_id,
            court_id=court_id,
            is_blocked=True,
            start_time__lt=end,
            end_time__gt=start,
        )
        if exclude_schedule_id:
            blocked = blocked.exclude(id=exclude_schedule_id)

        occupied.extend(intervals.from_schedule(schedule) for schedule in blocked)

        return occupied

    # ==========================================================================
    # Available Slots
    # ==========================================================================

    def get_available_slots(
        self,
        tenant_id: uuid.UUID,
        court_id: uuid.UUID,
        target_date: date
    ) -> Dict[str, List[str]]:
        """
        Enumerate whole-hour slots of a court on a day.

        An hour is booked when an occupying interval starts within it
        on that date (local time); it does not mark the following hours.
        """
        if not Court.objects.filter(id=court_id, tenant_id=tenant_id).exists():
            raise NotFoundError(f"Court {court_id} not found")

        hours = self.resolve_operating_hours(tenant_id, target_date)
        if hours is None:
            return {'available': [], 'booked': []}

        open_hour, close_hour = hours

        day_start, day_end = local_day_bounds(target_date)
        booked_hours = set()
        for interval in self._occupied_intervals(tenant_id, court_id, day_start, day_end):
            local_start = timezone.localtime(interval.start)
            if local_start.date() == target_date:
                booked_hours.add(local_start.hour)

        available, booked = [], []
        for hour in range(open_hour, close_hour):
            label = f"{hour:02d}:00"
            if hour in booked_hours:
                booked.append(label)
            else:
                available.append(label)

        return {'available': available, 'booked': booked}

    # ==========================================================================
    # Available Schedules
    # ==========================================================================

    def filter_available_schedules(
        self,
        tenant_id: uuid.UUID,
        schedules: Iterable[Schedule]
    ) -> List[Schedule]:
        """Drop schedules whose court is taken by an overlapping court rental."""
        result = []
        for schedule in schedules:
            if schedule.court_id is None:
                result.append(schedule)
                continue

            rentals = self.find_conflicts(
                tenant_id,
                schedule.court_id,
                schedule.start_time,
                schedule.end_time,
                kinds=[IntervalKind.COURT_RENTAL],
                exclude_schedule_id=schedule.id,
            )
            if rentals:
                logger.debug(
                    f"Schedule {schedule.id} hidden by court rental on court {schedule.court_id}"
                )
                continue

            result.append(schedule)

        return result

    def list_available_schedules(
        self,
        tenant_id: uuid.UUID,
        target_date: date = None,
        professor_id: uuid.UUID = None
    ) -> List[Schedule]:
        """Available, unblocked schedules not invalidated by a court rental."""
        schedules = Schedule.objects.filter(
            tenant_id=tenant_id,
            is_available=True,
            is_blocked=False,
        ).select_related('court').order_by('start_time')

        if target_date:
            day_start, day_end = local_day_bounds(target_date)
            schedules = schedules.filter(start_time__gte=day_start, start_time__lt=day_end)

        if professor_id:
            schedules = schedules.filter(professor_id=professor_id)

        return self.filter_available_schedules(tenant_id, schedules)

    # ==========================================================================
    # Operating Hours
    # ==========================================================================

    def resolve_operating_hours(
        self,
        tenant_id: uuid.UUID,
        target_date: date
    ) -> Optional[Tuple[int, int]]:
        """
        Opening and closing hour for a date, or None when closed.

        Tenants without any operating-hours rows get DEFAULT_OPERATING_HOURS.
        """
        table = self._get_hours_table(tenant_id)

        if not table:
            open_hour, close_hour = settings.DEFAULT_OPERATING_HOURS
        else:
            entry = table.get(OperatingHours.day_index(target_date))
            if entry is None or not entry['is_active']:
                return None
            open_hour, close_hour = entry['open_hour'], entry['close_hour']

        try:
            validate_hour_range(open_hour, close_hour)
        except ValidationError as e:
            logger.error(
                f"Invalid operating hours for tenant {tenant_id}: {open_hour}-{close_hour}",
                extra={'tenant_id': str(tenant_id)}
            )
            raise ConfigurationError(
                f"Invalid operating hours {open_hour}-{close_hour}: {e.messages[0]}"
            )

        return open_hour, close_hour

    def _get_hours_table(self, tenant_id: uuid.UUID) -> Dict[int, Dict[str, Any]]:
        """Per-weekday operating hours of a tenant, cached."""
        key = make_cache_key(tenant_id, prefix=CACHE_PREFIX_OPERATING_HOURS)
        table = cache.get(key)
        if table is None:
            table = {
                row['day_of_week']: row
                for row in OperatingHours.objects.filter(tenant_id=tenant_id).values(
                    'day_of_week', 'open_hour', 'close_hour', 'is_active'
                )
            }
            cache.set(key, table, CACHE_TTL_MEDIUM)
        return table

    @transaction.atomic
    def set_operating_hours(
        self,
        tenant_id: uuid.UUID,
        day_of_week: int,
        open_hour: int,
        close_hour: int,
        is_active: bool = True
    ) -> OperatingHours:
        """Set operating hours for one weekday."""
        if day_of_week not in OperatingHours.DayOfWeek.values:
            raise InvalidRequestError(f"Invalid day of week: {day_of_week}")

        try:
            validate_hour_range(open_hour, close_hour)
        except ValidationError as e:
            raise InvalidRequestError(e.messages[0])

        operating, created = OperatingHours.objects.update_or_create(
            tenant_id=tenant_id,
            day_of_week=day_of_week,
            defaults={
                'open_hour': open_hour,
                'close_hour': close_hour,
                'is_active': is_active,
            }
        )

        logger.info(
            f"{'Created' if created else 'Updated'} operating hours for tenant {tenant_id}: "
            f"{DAY_NAMES[day_of_week]} {open_hour:02d}-{close_hour:02d}"
        )

        return operating

    def get_operating_hours(self, tenant_id: uuid.UUID) -> List[OperatingHours]:
        """Get all active operating hours for a tenant."""
        return list(
            OperatingHours.objects.filter(
                tenant_id=tenant_id,
                is_active=True
            ).order_by('day_of_week')
        )

    def get_weekly_schedule(self, tenant_id: uuid.UUID) -> Dict[str, Any]:
        """Get weekly operating hours schedule."""
        table = self._get_hours_table(tenant_id)

        schedule = {}
        for day_num, day_name in enumerate(DAY_NAMES):
            if not table:
                open_hour, close_hour = settings.DEFAULT_OPERATING_HOURS
                schedule[day_name] = {
                    'open': f"{open_hour:02d}:00",
                    'close': f"{close_hour:02d}:00",
                    'is_open': True,
                    'is_default': True,
                }
                continue

            entry = table.get(day_num)
            if entry and entry['is_active']:
                schedule[day_name] = {
                    'open': f"{entry['open_hour']:02d}:00",
                    'close': f"{entry['close_hour']:02d}:00",
                    'is_open': True,
                }
            else:
                schedule[day_name] = {
                    'is_open': False,
                }

        return schedule
