# services/booking-service/src/apps/core/services/booking_service.py
"""
Booking Service

Core business logic for court rentals and lesson reservations.
"""

import uuid
import logging
from datetime import datetime, date
from decimal import Decimal
from typing import Optional, List

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from shared.common.utils import ensure_aware, local_day_bounds
from shared.common.validators import validate_positive_decimal, validate_time_slot

from apps.core.exceptions import (
    NotFoundError,
    InsufficientFundsError,
    SlotConflictError,
    ScheduleUnavailableError,
    InvalidRequestError,
    BookingStateError,
)
from apps.core.intervals import IntervalKind
from apps.core.models import Booking, Court, Schedule, Student
from .availability_service import AvailabilityService
from .balance_service import BalanceService
from .court_allocator import CourtAllocator

logger = logging.getLogger(__name__)

CONFLICT_MESSAGES = {
    IntervalKind.COURT_RENTAL: "Court is blocked by a court rental",
    IntervalKind.BLOCKED_SCHEDULE: "Court is blocked by a blocked schedule",
    IntervalKind.LESSON: "Court is taken by another lesson",
}


class BookingService:
    """
    Service for managing bookings.

    Handles:
    - Booking creation with balance gate and conflict checks
    - Status transitions (cancel, complete)
    - Booking queries
    """

    def __init__(
        self,
        availability_service: AvailabilityService = None,
        court_allocator: CourtAllocator = None
    ):
        self.availability_service = availability_service or AvailabilityService()
        self.court_allocator = court_allocator or CourtAllocator(self.availability_service)

    # ==========================================================================
    # Booking Creation
    # ==========================================================================

    @transaction.atomic
    def create_booking(
        self,
        tenant_id: uuid.UUID,
        student_id: uuid.UUID,
        service_type: str,
        price,
        schedule_id: uuid.UUID = None,
        court_id: uuid.UUID = None,
        start_time: datetime = None,
        end_time: datetime = None,
        notes: str = None
    ) -> Booking:
        """
        Create a confirmed booking.

        The membership row and the court row are locked for the rest of
        the transaction; the schedule is claimed with a guarded update.
        Any failure rolls back the booking, the claim and the balance
        adjustment together.
        """
        # 1. Validate request
        if start_time is not None:
            start_time = ensure_aware(start_time)
        if end_time is not None:
            end_time = ensure_aware(end_time)
        price = self._validate_request(service_type, price, schedule_id, court_id, start_time, end_time)

        student = Student.objects.filter(id=student_id).first()
        if student is None:
            raise NotFoundError(f"Student {student_id} not found")
        if not student.is_active:
            raise InvalidRequestError(f"Student {student_id} is inactive")

        # 2. Balance gate against the ledger, never the cache
        BalanceService.ensure_membership(student_id, tenant_id, lock=True)
        balance = BalanceService.calculate_balance(student_id, tenant_id)
        if balance < price:
            logger.info(
                f"Insufficient funds for student {student_id}: balance {balance}, price {price}",
                extra={'student_id': str(student_id), 'tenant_id': str(tenant_id)}
            )
            raise InsufficientFundsError(
                f"Insufficient balance. Required: {price}, Available: {balance}",
                balance=balance,
                required=price
            )

        # 3. Resolve the resource
        schedule = None
        if service_type == Booking.ServiceType.COURT_RENTAL:
            court = self._lock_court(tenant_id, court_id)
            if not court.is_active:
                raise InvalidRequestError(f"Court {court.name} is not active")
            self._ensure_no_conflict(tenant_id, court.id, start_time, end_time)
            booking_date = start_time
        else:
            schedule, court = self._resolve_lesson(tenant_id, schedule_id)
            booking_date = schedule.start_time
            end_time = None

        # 4. Persist
        booking = Booking.objects.create(
            tenant_id=tenant_id,
            student_id=student_id,
            professor_id=schedule.professor_id if schedule else None,
            schedule=schedule,
            court=court,
            service_type=service_type,
            price=price,
            status=Booking.Status.CONFIRMED,
            booking_date=booking_date,
            end_time=end_time,
            notes=notes,
        )

        # 5. Claim the schedule
        if schedule is not None:
            claimed = Schedule.objects.filter(
                id=schedule.id,
                is_available=True,
                is_blocked=False,
            ).update(
                is_available=False,
                student_id=student_id,
                updated_at=timezone.now(),
            )
            if not claimed:
                raise ScheduleUnavailableError(f"Schedule {schedule.id} was taken concurrently")

        # 6. Adjust the cache
        BalanceService.update_balance_cache(student_id, tenant_id, -price)

        logger.info(
            f"Created {service_type} booking {booking.id} for student {student_id}",
            extra={
                'booking_id': str(booking.id),
                'tenant_id': str(tenant_id),
                'court_id': str(court.id) if court else None,
                'schedule_id': str(schedule.id) if schedule else None,
                'price': str(price),
            }
        )

        return booking

    def _resolve_lesson(self, tenant_id: uuid.UUID, schedule_id: uuid.UUID):
        """Load and check a lesson schedule, returning it with its court."""
        schedule = Schedule.objects.filter(id=schedule_id, tenant_id=tenant_id).first()
        if schedule is None:
            raise NotFoundError(f"Schedule {schedule_id} not found")

        if schedule.is_blocked:
            raise ScheduleUnavailableError(
                f"Schedule {schedule_id} is blocked"
                + (f": {schedule.block_reason}" if schedule.block_reason else "")
            )
        if not schedule.is_available:
            raise ScheduleUnavailableError(f"Schedule {schedule_id} is already booked")

        if schedule.court_id is not None:
            court = self._lock_court(tenant_id, schedule.court_id)
            if not court.is_active:
                raise InvalidRequestError(f"Court {court.name} is not active")
            self._ensure_no_conflict(
                tenant_id, court.id, schedule.start_time, schedule.end_time,
                exclude_schedule_id=schedule.id
            )
            return schedule, court

        court = self.court_allocator.find_available_court(
            tenant_id, schedule.start_time, schedule.end_time
        )
        if court is not None:
            court = self._lock_court(tenant_id, court.id)
            if self.availability_service.has_conflict(
                tenant_id, court.id, schedule.start_time, schedule.end_time
            ):
                court = None

        if court is None and settings.BOOKING_REQUIRE_COURT_FOR_LESSONS:
            raise SlotConflictError("No court available for this lesson")

        return schedule, court

    def _lock_court(self, tenant_id: uuid.UUID, court_id: uuid.UUID) -> Court:
        try:
            return Court.objects.select_for_update().get(id=court_id, tenant_id=tenant_id)
        except Court.DoesNotExist:
            raise NotFoundError(f"Court {court_id} not found")

    def _ensure_no_conflict(
        self,
        tenant_id: uuid.UUID,
        court_id: uuid.UUID,
        start: datetime,
        end: datetime,
        exclude_schedule_id: uuid.UUID = None
    ):
        conflicts = self.availability_service.find_conflicts(
            tenant_id, court_id, start, end,
            exclude_schedule_id=exclude_schedule_id
        )
        if conflicts:
            cause = conflicts[0].kind
            raise SlotConflictError(
                CONFLICT_MESSAGES[cause],
                cause=cause,
                conflicts=conflicts
            )

    # ==========================================================================
    # Status Transitions
    # ==========================================================================

    @transaction.atomic
    def cancel_booking(
        self,
        booking_id: uuid.UUID,
        tenant_id: uuid.UUID = None,
        reason: str = None
    ) -> Booking:
        """
        Cancel an active booking.

        Releases the schedule and credits the cache with what the booking
        was taking from the ledger. No refund payment is created.
        """
        booking = self._get_for_update(booking_id, tenant_id)

        if not booking.can_cancel:
            raise BookingStateError(f"Cannot cancel: booking status is {booking.status}")

        restored = BalanceService.booking_contribution(booking)

        booking.cancel(reason)

        if booking.schedule_id:
            booking.schedule.release()

        BalanceService.update_balance_cache(booking.student_id, booking.tenant_id, restored)

        logger.info(
            f"Cancelled booking {booking.id}",
            extra={'booking_id': str(booking.id), 'restored': str(restored)}
        )
        return booking

    @transaction.atomic
    def complete_booking(
        self,
        booking_id: uuid.UUID,
        tenant_id: uuid.UUID = None
    ) -> Booking:
        """Complete an active booking. Unpaid completed bookings remain debt."""
        booking = self._get_for_update(booking_id, tenant_id)

        if not booking.can_complete:
            raise BookingStateError(f"Cannot complete: booking status is {booking.status}")

        booking.complete()

        logger.info(f"Completed booking {booking.id}")
        return booking

    # ==========================================================================
    # Queries
    # ==========================================================================

    def get_booking(self, booking_id: uuid.UUID, tenant_id: uuid.UUID = None) -> Booking:
        """Get a booking by ID."""
        queryset = Booking.objects.select_related('schedule', 'court')
        if tenant_id:
            queryset = queryset.filter(tenant_id=tenant_id)
        try:
            return queryset.get(id=booking_id)
        except Booking.DoesNotExist:
            raise NotFoundError(f"Booking {booking_id} not found")

    def list_bookings(
        self,
        tenant_id: uuid.UUID,
        student_id: uuid.UUID = None,
        court_id: uuid.UUID = None,
        status: str = None,
        service_type: str = None,
        target_date: date = None
    ) -> List[Booking]:
        """List bookings with filters."""
        queryset = Booking.objects.filter(tenant_id=tenant_id).select_related('schedule', 'court')

        if student_id:
            queryset = queryset.filter(student_id=student_id)

        if court_id:
            queryset = queryset.filter(court_id=court_id)

        if status:
            queryset = queryset.filter(status=status)

        if service_type:
            queryset = queryset.filter(service_type=service_type)

        if target_date:
            day_start, day_end = local_day_bounds(target_date)
            queryset = queryset.filter(booking_date__gte=day_start, booking_date__lt=day_end)

        return list(queryset.order_by('booking_date'))

    def list_student_bookings(
        self,
        tenant_id: uuid.UUID,
        student_id: uuid.UUID,
        status: str = None
    ) -> List[Booking]:
        return self.list_bookings(tenant_id, student_id=student_id, status=status)

    # ==========================================================================
    # Private Methods
    # ==========================================================================

    def _get_for_update(self, booking_id: uuid.UUID, tenant_id: uuid.UUID = None) -> Booking:
        queryset = Booking.objects.select_for_update()
        if tenant_id:
            queryset = queryset.filter(tenant_id=tenant_id)
        try:
            return queryset.get(id=booking_id)
        except Booking.DoesNotExist:
            raise NotFoundError(f"Booking {booking_id} not found")

    def _validate_request(
        self,
        service_type: str,
        price,
        schedule_id: Optional[uuid.UUID],
        court_id: Optional[uuid.UUID],
        start_time: Optional[datetime],
        end_time: Optional[datetime]
    ) -> Decimal:
        """Validate a booking request and return the price as a Decimal."""
        if service_type not in Booking.ServiceType.values:
            raise InvalidRequestError(f"Unknown service type: {service_type}")

        try:
            price = validate_positive_decimal(price, 'price')
        except ValidationError as e:
            raise InvalidRequestError(e.messages[0])

        if service_type == Booking.ServiceType.COURT_RENTAL:
            missing = [
                name for name, value in (
                    ('court_id', court_id),
                    ('start_time', start_time),
                    ('end_time', end_time),
                )
                if value is None
            ]
            if missing:
                raise InvalidRequestError(f"Missing required fields: {', '.join(missing)}")

            try:
                validate_time_slot(start_time, end_time)
            except ValidationError as e:
                raise InvalidRequestError(e.messages[0])
        elif schedule_id is None:
            raise InvalidRequestError("Missing required fields: schedule_id")

        return price
