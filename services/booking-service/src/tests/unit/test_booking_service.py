# services/booking-service/src/tests/unit/test_booking_service.py
"""
Unit Tests for BookingService

Tests for the booking workflow: balance gate, conflict checks,
schedule claiming and status transitions.
"""

import uuid
from datetime import datetime, timedelta
from decimal import Decimal
from unittest.mock import patch

import pytest

from apps.core.intervals import IntervalKind
from apps.core.models import Booking, Schedule, StudentTenant
from apps.core.services import (
    BookingService,
    BalanceService,
    PaymentService,
    NotFoundError,
    InsufficientFundsError,
    SlotConflictError,
    ScheduleUnavailableError,
    InvalidRequestError,
    BookingStateError,
)


@pytest.mark.django_db
class TestCourtRental:
    """Tests for court rental bookings."""

    def setup_method(self):
        self.service = BookingService()

    def test_rental_confirms_and_debits(self, tenant_id, court, funded_student, at):
        booking = self.service.create_booking(
            tenant_id=tenant_id,
            student_id=funded_student.id,
            service_type=Booking.ServiceType.COURT_RENTAL,
            price=Decimal('50000'),
            court_id=court.id,
            start_time=at(10),
            end_time=at(11),
        )

        assert booking.status == Booking.Status.CONFIRMED
        assert booking.court_id == court.id
        assert booking.booking_date == at(10)
        assert BalanceService.calculate_balance(funded_student.id, tenant_id) == Decimal('450000.00')
        assert BalanceService.get_cached_balance(funded_student.id, tenant_id) == Decimal('450000.00')

    def test_rental_without_end_time(self, tenant_id, court, funded_student, at):
        with pytest.raises(InvalidRequestError, match='end_time'):
            self.service.create_booking(
                tenant_id=tenant_id,
                student_id=funded_student.id,
                service_type=Booking.ServiceType.COURT_RENTAL,
                price='50000',
                court_id=court.id,
                start_time=at(10),
            )

        assert not Booking.objects.exists()
        assert BalanceService.get_cached_balance(funded_student.id, tenant_id) == Decimal('500000.00')

    def test_naive_times_are_localised(self, tenant_id, court, funded_student, booking_day):
        start = datetime.combine(booking_day, datetime.min.time()).replace(hour=9)

        booking = self.service.create_booking(
            tenant_id=tenant_id,
            student_id=funded_student.id,
            service_type=Booking.ServiceType.COURT_RENTAL,
            price='50000',
            court_id=court.id,
            start_time=start,
            end_time=start + timedelta(hours=1),
        )

        assert booking.booking_date.tzinfo is not None

    def test_no_double_booking(self, tenant_id, court, funded_student, create_student, at):
        self.service.create_booking(
            tenant_id=tenant_id,
            student_id=funded_student.id,
            service_type=Booking.ServiceType.COURT_RENTAL,
            price='50000',
            court_id=court.id,
            start_time=at(10),
            end_time=at(11),
        )
        other = create_student(name='Other', top_up='100000')

        with pytest.raises(SlotConflictError) as exc_info:
            self.service.create_booking(
                tenant_id=tenant_id,
                student_id=other.id,
                service_type=Booking.ServiceType.COURT_RENTAL,
                price='50000',
                court_id=court.id,
                start_time=at(10, 30),
                end_time=at(11, 30),
            )

        assert exc_info.value.cause == IntervalKind.COURT_RENTAL
        assert str(exc_info.value) == "Court is blocked by a court rental"
        assert Booking.objects.filter(court=court).count() == 1
        assert BalanceService.calculate_balance(other.id, tenant_id) == Decimal('100000.00')

    def test_back_to_back_rentals(self, tenant_id, court, funded_student, at):
        for hour in (10, 11):
            self.service.create_booking(
                tenant_id=tenant_id,
                student_id=funded_student.id,
                service_type=Booking.ServiceType.COURT_RENTAL,
                price='50000',
                court_id=court.id,
                start_time=at(hour),
                end_time=at(hour + 1),
            )

        assert Booking.objects.filter(court=court, status=Booking.Status.CONFIRMED).count() == 2

    def test_rental_blocked_by_lesson(
        self, tenant_id, court, funded_student, create_schedule, at
    ):
        schedule = create_schedule(at(16), at(17), court=court)
        self.service.create_booking(
            tenant_id=tenant_id,
            student_id=funded_student.id,
            service_type=Booking.ServiceType.INDIVIDUAL_LESSON,
            price='30000',
            schedule_id=schedule.id,
        )

        with pytest.raises(SlotConflictError) as exc_info:
            self.service.create_booking(
                tenant_id=tenant_id,
                student_id=funded_student.id,
                service_type=Booking.ServiceType.COURT_RENTAL,
                price='50000',
                court_id=court.id,
                start_time=at(16, 30),
                end_time=at(17, 30),
            )

        assert exc_info.value.cause == IntervalKind.LESSON
        assert str(exc_info.value) == "Court is taken by another lesson"

    def test_rental_blocked_by_blocked_schedule(
        self, tenant_id, court, funded_student, create_schedule, at
    ):
        create_schedule(at(8), at(9), court=court, is_blocked=True, is_available=False)

        with pytest.raises(SlotConflictError) as exc_info:
            self.service.create_booking(
                tenant_id=tenant_id,
                student_id=funded_student.id,
                service_type=Booking.ServiceType.COURT_RENTAL,
                price='50000',
                court_id=court.id,
                start_time=at(8),
                end_time=at(9),
            )

        assert exc_info.value.cause == IntervalKind.BLOCKED_SCHEDULE

    def test_inactive_court(self, tenant_id, create_court, funded_student, at):
        closed = create_court(is_active=False)

        with pytest.raises(InvalidRequestError):
            self.service.create_booking(
                tenant_id=tenant_id,
                student_id=funded_student.id,
                service_type=Booking.ServiceType.COURT_RENTAL,
                price='50000',
                court_id=closed.id,
                start_time=at(10),
                end_time=at(11),
            )

    def test_court_of_other_tenant(self, tenant_id, other_tenant_id, create_court, funded_student, at):
        foreign = create_court(tenant=other_tenant_id)

        with pytest.raises(NotFoundError):
            self.service.create_booking(
                tenant_id=tenant_id,
                student_id=funded_student.id,
                service_type=Booking.ServiceType.COURT_RENTAL,
                price='50000',
                court_id=foreign.id,
                start_time=at(10),
                end_time=at(11),
            )


@pytest.mark.django_db
class TestBalanceGate:
    """Tests for the insufficient funds gate."""

    def setup_method(self):
        self.service = BookingService()

    def test_insufficient_funds_persists_nothing(self, tenant_id, court, create_student, at):
        student = create_student()

        with pytest.raises(InsufficientFundsError) as exc_info:
            self.service.create_booking(
                tenant_id=tenant_id,
                student_id=student.id,
                service_type=Booking.ServiceType.COURT_RENTAL,
                price='50000',
                court_id=court.id,
                start_time=at(10),
                end_time=at(11),
            )

        assert exc_info.value.balance == Decimal('0.00')
        assert exc_info.value.required == Decimal('50000')
        assert not Booking.objects.filter(student_id=student.id).exists()
        assert StudentTenant.get_for(student.id, tenant_id).balance == Decimal('0.00')

    def test_gate_uses_ledger_not_cache(self, tenant_id, court, create_student, at):
        student = create_student()
        StudentTenant.objects.filter(student_id=student.id).update(balance=Decimal('999999'))

        with pytest.raises(InsufficientFundsError):
            self.service.create_booking(
                tenant_id=tenant_id,
                student_id=student.id,
                service_type=Booking.ServiceType.COURT_RENTAL,
                price='50000',
                court_id=court.id,
                start_time=at(10),
                end_time=at(11),
            )

    def test_exact_balance_is_enough(self, tenant_id, court, create_student, at):
        student = create_student(top_up='50000')

        booking = self.service.create_booking(
            tenant_id=tenant_id,
            student_id=student.id,
            service_type=Booking.ServiceType.COURT_RENTAL,
            price='50000',
            court_id=court.id,
            start_time=at(10),
            end_time=at(11),
        )

        assert booking.status == Booking.Status.CONFIRMED
        assert BalanceService.calculate_balance(student.id, tenant_id) == Decimal('0.00')

    def test_balance_is_per_tenant(self, tenant_id, other_tenant_id, court, create_student, at):
        student = create_student(top_up='500000', tenant=other_tenant_id)

        with pytest.raises(InsufficientFundsError):
            self.service.create_booking(
                tenant_id=tenant_id,
                student_id=student.id,
                service_type=Booking.ServiceType.COURT_RENTAL,
                price='50000',
                court_id=court.id,
                start_time=at(10),
                end_time=at(11),
            )


@pytest.mark.django_db
class TestLessonBooking:
    """Tests for lesson bookings."""

    def setup_method(self):
        self.service = BookingService()

    def test_lesson_claims_schedule(
        self, tenant_id, court, funded_student, create_schedule, at, professor_id
    ):
        schedule = create_schedule(at(16), at(17), court=court)

        booking = self.service.create_booking(
            tenant_id=tenant_id,
            student_id=funded_student.id,
            service_type=Booking.ServiceType.INDIVIDUAL_LESSON,
            price='30000',
            schedule_id=schedule.id,
        )

        schedule.refresh_from_db()
        assert booking.schedule_id == schedule.id
        assert booking.court_id == court.id
        assert booking.professor_id == professor_id
        assert booking.booking_date == at(16)
        assert booking.end_time is None
        assert schedule.is_available is False
        assert schedule.student_id == funded_student.id
        assert BalanceService.calculate_balance(funded_student.id, tenant_id) == Decimal('470000.00')

    def test_booked_schedule_is_unavailable(
        self, tenant_id, court, funded_student, create_student, create_schedule, at
    ):
        schedule = create_schedule(at(16), at(17), court=court)
        self.service.create_booking(
            tenant_id=tenant_id,
            student_id=funded_student.id,
            service_type=Booking.ServiceType.GROUP_LESSON,
            price='20000',
            schedule_id=schedule.id,
        )

        with pytest.raises(ScheduleUnavailableError):
            self.service.create_booking(
                tenant_id=tenant_id,
                student_id=create_student(top_up='100000').id,
                service_type=Booking.ServiceType.GROUP_LESSON,
                price='20000',
                schedule_id=schedule.id,
            )

    def test_blocked_schedule_is_unavailable(
        self, tenant_id, funded_student, create_schedule, at
    ):
        schedule = create_schedule(at(9), at(10))
        schedule.block('Maintenance')

        with pytest.raises(ScheduleUnavailableError) as exc_info:
            self.service.create_booking(
                tenant_id=tenant_id,
                student_id=funded_student.id,
                service_type=Booking.ServiceType.INDIVIDUAL_LESSON,
                price='30000',
                schedule_id=schedule.id,
            )

        assert 'Maintenance' in str(exc_info.value)

    def test_lesson_blocked_by_rental(
        self, tenant_id, court, funded_student, create_schedule, at
    ):
        schedule = create_schedule(at(16), at(17), court=court)
        self.service.create_booking(
            tenant_id=tenant_id,
            student_id=funded_student.id,
            service_type=Booking.ServiceType.COURT_RENTAL,
            price='50000',
            court_id=court.id,
            start_time=at(16, 30),
            end_time=at(17, 30),
        )

        with pytest.raises(SlotConflictError) as exc_info:
            self.service.create_booking(
                tenant_id=tenant_id,
                student_id=funded_student.id,
                service_type=Booking.ServiceType.INDIVIDUAL_LESSON,
                price='30000',
                schedule_id=schedule.id,
            )

        schedule.refresh_from_db()
        assert exc_info.value.cause == IntervalKind.COURT_RENTAL
        assert schedule.is_available is True

    def test_lesson_without_court_gets_allocated_court(
        self, tenant_id, create_court, funded_student, create_student, create_schedule, at
    ):
        first = create_court(name='Court 1')
        second = create_court(name='Court 2')
        self.service.create_booking(
            tenant_id=tenant_id,
            student_id=create_student(top_up='50000').id,
            service_type=Booking.ServiceType.COURT_RENTAL,
            price='50000',
            court_id=first.id,
            start_time=at(16),
            end_time=at(17),
        )
        schedule = create_schedule(at(16), at(17))

        booking = self.service.create_booking(
            tenant_id=tenant_id,
            student_id=funded_student.id,
            service_type=Booking.ServiceType.INDIVIDUAL_LESSON,
            price='30000',
            schedule_id=schedule.id,
        )

        assert booking.court_id == second.id

    def test_lesson_on_inactive_court(
        self, tenant_id, create_court, funded_student, create_schedule, at
    ):
        closed = create_court(name='Closed', is_active=False)
        schedule = create_schedule(at(16), at(17), court=closed)

        with pytest.raises(InvalidRequestError):
            self.service.create_booking(
                tenant_id=tenant_id,
                student_id=funded_student.id,
                service_type=Booking.ServiceType.INDIVIDUAL_LESSON,
                price='30000',
                schedule_id=schedule.id,
            )

        schedule.refresh_from_db()
        assert schedule.is_available is True
        assert not Booking.objects.exists()

    def test_lesson_without_any_free_court(
        self, tenant_id, funded_student, create_schedule, at
    ):
        schedule = create_schedule(at(16), at(17))

        booking = self.service.create_booking(
            tenant_id=tenant_id,
            student_id=funded_student.id,
            service_type=Booking.ServiceType.INDIVIDUAL_LESSON,
            price='30000',
            schedule_id=schedule.id,
        )

        assert booking.court_id is None

    def test_lesson_requires_court_when_configured(
        self, tenant_id, funded_student, create_schedule, at, settings
    ):
        settings.BOOKING_REQUIRE_COURT_FOR_LESSONS = True
        schedule = create_schedule(at(16), at(17))

        with pytest.raises(SlotConflictError):
            self.service.create_booking(
                tenant_id=tenant_id,
                student_id=funded_student.id,
                service_type=Booking.ServiceType.INDIVIDUAL_LESSON,
                price='30000',
                schedule_id=schedule.id,
            )

    def test_lost_schedule_claim_rolls_back(
        self, tenant_id, funded_student, create_schedule, at
    ):
        schedule = create_schedule(at(16), at(17), is_available=False)

        with patch.object(BookingService, '_resolve_lesson', return_value=(schedule, None)):
            with pytest.raises(ScheduleUnavailableError):
                self.service.create_booking(
                    tenant_id=tenant_id,
                    student_id=funded_student.id,
                    service_type=Booking.ServiceType.INDIVIDUAL_LESSON,
                    price='30000',
                    schedule_id=schedule.id,
                )

        assert not Booking.objects.filter(schedule=schedule).exists()
        assert BalanceService.get_cached_balance(funded_student.id, tenant_id) == Decimal('500000.00')

    def test_unknown_schedule(self, tenant_id, funded_student):
        with pytest.raises(NotFoundError):
            self.service.create_booking(
                tenant_id=tenant_id,
                student_id=funded_student.id,
                service_type=Booking.ServiceType.INDIVIDUAL_LESSON,
                price='30000',
                schedule_id=uuid.uuid4(),
            )


@pytest.mark.django_db
class TestBookingValidation:
    """Tests for request validation."""

    def setup_method(self):
        self.service = BookingService()

    @pytest.mark.parametrize('overrides', [
        {'service_type': 'tournament'},
        {'price': '0'},
        {'price': '-10'},
        {'price': 'abc'},
        {'court_id': None},
        {'start_time': None},
        {'end_time': None},
    ])
    def test_invalid_rental_requests(self, overrides, tenant_id, court, funded_student, at):
        request = {
            'tenant_id': tenant_id,
            'student_id': funded_student.id,
            'service_type': Booking.ServiceType.COURT_RENTAL,
            'price': '50000',
            'court_id': court.id,
            'start_time': at(10),
            'end_time': at(11),
        }
        request.update(overrides)

        with pytest.raises(InvalidRequestError):
            self.service.create_booking(**request)

    def test_inverted_window(self, tenant_id, court, funded_student, at):
        with pytest.raises(InvalidRequestError):
            self.service.create_booking(
                tenant_id=tenant_id,
                student_id=funded_student.id,
                service_type=Booking.ServiceType.COURT_RENTAL,
                price='50000',
                court_id=court.id,
                start_time=at(11),
                end_time=at(10),
            )

    def test_lesson_requires_schedule(self, tenant_id, funded_student):
        with pytest.raises(InvalidRequestError):
            self.service.create_booking(
                tenant_id=tenant_id,
                student_id=funded_student.id,
                service_type=Booking.ServiceType.INDIVIDUAL_LESSON,
                price='30000',
            )

    def test_unknown_student(self, tenant_id, court, at):
        with pytest.raises(NotFoundError):
            self.service.create_booking(
                tenant_id=tenant_id,
                student_id=uuid.uuid4(),
                service_type=Booking.ServiceType.COURT_RENTAL,
                price='50000',
                court_id=court.id,
                start_time=at(10),
                end_time=at(11),
            )

    def test_inactive_student(self, tenant_id, court, create_student, at):
        student = create_student(is_active=False, top_up='500000')

        with pytest.raises(InvalidRequestError):
            self.service.create_booking(
                tenant_id=tenant_id,
                student_id=student.id,
                service_type=Booking.ServiceType.COURT_RENTAL,
                price='50000',
                court_id=court.id,
                start_time=at(10),
                end_time=at(11),
            )


@pytest.mark.django_db
class TestBookingTransitions:
    """Tests for cancel and complete."""

    def setup_method(self):
        self.service = BookingService()

    def _rental(self, tenant_id, student, court, start):
        return self.service.create_booking(
            tenant_id=tenant_id,
            student_id=student.id,
            service_type=Booking.ServiceType.COURT_RENTAL,
            price='50000',
            court_id=court.id,
            start_time=start,
        )

    def test_cancel_restores_balance(self, tenant_id, court, funded_student, at):
        booking = self._rental(tenant_id, funded_student, court, at(10))

        cancelled = self.service.cancel_booking(booking.id, tenant_id=tenant_id, reason='Rain')

        assert cancelled.status == Booking.Status.CANCELLED
        assert cancelled.cancellation_reason == 'Rain'
        assert cancelled.cancelled_at is not None
        assert BalanceService.calculate_balance(funded_student.id, tenant_id) == Decimal('500000.00')
        assert BalanceService.get_cached_balance(funded_student.id, tenant_id) == Decimal('500000.00')

    def test_cancel_frees_the_court(self, tenant_id, court, funded_student, at):
        booking = self._rental(tenant_id, funded_student, court, at(10))
        self.service.cancel_booking(booking.id, tenant_id=tenant_id)

        again = self._rental(tenant_id, funded_student, court, at(10))

        assert again.status == Booking.Status.CONFIRMED

    def test_cancel_releases_schedule(self, tenant_id, court, funded_student, create_schedule, at):
        schedule = create_schedule(at(16), at(17), court=court)
        booking = self.service.create_booking(
            tenant_id=tenant_id,
            student_id=funded_student.id,
            service_type=Booking.ServiceType.INDIVIDUAL_LESSON,
            price='30000',
            schedule_id=schedule.id,
        )

        self.service.cancel_booking(booking.id, tenant_id=tenant_id)

        schedule.refresh_from_db()
        assert schedule.is_available is True
        assert schedule.student_id is None

    def test_cancel_settled_booking_restores_price(
        self, tenant_id, court, funded_student, at
    ):
        booking = self._rental(tenant_id, funded_student, court, at(10))
        PaymentService().record_payment(
            tenant_id=tenant_id,
            student_id=funded_student.id,
            amount='40000',
            booking_id=booking.id,
        )
        assert BalanceService.calculate_balance(funded_student.id, tenant_id) == Decimal('450000.00')

        self.service.cancel_booking(booking.id, tenant_id=tenant_id)

        assert BalanceService.calculate_balance(funded_student.id, tenant_id) == Decimal('500000.00')
        assert BalanceService.validate_balance(funded_student.id, tenant_id)['is_valid']

    def test_cancel_twice(self, tenant_id, court, funded_student, at):
        booking = self._rental(tenant_id, funded_student, court, at(10))
        self.service.cancel_booking(booking.id, tenant_id=tenant_id)

        with pytest.raises(BookingStateError):
            self.service.cancel_booking(booking.id, tenant_id=tenant_id)

    def test_complete_keeps_debt(self, tenant_id, court, funded_student, at):
        booking = self._rental(tenant_id, funded_student, court, at(10))

        completed = self.service.complete_booking(booking.id, tenant_id=tenant_id)

        assert completed.status == Booking.Status.COMPLETED
        assert completed.completed_at is not None
        assert BalanceService.calculate_balance(funded_student.id, tenant_id) == Decimal('450000.00')

    def test_completed_booking_cannot_be_cancelled(self, tenant_id, court, funded_student, at):
        booking = self._rental(tenant_id, funded_student, court, at(10))
        self.service.complete_booking(booking.id, tenant_id=tenant_id)

        with pytest.raises(BookingStateError):
            self.service.cancel_booking(booking.id, tenant_id=tenant_id)

    def test_cancel_in_other_tenant(self, tenant_id, other_tenant_id, court, funded_student, at):
        booking = self._rental(tenant_id, funded_student, court, at(10))

        with pytest.raises(NotFoundError):
            self.service.cancel_booking(booking.id, tenant_id=other_tenant_id)


@pytest.mark.django_db
class TestBookingQueries:
    """Tests for booking queries."""

    def setup_method(self):
        self.service = BookingService()

    def test_list_bookings_by_date_and_status(
        self, tenant_id, court, funded_student, at, booking_day
    ):
        first = self.service.create_booking(
            tenant_id=tenant_id,
            student_id=funded_student.id,
            service_type=Booking.ServiceType.COURT_RENTAL,
            price='50000',
            court_id=court.id,
            start_time=at(10),
            end_time=at(11),
        )
        self.service.create_booking(
            tenant_id=tenant_id,
            student_id=funded_student.id,
            service_type=Booking.ServiceType.COURT_RENTAL,
            price='50000',
            court_id=court.id,
            start_time=at(10, day=booking_day + timedelta(days=1)),
            end_time=at(11, day=booking_day + timedelta(days=1)),
        )
        self.service.cancel_booking(first.id, tenant_id=tenant_id)

        same_day = self.service.list_bookings(tenant_id, target_date=booking_day)
        confirmed = self.service.list_student_bookings(
            tenant_id, funded_student.id, status=Booking.Status.CONFIRMED
        )

        assert [b.id for b in same_day] == [first.id]
        assert len(confirmed) == 1

    def test_get_booking_not_found(self, tenant_id):
        with pytest.raises(NotFoundError):
            self.service.get_booking(uuid.uuid4(), tenant_id=tenant_id)
