# services/booking-service/src/apps/core/models/booking.py
"""
Booking Model

Reservations of lesson slots and free-form court rentals.
"""

import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


class Booking(models.Model):
    """
    A student's reservation.

    A court rental always carries a court and a start (booking_date) and
    optionally an explicit end. A lesson always carries a schedule and
    inherits its window from it. Bookings are never deleted; they only
    move through the status workflow.
    """

    class ServiceType(models.TextChoices):
        INDIVIDUAL_LESSON = 'individual_lesson', 'Individual Lesson'
        GROUP_LESSON = 'group_lesson', 'Group Lesson'
        COURT_RENTAL = 'court_rental', 'Court Rental'

    class Status(models.TextChoices):
        PENDING = 'pending', 'Pending'
        CONFIRMED = 'confirmed', 'Confirmed'
        COMPLETED = 'completed', 'Completed'
        CANCELLED = 'cancelled', 'Cancelled'

    ACTIVE_STATUSES = (Status.PENDING, Status.CONFIRMED)
    LESSON_TYPES = (ServiceType.INDIVIDUAL_LESSON, ServiceType.GROUP_LESSON)

    # Primary Key
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tenant_id = models.UUIDField(db_index=True)

    # Participants
    student_id = models.UUIDField(db_index=True)
    professor_id = models.UUIDField(blank=True, null=True, db_index=True)

    # Resources
    schedule = models.ForeignKey(
        'core.Schedule',
        on_delete=models.PROTECT,
        related_name='bookings',
        blank=True,
        null=True
    )
    court = models.ForeignKey(
        'core.Court',
        on_delete=models.PROTECT,
        related_name='bookings',
        blank=True,
        null=True
    )

    service_type = models.CharField(
        max_length=30,
        choices=ServiceType.choices,
        db_index=True
    )

    # Pricing
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )

    # Status
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True
    )

    # Time
    booking_date = models.DateTimeField(db_index=True)
    end_time = models.DateTimeField(blank=True, null=True)

    notes = models.TextField(blank=True, null=True)

    # Cancellation
    cancelled_at = models.DateTimeField(blank=True, null=True)
    cancellation_reason = models.TextField(blank=True, null=True)

    # Completion
    completed_at = models.DateTimeField(blank=True, null=True)

    # Audit
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'bookings'
        ordering = ['booking_date']
        indexes = [
            models.Index(fields=['tenant_id', 'booking_date']),
            models.Index(fields=['court', 'status', 'booking_date']),
            models.Index(fields=['student_id', 'tenant_id', 'status']),
            models.Index(fields=['schedule', 'status']),
        ]

    def __str__(self):
        return f"{self.get_service_type_display()} {self.booking_date:%Y-%m-%d %H:%M} ({self.status})"

    # ==========================================================================
    # Properties
    # ==========================================================================

    @property
    def is_active(self) -> bool:
        return self.status in self.ACTIVE_STATUSES

    @property
    def is_rental(self) -> bool:
        return self.service_type == self.ServiceType.COURT_RENTAL

    @property
    def is_lesson(self) -> bool:
        return self.service_type in self.LESSON_TYPES

    @property
    def can_cancel(self) -> bool:
        return self.is_active

    @property
    def can_complete(self) -> bool:
        return self.is_active

    # ==========================================================================
    # Status Transitions
    # ==========================================================================

    def cancel(self, reason: str = None):
        """Cancel the booking."""
        if not self.can_cancel:
            raise ValueError(f"Cannot cancel booking in {self.status} status")

        self.status = self.Status.CANCELLED
        self.cancelled_at = timezone.now()
        self.cancellation_reason = reason
        self.save(update_fields=['status', 'cancelled_at', 'cancellation_reason', 'updated_at'])

    def complete(self):
        """Mark the booking as completed."""
        if not self.can_complete:
            raise ValueError(f"Cannot complete booking in {self.status} status")

        self.status = self.Status.COMPLETED
        self.completed_at = timezone.now()
        self.save(update_fields=['status', 'completed_at', 'updated_at'])
