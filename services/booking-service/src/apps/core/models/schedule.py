# services/booking-service/src/apps/core/models/schedule.py
"""
Schedule Model

Fixed lesson slots published by professors.
"""

import uuid

from django.db import models


class Schedule(models.Model):
    """
    A professor's lesson slot.

    is_available is false exactly when the slot is booked or blocked.
    A slot may be tied to a court; slots without a court never
    block court rentals.
    """

    # Primary Key
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tenant_id = models.UUIDField(db_index=True)

    professor_id = models.UUIDField(db_index=True)
    court = models.ForeignKey(
        'core.Court',
        on_delete=models.PROTECT,
        related_name='schedules',
        blank=True,
        null=True
    )

    # Window
    start_time = models.DateTimeField(db_index=True)
    end_time = models.DateTimeField()

    # Status
    is_available = models.BooleanField(default=True, db_index=True)
    is_blocked = models.BooleanField(default=False)
    block_reason = models.CharField(max_length=255, blank=True, null=True)

    # Occupant once booked
    student_id = models.UUIDField(blank=True, null=True)

    # Metadata
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'schedules'
        ordering = ['start_time']
        indexes = [
            models.Index(fields=['tenant_id', 'start_time']),
            models.Index(fields=['court', 'start_time', 'end_time']),
            models.Index(fields=['professor_id', 'start_time']),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_time__gt=models.F('start_time')),
                name='valid_schedule_times'
            ),
        ]

    def __str__(self):
        return f"Schedule {self.start_time:%Y-%m-%d %H:%M} - {self.end_time:%H:%M}"

    # ==========================================================================
    # Properties
    # ==========================================================================

    @property
    def is_bookable(self) -> bool:
        return self.is_available and not self.is_blocked

    # ==========================================================================
    # Status Transitions
    # ==========================================================================

    def block(self, reason: str = None):
        """Block the slot so it can no longer be booked."""
        self.is_blocked = True
        self.is_available = False
        self.block_reason = reason
        self.save(update_fields=['is_blocked', 'is_available', 'block_reason', 'updated_at'])

    def release(self):
        """Make a booked slot available again."""
        self.is_available = not self.is_blocked
        self.student_id = None
        self.save(update_fields=['is_available', 'student_id', 'updated_at'])
