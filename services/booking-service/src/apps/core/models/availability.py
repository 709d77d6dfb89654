# services/booking-service/src/apps/core/models/availability.py
"""
Operating Hours Model

Defines when a facility's courts can be booked.
"""

import uuid
from datetime import date

from django.db import models


class OperatingHours(models.Model):
    """
    Operating hours of a tenant for one weekday.

    Hours are whole hours of the day; close_hour is exclusive so
    (6, 22) yields the slots 06:00 through 21:00.
    """

    class DayOfWeek(models.IntegerChoices):
        SUNDAY = 0, 'Sunday'
        MONDAY = 1, 'Monday'
        TUESDAY = 2, 'Tuesday'
        WEDNESDAY = 3, 'Wednesday'
        THURSDAY = 4, 'Thursday'
        FRIDAY = 5, 'Friday'
        SATURDAY = 6, 'Saturday'

    # Primary Key
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tenant_id = models.UUIDField(db_index=True)

    # Day and Hours
    day_of_week = models.IntegerField(choices=DayOfWeek.choices)
    open_hour = models.IntegerField()
    close_hour = models.IntegerField()

    # Status
    is_active = models.BooleanField(default=True)

    # Metadata
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'operating_hours'
        ordering = ['day_of_week', 'open_hour']
        constraints = [
            models.UniqueConstraint(
                fields=['tenant_id', 'day_of_week'],
                name='unique_tenant_day_hours'
            ),
        ]

    def __str__(self):
        return f"{self.get_day_of_week_display()}: {self.open_hour:02d}:00 - {self.close_hour:02d}:00"

    @staticmethod
    def day_index(target_date: date) -> int:
        """Weekday of a date with 0=Sunday."""
        return (target_date.weekday() + 1) % 7

    @classmethod
    def get_for_date(cls, tenant_id: uuid.UUID, target_date: date):
        """Get operating hours for a specific date."""
        return cls.objects.filter(
            tenant_id=tenant_id,
            day_of_week=cls.day_index(target_date),
            is_active=True
        ).first()
