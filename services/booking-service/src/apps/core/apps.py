# services/booking-service/src/apps/core/apps.py
"""
Core app: courts, schedules, bookings and the balance ledger.
"""

from django.apps import AppConfig


class CoreConfig(AppConfig):
    name = 'apps.core'
    label = 'core'
    verbose_name = 'Court Booking Core'

    def ready(self):
        """Connect event publishing and cache invalidation signals."""
        from . import signals  # noqa: F401
