# services/booking-service/src/apps/api/apps.py
"""
REST API for bookings, availability and balances.
"""

from django.apps import AppConfig


class ApiConfig(AppConfig):
    name = 'apps.api'
    label = 'booking_api'
    verbose_name = 'Court Booking API'
