# services/booking-service/src/apps/core/models/__init__.py
"""
Booking Service Models
"""

from .court import Court
from .schedule import Schedule
from .booking import Booking
from .payment import Payment
from .student import Student, StudentTenant
from .availability import OperatingHours

__all__ = [
    'Court',
    'Schedule',
    'Booking',
    'Payment',
    'Student',
    'StudentTenant',
    'OperatingHours',
]
