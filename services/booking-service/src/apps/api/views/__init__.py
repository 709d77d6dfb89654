# services/booking-service/src/apps/api/views/__init__.py
"""
Booking API Views
"""

from .booking_views import (
    BookingViewSet,
)

from .availability_views import (
    CourtViewSet,
    ScheduleViewSet,
    OperatingHoursView,
)

from .payment_views import (
    PaymentViewSet,
    StudentBalanceView,
    StudentBalanceValidateView,
)


__all__ = [
    # Booking
    'BookingViewSet',

    # Availability
    'CourtViewSet',
    'ScheduleViewSet',
    'OperatingHoursView',

    # Payments
    'PaymentViewSet',
    'StudentBalanceView',
    'StudentBalanceValidateView',
]
