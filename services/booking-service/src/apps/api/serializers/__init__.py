# services/booking-service/src/apps/api/serializers/__init__.py
"""
Booking API Serializers
"""

from .booking_serializers import (
    BookingSerializer,
    BookingCreateSerializer,
    BookingCancelSerializer,
)

from .availability_serializers import (
    CourtSerializer,
    ScheduleSerializer,
    TimeWindowQuerySerializer,
    SlotQuerySerializer,
    ScheduleQuerySerializer,
    AvailableSlotsSerializer,
    OperatingHoursSerializer,
    OperatingHoursUpdateSerializer,
)

from .payment_serializers import (
    PaymentSerializer,
    PaymentCreateSerializer,
    BalanceSerializer,
    BalanceValidationSerializer,
)

__all__ = [
    # Booking
    'BookingSerializer',
    'BookingCreateSerializer',
    'BookingCancelSerializer',

    # Availability
    'CourtSerializer',
    'ScheduleSerializer',
    'TimeWindowQuerySerializer',
    'SlotQuerySerializer',
    'ScheduleQuerySerializer',
    'AvailableSlotsSerializer',
    'OperatingHoursSerializer',
    'OperatingHoursUpdateSerializer',

    # Payments
    'PaymentSerializer',
    'PaymentCreateSerializer',
    'BalanceSerializer',
    'BalanceValidationSerializer',
]
