# services/booking-service/src/apps/core/services/__init__.py
"""
Booking Service Business Logic
"""

from apps.core.exceptions import (
    BookingServiceError,
    NotFoundError,
    InsufficientFundsError,
    SlotConflictError,
    ScheduleUnavailableError,
    InvalidRequestError,
    ConfigurationError,
    BookingStateError,
)

from .availability_service import AvailabilityService
from .court_allocator import CourtAllocator
from .balance_service import BalanceService
from .booking_service import BookingService
from .payment_service import PaymentService


__all__ = [
    # Services
    'AvailabilityService',
    'CourtAllocator',
    'BalanceService',
    'BookingService',
    'PaymentService',

    # Exceptions
    'BookingServiceError',
    'NotFoundError',
    'InsufficientFundsError',
    'SlotConflictError',
    'ScheduleUnavailableError',
    'InvalidRequestError',
    'ConfigurationError',
    'BookingStateError',
]
