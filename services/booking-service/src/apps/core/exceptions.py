# services/booking-service/src/apps/core/exceptions.py
"""
Booking Service Exceptions
"""


class BookingServiceError(Exception):
    """Base exception for booking service errors."""
    pass


class NotFoundError(BookingServiceError):
    """Student, court, schedule, booking or payment not found."""
    pass


class InsufficientFundsError(BookingServiceError):
    """Ledger balance is below the booking price."""

    def __init__(self, message: str, balance=None, required=None):
        super().__init__(message)
        self.balance = balance
        self.required = required


class SlotConflictError(BookingServiceError):
    """
    Requested window is already occupied on the court.

    `cause` is the kind of the first conflicting interval
    (court_rental, lesson or blocked_schedule).
    """

    def __init__(self, message: str, cause: str = None, conflicts=None):
        super().__init__(message)
        self.cause = cause
        self.conflicts = conflicts or []


class ScheduleUnavailableError(BookingServiceError):
    """Lesson slot is already booked or blocked."""
    pass


class InvalidRequestError(BookingServiceError):
    """Missing fields, inverted window, non-positive amount or unknown kind."""
    pass


class ConfigurationError(BookingServiceError):
    """Malformed tenant configuration such as operating hours."""
    pass


class BookingStateError(BookingServiceError):
    """Invalid booking state transition."""
    pass
