# services/booking-service/src/apps/api/views/base.py
"""
Shared view helpers: tenant resolution and service error translation.
"""

import logging
import uuid

from shared.common.exceptions import (
    BadRequestException,
    NotFoundException,
    ConflictException,
    InsufficientBalanceException,
    BookingConflictException,
    ScheduleUnavailableException,
    BookingStateException,
    ConfigurationException,
)
from shared.common.constants import HEADER_TENANT_ID
from shared.common.utils import is_valid_uuid

from apps.core.exceptions import (
    NotFoundError,
    InsufficientFundsError,
    SlotConflictError,
    ScheduleUnavailableError,
    InvalidRequestError,
    ConfigurationError,
    BookingStateError,
    BookingServiceError,
)

logger = logging.getLogger(__name__)


def to_api_exception(exc: BookingServiceError):
    """Map a service error to the shared API exception family."""
    message = str(exc)

    if isinstance(exc, NotFoundError):
        return NotFoundException(message)

    if isinstance(exc, InsufficientFundsError):
        extra = {}
        if exc.balance is not None:
            extra = {'balance': str(exc.balance), 'required': str(exc.required)}
        return InsufficientBalanceException(message, extra_data=extra)

    if isinstance(exc, SlotConflictError):
        return BookingConflictException(message, extra_data={
            'cause': exc.cause,
            'conflicts': [c.to_dict() for c in exc.conflicts],
        })

    if isinstance(exc, ScheduleUnavailableError):
        return ScheduleUnavailableException(message)

    if isinstance(exc, InvalidRequestError):
        return BadRequestException(message)

    if isinstance(exc, BookingStateError):
        return BookingStateException(message)

    if isinstance(exc, ConfigurationError):
        return ConfigurationException(message)

    return ConflictException(message)


class ServiceViewMixin:
    """
    Resolves the tenant from the X-Tenant-ID header and converts
    booking service errors into API exceptions.
    """

    def initial(self, request, *args, **kwargs):
        super().initial(request, *args, **kwargs)
        self.tenant_id = self.get_tenant_id()

    def get_tenant_id(self) -> uuid.UUID:
        tenant_id = getattr(self.request, 'tenant_id', None) or self.request.headers.get(HEADER_TENANT_ID)
        if not tenant_id:
            raise BadRequestException('X-Tenant-ID header is required')
        if not is_valid_uuid(tenant_id):
            raise BadRequestException('X-Tenant-ID header must be a UUID')
        return uuid.UUID(str(tenant_id))

    def handle_exception(self, exc):
        if isinstance(exc, BookingServiceError):
            logger.info(
                f"{type(exc).__name__}: {exc}",
                extra={'request_id': getattr(self.request, 'request_id', None)}
            )
            exc = to_api_exception(exc)
        return super().handle_exception(exc)
