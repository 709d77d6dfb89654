# services/booking-service/src/apps/api/views/booking_views.py
"""
Booking API Views

Creation, listing and status transitions of bookings.
"""

import logging

from rest_framework import viewsets, status, filters
from rest_framework.decorators import action
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend

from shared.common.mixins import TenantFilterMixin
from shared.common.pagination import StandardPagination

from apps.core.models import Booking
from apps.core.services import BookingService
from apps.api.serializers import (
    BookingSerializer,
    BookingCreateSerializer,
    BookingCancelSerializer,
)
from .base import ServiceViewMixin
from .filters import BookingFilter

logger = logging.getLogger(__name__)


class BookingViewSet(ServiceViewMixin, TenantFilterMixin, viewsets.ReadOnlyModelViewSet):
    """
    ViewSet for bookings.

    Bookings are created through the booking workflow and never
    deleted; cancel and complete are the only transitions.
    """

    queryset = Booking.objects.select_related('schedule', 'court')
    serializer_class = BookingSerializer
    pagination_class = StandardPagination
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_class = BookingFilter
    ordering_fields = ['booking_date', 'created_at', 'status', 'price']
    ordering = ['-booking_date']

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.booking_service = BookingService()

    def create(self, request, *args, **kwargs):
        """Create a new booking."""
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        booking = self.booking_service.create_booking(
            tenant_id=self.tenant_id,
            **serializer.validated_data
        )

        return Response(
            BookingSerializer(booking).data,
            status=status.HTTP_201_CREATED
        )

    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        """Cancel a booking and release its schedule."""
        serializer = BookingCancelSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        booking = self.booking_service.cancel_booking(
            pk,
            tenant_id=self.tenant_id,
            reason=serializer.validated_data.get('reason')
        )
        return Response(BookingSerializer(booking).data)

    @action(detail=True, methods=['post'])
    def complete(self, request, pk=None):
        """Mark a booking as completed."""
        booking = self.booking_service.complete_booking(pk, tenant_id=self.tenant_id)
        return Response(BookingSerializer(booking).data)
