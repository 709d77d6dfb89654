# services/booking-service/src/apps/api/views/availability_views.py
"""
Availability API Views

Courts, hourly slots, available schedules and operating hours.
"""

import logging

from django.db import transaction
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.views import APIView

from shared.common.exceptions import NotFoundException
from shared.common.mixins import TenantFilterMixin
from shared.common.pagination import StandardPagination

from apps.core.models import Court, Schedule
from apps.core.services import AvailabilityService, CourtAllocator
from apps.api.serializers import (
    CourtSerializer,
    ScheduleSerializer,
    TimeWindowQuerySerializer,
    SlotQuerySerializer,
    ScheduleQuerySerializer,
    AvailableSlotsSerializer,
    OperatingHoursSerializer,
    OperatingHoursUpdateSerializer,
)
from .base import ServiceViewMixin

logger = logging.getLogger(__name__)


class CourtViewSet(ServiceViewMixin, TenantFilterMixin, viewsets.ReadOnlyModelViewSet):
    """ViewSet for courts with availability lookups."""

    queryset = Court.objects.all()
    serializer_class = CourtSerializer
    pagination_class = StandardPagination

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.availability_service = AvailabilityService()
        self.court_allocator = CourtAllocator(self.availability_service)

    @action(detail=False, methods=['get'])
    def available(self, request):
        """Find the first free court for a time window."""
        serializer = TimeWindowQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)

        court = self.court_allocator.find_available_court(
            self.tenant_id,
            serializer.validated_data['start_time'],
            serializer.validated_data['end_time'],
        )
        if court is None:
            raise NotFoundException('No court available for the requested time window')

        return Response(CourtSerializer(court).data)

    @action(detail=True, methods=['get'])
    def slots(self, request, pk=None):
        """Hourly availability of a court on a date."""
        serializer = SlotQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        target_date = serializer.validated_data['date']

        slots = self.availability_service.get_available_slots(self.tenant_id, pk, target_date)

        return Response(AvailableSlotsSerializer({
            'court_id': pk,
            'date': target_date,
            **slots,
        }).data)


class ScheduleViewSet(ServiceViewMixin, TenantFilterMixin, viewsets.ReadOnlyModelViewSet):
    """ViewSet for lesson schedules."""

    queryset = Schedule.objects.select_related('court')
    serializer_class = ScheduleSerializer
    pagination_class = StandardPagination

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.availability_service = AvailabilityService()

    @action(detail=False, methods=['get'])
    def available(self, request):
        """Bookable schedules, hiding those taken over by a court rental."""
        serializer = ScheduleQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)

        schedules = self.availability_service.list_available_schedules(
            self.tenant_id,
            target_date=serializer.validated_data.get('date'),
            professor_id=serializer.validated_data.get('professor_id'),
        )

        return Response(ScheduleSerializer(schedules, many=True).data)


class OperatingHoursView(ServiceViewMixin, APIView):
    """Get or replace the tenant's weekly operating hours."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.availability_service = AvailabilityService()

    def get(self, request):
        hours = self.availability_service.get_operating_hours(self.tenant_id)
        return Response({
            'hours': OperatingHoursSerializer(hours, many=True).data,
            'weekly': self.availability_service.get_weekly_schedule(self.tenant_id),
        })

    def put(self, request):
        data = request.data
        if isinstance(data, dict):
            data = data.get('hours', [data])

        serializer = OperatingHoursUpdateSerializer(data=data, many=True)
        serializer.is_valid(raise_exception=True)

        with transaction.atomic():
            for entry in serializer.validated_data:
                self.availability_service.set_operating_hours(self.tenant_id, **entry)

        hours = self.availability_service.get_operating_hours(self.tenant_id)
        return Response({
            'hours': OperatingHoursSerializer(hours, many=True).data,
            'weekly': self.availability_service.get_weekly_schedule(self.tenant_id),
        }, status=status.HTTP_200_OK)
