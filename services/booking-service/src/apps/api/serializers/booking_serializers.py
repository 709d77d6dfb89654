# services/booking-service/src/apps/api/serializers/booking_serializers.py
"""
Booking Serializers

Serializers for booking creation and status transitions.
"""

from rest_framework import serializers

from apps.core import intervals
from apps.core.models import Booking


class BookingSerializer(serializers.ModelSerializer):
    """Base booking serializer."""

    service_type_display = serializers.CharField(
        source='get_service_type_display',
        read_only=True
    )
    status_display = serializers.CharField(
        source='get_status_display',
        read_only=True
    )
    schedule_id = serializers.UUIDField(read_only=True)
    court_id = serializers.UUIDField(read_only=True)
    court_name = serializers.CharField(source='court.name', read_only=True, default=None)
    start_time = serializers.SerializerMethodField()
    end = serializers.SerializerMethodField()
    can_cancel = serializers.BooleanField(read_only=True)

    class Meta:
        model = Booking
        fields = [
            'id', 'tenant_id', 'student_id', 'professor_id',
            'schedule_id', 'court_id', 'court_name',
            'service_type', 'service_type_display',
            'status', 'status_display',
            'price', 'booking_date', 'end_time',
            'start_time', 'end',
            'notes', 'can_cancel',
            'cancelled_at', 'cancellation_reason', 'completed_at',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def get_start_time(self, obj):
        """Start of the occupied window."""
        interval = intervals.from_booking(obj)
        return interval.start if interval else obj.booking_date

    def get_end(self, obj):
        """End of the occupied window, defaulted for open rentals."""
        interval = intervals.from_booking(obj)
        return interval.end if interval else None


class BookingCreateSerializer(serializers.Serializer):
    """
    Serializer for creating new bookings.

    Court rentals take court_id, start_time and end_time;
    lessons take schedule_id.
    """

    student_id = serializers.UUIDField()
    service_type = serializers.ChoiceField(choices=Booking.ServiceType.choices)
    price = serializers.DecimalField(max_digits=10, decimal_places=2)
    schedule_id = serializers.UUIDField(required=False, allow_null=True)
    court_id = serializers.UUIDField(required=False, allow_null=True)
    start_time = serializers.DateTimeField(required=False, allow_null=True)
    end_time = serializers.DateTimeField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class BookingCancelSerializer(serializers.Serializer):
    """Serializer for cancelling a booking."""

    reason = serializers.CharField(
        required=False,
        allow_blank=True,
        allow_null=True,
        max_length=1000
    )
