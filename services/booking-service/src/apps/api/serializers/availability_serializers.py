# services/booking-service/src/apps/api/serializers/availability_serializers.py
"""
Availability Serializers

Serializers for courts, schedules, slots and operating hours.
"""

from rest_framework import serializers

from apps.core.models import Court, Schedule, OperatingHours


class CourtSerializer(serializers.ModelSerializer):
    class Meta:
        model = Court
        fields = ['id', 'tenant_id', 'name', 'surface', 'hourly_price', 'is_active', 'created_at']
        read_only_fields = fields


class ScheduleSerializer(serializers.ModelSerializer):
    court_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = Schedule
        fields = [
            'id', 'tenant_id', 'professor_id', 'court_id',
            'start_time', 'end_time',
            'is_available', 'is_blocked', 'block_reason', 'student_id',
        ]
        read_only_fields = fields


class TimeWindowQuerySerializer(serializers.Serializer):
    """Query parameters for a time window."""

    start_time = serializers.DateTimeField()
    end_time = serializers.DateTimeField()

    def validate(self, attrs):
        if attrs['end_time'] <= attrs['start_time']:
            raise serializers.ValidationError({
                'end_time': "End time must be after start time"
            })
        return attrs


class SlotQuerySerializer(serializers.Serializer):
    date = serializers.DateField()


class ScheduleQuerySerializer(serializers.Serializer):
    date = serializers.DateField(required=False)
    professor_id = serializers.UUIDField(required=False)


class AvailableSlotsSerializer(serializers.Serializer):
    """Hourly slot labels of a court on a day."""

    court_id = serializers.UUIDField()
    date = serializers.DateField()
    available = serializers.ListField(child=serializers.CharField())
    booked = serializers.ListField(child=serializers.CharField())


class OperatingHoursSerializer(serializers.ModelSerializer):
    """Operating hours serializer."""

    day_name = serializers.CharField(
        source='get_day_of_week_display',
        read_only=True
    )

    class Meta:
        model = OperatingHours
        fields = [
            'id', 'tenant_id', 'day_of_week', 'day_name',
            'open_hour', 'close_hour', 'is_active',
        ]
        read_only_fields = ['id', 'tenant_id']


class OperatingHoursUpdateSerializer(serializers.Serializer):
    """One weekday of operating hours."""

    day_of_week = serializers.ChoiceField(choices=OperatingHours.DayOfWeek.choices)
    open_hour = serializers.IntegerField(min_value=0, max_value=24)
    close_hour = serializers.IntegerField(min_value=0, max_value=24)
    is_active = serializers.BooleanField(default=True)

    def validate(self, attrs):
        if attrs['open_hour'] >= attrs['close_hour']:
            raise serializers.ValidationError({
                'close_hour': "Closing hour must be after opening hour"
            })
        return attrs
