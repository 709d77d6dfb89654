# services/booking-service/src/apps/api/views/filters.py
"""
API Filters

Django Filter classes for booking API.
"""

import django_filters

from apps.core.models import Booking, Payment


class BookingFilter(django_filters.FilterSet):
    """Filter for booking queries."""

    # Date filters
    date = django_filters.DateFilter(
        field_name='booking_date',
        lookup_expr='date'
    )
    date_from = django_filters.DateFilter(
        field_name='booking_date',
        lookup_expr='date__gte'
    )
    date_to = django_filters.DateFilter(
        field_name='booking_date',
        lookup_expr='date__lte'
    )

    # Status filters
    status = django_filters.ChoiceFilter(
        choices=Booking.Status.choices
    )
    active = django_filters.BooleanFilter(
        method='filter_active'
    )

    # Resource filters
    student_id = django_filters.UUIDFilter()
    professor_id = django_filters.UUIDFilter()
    court_id = django_filters.UUIDFilter(field_name='court_id')
    schedule_id = django_filters.UUIDFilter(field_name='schedule_id')

    # Type filters
    service_type = django_filters.ChoiceFilter(
        choices=Booking.ServiceType.choices
    )

    class Meta:
        model = Booking
        fields = ['status', 'service_type', 'student_id', 'professor_id']

    def filter_active(self, queryset, name, value):
        if value:
            return queryset.filter(status__in=Booking.ACTIVE_STATUSES)
        return queryset.exclude(status__in=Booking.ACTIVE_STATUSES)


class PaymentFilter(django_filters.FilterSet):
    """Filter for payment queries."""

    student_id = django_filters.UUIDFilter()
    booking_id = django_filters.UUIDFilter(field_name='booking_id')
    status = django_filters.ChoiceFilter(choices=Payment.Status.choices)
    method = django_filters.ChoiceFilter(choices=Payment.Method.choices)
    top_up = django_filters.BooleanFilter(field_name='booking', lookup_expr='isnull')

    class Meta:
        model = Payment
        fields = ['student_id', 'status', 'method']
