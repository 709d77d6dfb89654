# services/booking-service/src/apps/api/urls.py
"""
Booking API URL Configuration

Defines all API routes for the booking service.
"""

from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import (
    # Booking
    BookingViewSet,
    # Availability
    CourtViewSet,
    ScheduleViewSet,
    OperatingHoursView,
    # Payments
    PaymentViewSet,
    StudentBalanceView,
    StudentBalanceValidateView,
)

app_name = 'api'

# Create router and register viewsets
router = DefaultRouter()
router.register(r'bookings', BookingViewSet, basename='booking')
router.register(r'courts', CourtViewSet, basename='court')
router.register(r'schedules', ScheduleViewSet, basename='schedule')
router.register(r'payments', PaymentViewSet, basename='payment')

urlpatterns = [
    # Router URLs
    path('', include(router.urls)),

    # Availability
    path('operating-hours/', OperatingHoursView.as_view(), name='operating-hours'),

    # Balances
    path(
        'students/<uuid:student_id>/balance/',
        StudentBalanceView.as_view(),
        name='student-balance'
    ),
    path(
        'students/<uuid:student_id>/balance/validate/',
        StudentBalanceValidateView.as_view(),
        name='student-balance-validate'
    ),
]
