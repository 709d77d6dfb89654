# services/booking-service/src/tests/conftest.py
"""
Pytest Configuration and Fixtures

Provides common fixtures for booking service tests.
"""

import uuid
from datetime import datetime, date, timedelta
from decimal import Decimal

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from apps.core.models import Court, Schedule, Student, Payment, StudentTenant


@pytest.fixture
def api_client():
    """Provide API client for testing."""
    return APIClient()


@pytest.fixture
def tenant_id():
    """Provide a test tenant ID."""
    return uuid.uuid4()


@pytest.fixture
def other_tenant_id():
    """Provide a second tenant ID for isolation tests."""
    return uuid.uuid4()


@pytest.fixture
def professor_id():
    """Provide a test professor ID."""
    return uuid.uuid4()


@pytest.fixture
def tenant_headers(tenant_id):
    """Provide tenant headers for API requests."""
    return {
        'HTTP_X_TENANT_ID': str(tenant_id),
    }


@pytest.fixture
def booking_day():
    """A fixed future day; tests run in UTC."""
    return date(2030, 6, 12)


@pytest.fixture
def at(booking_day):
    """Build an aware datetime on the booking day."""
    def _at(hour, minute=0, day=None):
        return timezone.make_aware(
            datetime.combine(day or booking_day, datetime.min.time()).replace(hour=hour, minute=minute)
        )
    return _at


@pytest.fixture
def create_student(db, tenant_id):
    """Factory fixture for students with an optional paid top-up."""
    def _create_student(name='Test Student', is_active=True, top_up=None, tenant=None):
        student = Student.objects.create(name=name, is_active=is_active)
        tenant = tenant or tenant_id
        StudentTenant.objects.create(student_id=student.id, tenant_id=tenant)

        if top_up:
            amount = Decimal(str(top_up))
            Payment.objects.create(
                tenant_id=tenant,
                student_id=student.id,
                amount=amount,
                status=Payment.Status.PAID,
                payment_date=timezone.now(),
            )
            StudentTenant.objects.filter(
                student_id=student.id, tenant_id=tenant
            ).update(balance=amount)

        return student
    return _create_student


@pytest.fixture
def create_court(db, tenant_id):
    """Factory fixture for courts."""
    def _create_court(name='Court 1', tenant=None, **kwargs):
        defaults = {
            'tenant_id': tenant or tenant_id,
            'name': name,
            'surface': 'clay',
            'hourly_price': Decimal('50000.00'),
        }
        defaults.update(kwargs)
        return Court.objects.create(**defaults)
    return _create_court


@pytest.fixture
def create_schedule(db, tenant_id, professor_id):
    """Factory fixture for lesson schedules."""
    def _create_schedule(start, end=None, court=None, **kwargs):
        defaults = {
            'tenant_id': tenant_id,
            'professor_id': professor_id,
            'court': court,
            'start_time': start,
            'end_time': end or start + timedelta(hours=1),
        }
        defaults.update(kwargs)
        return Schedule.objects.create(**defaults)
    return _create_schedule


@pytest.fixture
def court(create_court):
    return create_court()


@pytest.fixture
def funded_student(create_student):
    """Student with a 500000 top-up."""
    return create_student(top_up='500000')
