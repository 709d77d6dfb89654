# services/booking-service/src/config/__init__.py
"""
Booking Service configuration package.
"""

# Load the Celery application when Django starts so shared tasks register.
from .celery import app as celery_app  # noqa: F401

__all__ = ('celery_app',)
