# services/booking-service/src/config/celery.py
"""
Celery application for Booking Service.
"""

import os

from celery import Celery

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.base')

app = Celery('booking_service')

app.config_from_object('django.conf:settings', namespace='CELERY')
app.autodiscover_tasks()


# ============================================================================
# CELERY BEAT SCHEDULE (Periodic Tasks)
# ============================================================================

app.conf.beat_schedule = {
    # Reconcile cached balances with the ledger
    'reconcile-balances': {
        'task': 'booking.reconcile_balances',
        'schedule': float(os.environ.get('BALANCE_RECONCILE_INTERVAL_SECONDS', '3600')),
    },
}
