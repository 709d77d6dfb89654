# services/booking-service/src/apps/core/events.py
"""
Booking Service Events

Event definitions and publishing for the booking service.
"""

import json
import logging
from datetime import datetime, timezone as dt_timezone
from decimal import Decimal
from typing import Any, Dict
from uuid import UUID

import redis
from django.conf import settings

logger = logging.getLogger(__name__)


class EventType:
    """Event type constants for booking service."""

    # Booking lifecycle events
    BOOKING_CREATED = 'booking.created'
    BOOKING_CANCELLED = 'booking.cancelled'
    BOOKING_COMPLETED = 'booking.completed'

    # Ledger events
    PAYMENT_RECORDED = 'payment.recorded'
    PAYMENT_CANCELLED = 'payment.cancelled'
    BALANCE_DRIFT_DETECTED = 'balance.drift_detected'


class JSONEncoder(json.JSONEncoder):
    """Custom JSON encoder for event payloads."""

    def default(self, obj):
        if isinstance(obj, UUID):
            return str(obj)
        if isinstance(obj, datetime):
            return obj.isoformat()
        if isinstance(obj, Decimal):
            return str(obj)
        return super().default(obj)


class EventPublisher:
    """
    Event publisher for booking service.

    Publishes events to the configured backend ('log' or 'redis').
    Publishing failures are logged and never raised to the caller.
    """

    def __init__(self):
        self.service_name = 'booking-service'
        self._redis = None

    @property
    def enabled(self) -> bool:
        return getattr(settings, 'EVENT_PUBLISHING_ENABLED', True)

    def publish(
        self,
        event_type: str,
        payload: Dict[str, Any],
        tenant_id: UUID = None,
        correlation_id: str = None,
    ) -> bool:
        """
        Publish an event.

        Args:
            event_type: Type of event (e.g., 'booking.created')
            payload: Event data
            tenant_id: Tenant context
            correlation_id: Optional correlation ID for tracing

        Returns:
            True if published successfully, False otherwise
        """
        if not self.enabled:
            logger.debug(f"Event publishing disabled, skipping: {event_type}")
            return False

        event = {
            'event_type': event_type,
            'service': self.service_name,
            'timestamp': datetime.now(dt_timezone.utc).isoformat(),
            'tenant_id': str(tenant_id) if tenant_id else None,
            'correlation_id': correlation_id,
            'payload': payload,
        }

        try:
            event_json = json.dumps(event, cls=JSONEncoder)

            logger.info(f"Publishing event: {event_type}", extra={
                'event_type': event_type,
                'tenant_id': str(tenant_id) if tenant_id else None,
            })

            self._publish_to_backend(event_type, event_json)

            return True

        except (TypeError, ValueError, redis.RedisError) as e:
            logger.error(f"Failed to publish event {event_type}: {e}")
            return False

    def _publish_to_backend(self, event_type: str, event_json: str):
        """Publish to the configured message backend."""
        backend = getattr(settings, 'EVENT_BACKEND', 'log')

        if backend == 'redis':
            self._publish_redis(event_type, event_json)
        else:
            logger.debug(f"Event payload: {event_json[:500]}")

    def _publish_redis(self, event_type: str, event_json: str):
        """Publish to Redis pub/sub."""
        if self._redis is None:
            self._redis = redis.Redis.from_url(settings.REDIS_URL)

        channel = f"events:{event_type}"
        self._redis.publish(channel, event_json)


# Global event publisher instance
event_publisher = EventPublisher()


# Convenience functions for publishing specific events
def publish_booking_created(booking):
    """Publish booking created event."""
    event_publisher.publish(
        EventType.BOOKING_CREATED,
        payload={
            'booking_id': booking.id,
            'service_type': booking.service_type,
            'status': booking.status,
            'student_id': booking.student_id,
            'schedule_id': booking.schedule_id,
            'court_id': booking.court_id,
            'booking_date': booking.booking_date,
            'end_time': booking.end_time,
            'price': booking.price,
        },
        tenant_id=booking.tenant_id
    )


def publish_booking_cancelled(booking, reason: str = None):
    """Publish booking cancelled event."""
    event_publisher.publish(
        EventType.BOOKING_CANCELLED,
        payload={
            'booking_id': booking.id,
            'service_type': booking.service_type,
            'student_id': booking.student_id,
            'schedule_id': booking.schedule_id,
            'court_id': booking.court_id,
            'reason': reason,
        },
        tenant_id=booking.tenant_id
    )


def publish_booking_completed(booking):
    """Publish booking completed event."""
    event_publisher.publish(
        EventType.BOOKING_COMPLETED,
        payload={
            'booking_id': booking.id,
            'student_id': booking.student_id,
            'completed_at': booking.completed_at,
        },
        tenant_id=booking.tenant_id
    )


def publish_payment_recorded(payment):
    """Publish payment recorded event."""
    event_publisher.publish(
        EventType.PAYMENT_RECORDED,
        payload={
            'payment_id': payment.id,
            'student_id': payment.student_id,
            'booking_id': payment.booking_id,
            'amount': payment.amount,
            'status': payment.status,
            'method': payment.method,
        },
        tenant_id=payment.tenant_id
    )


def publish_payment_cancelled(payment):
    """Publish payment cancelled event."""
    event_publisher.publish(
        EventType.PAYMENT_CANCELLED,
        payload={
            'payment_id': payment.id,
            'student_id': payment.student_id,
            'booking_id': payment.booking_id,
            'amount': payment.amount,
        },
        tenant_id=payment.tenant_id
    )


def publish_balance_drift(student_id, tenant_id, cached: Decimal, computed: Decimal):
    """Publish balance drift detected event."""
    event_publisher.publish(
        EventType.BALANCE_DRIFT_DETECTED,
        payload={
            'student_id': student_id,
            'cached': cached,
            'computed': computed,
            'difference': computed - cached,
        },
        tenant_id=tenant_id
    )
